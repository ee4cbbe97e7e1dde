"""モジュールシステムの例外定義

構築時エラー (重複登録) は例外として送出し、オブジェクトを生成させない。
ディスパッチ時エラー (MessageParseError系) はディスパッチャ内部で
DispatchOutcomeに変換され、呼び出し側へは伝播しない。
"""


class ModuleSystemError(Exception):
    """モジュールシステム共通の基底例外"""

    pass


class RegistrationError(ModuleSystemError):
    """パネル/シグナル登録エラー"""

    pass


class DuplicatePanelError(RegistrationError):
    """同一モジュール内でパネル名が重複"""

    pass


class DuplicateSignalError(RegistrationError):
    """パネル内 (またはモジュール内のパネル間) でシグナルが重複"""

    pass


class WrongTypeError(ModuleSystemError):
    """書き込まれた型と異なるアクセサでステート値を読み出した"""

    pass


class SignalNotSetError(ModuleSystemError, KeyError):
    """一度も書き込まれていないシグナルを読み出した"""

    pass


class MessageParseError(ModuleSystemError):
    """受信メッセージの解析エラー"""

    pass


class MessageFormatError(MessageParseError):
    """トークン数が3でない"""

    pass


class UnknownTypeError(MessageParseError):
    """型タグが I/F/B 以外"""

    pass


class InvalidValueError(MessageParseError):
    """値が型タグに従って解析できない"""

    pass


class TransportError(ModuleSystemError):
    """トランスポート通信エラー"""

    pass


class TransportWriteError(TransportError):
    """リトライ後も書き込みに失敗"""

    pass
