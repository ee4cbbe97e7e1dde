from enum import Enum


class DispatchOutcome(str, Enum):
    """1回のディスパッチ呼び出しの結果

    Attributes:
        SUPPRESSED: 空行または直前に適用済みの行と同一 (何もしない成功)
        FORMAT_INVALID: トークン数が3でない
        SIGNAL_UNRESOLVED: 登録済みシグナルに一致しない (Undefined含む)
        TYPE_UNKNOWN: 型タグが I/F/B 以外
        VALUE_INVALID: 値が型タグに従って解析できない
        APPLIED: ステート更新と転送が完了
        PANEL_DISABLED: 無効化されたパネルへの呼び出し
        PANEL_DISCONNECTED: 切断後のパネルへの呼び出し
    """

    SUPPRESSED = "suppressed"
    FORMAT_INVALID = "format_invalid"
    SIGNAL_UNRESOLVED = "signal_unresolved"
    TYPE_UNKNOWN = "type_unknown"
    VALUE_INVALID = "value_invalid"
    APPLIED = "applied"
    PANEL_DISABLED = "panel_disabled"
    PANEL_DISCONNECTED = "panel_disconnected"

    @property
    def succeeded(self) -> bool:
        """呼び出し側に成功として返す結果ならTrue"""
        return self in (DispatchOutcome.APPLIED, DispatchOutcome.SUPPRESSED)
