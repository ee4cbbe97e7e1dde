from abc import ABC, abstractmethod
from typing import Callable, TypeAlias

# (ポート名, 受信行) を受け取るコールバック
ReceiveCallback: TypeAlias = Callable[[str, str], None]


class BaseTransport(ABC):
    """トランスポートの抽象基底クラス

    パネルはこのインターフェースだけに依存する。
    新しい通信手段 (TCP等) を追加する場合は、このクラスを継承して実装する。
    現在の実装: SerialTransport (pyserial), MockTransport (メモリ上)
    """

    @abstractmethod
    def scan_ports(self) -> list[str]:
        """利用可能なポート名を列挙する

        Returns:
            list[str]: ポート名のリスト (例: ["COM3", "/dev/ttyUSB0"])
        """
        ...

    @abstractmethod
    def open(self, port: str) -> bool:
        """ポートを開く

        Args:
            port: 論理ポート名

        Returns:
            bool: 成功時True、失敗時False
        """
        ...

    @abstractmethod
    def close(self) -> bool:
        """ポートを閉じ、受信を停止する

        Returns:
            bool: 成功時True、失敗時False
        """
        ...

    @abstractmethod
    def write(self, payload: str) -> None:
        """ペイロードを書き込む (応答待ちなし)

        Args:
            payload: 送信する文字列 (JSON)

        Raises:
            TransportWriteError: リトライ後も書き込めなかった場合
        """
        ...

    @abstractmethod
    def set_receive_callback(self, callback: ReceiveCallback | None) -> None:
        """受信行の通知先を設定する

        Args:
            callback: (ポート名, 受信行) を受け取る関数 (Noneで解除)
        """
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """ポートが開いていればTrue"""
        ...
