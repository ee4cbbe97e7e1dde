"""メモリ上のモックトランスポート

実機なしでパネルを動かすための実装 (TRANSPORT=mock)。
書き込まれたペイロードを記録し、feed()で受信行を模擬する。
"""

import threading

from .base import BaseTransport, ReceiveCallback
from backend.logging import transport_logger as logger


class MockTransport(BaseTransport):
    """メモリ上のトランスポート

    Attributes:
        written (list[str]): 書き込まれたペイロード (書き込み順)
        available_ports (list[str]): scan_ports()が返すポート名
    """

    def __init__(self, available_ports: list[str] | None = None) -> None:
        self.available_ports = list(available_ports or [])
        self.written: list[str] = []
        self.port: str | None = None
        self._callback: ReceiveCallback | None = None
        self._lock = threading.Lock()

    def scan_ports(self) -> list[str]:
        logger.debug(f"Mock ports: {self.available_ports}")
        return list(self.available_ports)

    def open(self, port: str) -> bool:
        self.port = port
        logger.info(f"Opened mock port {port}")
        return True

    def close(self) -> bool:
        if self.port is not None:
            logger.info(f"Closed mock port {self.port}")
        self.port = None
        return True

    def write(self, payload: str) -> None:
        with self._lock:
            self.written.append(payload)
        logger.debug(f"Mock write to {self.port}: {payload}")

    def set_receive_callback(self, callback: ReceiveCallback | None) -> None:
        self._callback = callback

    @property
    def is_open(self) -> bool:
        return self.port is not None

    def feed(self, line: str) -> bool:
        """受信行を模擬する

        ポートが開いていてコールバックが登録されている場合のみ通知する。

        Args:
            line: 受信した1行

        Returns:
            bool: コールバックへ通知した場合True
        """
        if not self.is_open or self._callback is None:
            logger.debug(f"Mock feed ignored (port closed or no callback): {line!r}")
            return False
        self._callback(self.port or "", line)
        return True
