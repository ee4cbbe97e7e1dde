from .base import BaseTransport, ReceiveCallback
from .mock_transport import MockTransport
from .serial_transport import SerialTransport
from config.settings import Settings, TransportKind


def create_transport(settings: Settings) -> BaseTransport:
    """設定TRANSPORTに応じたトランスポートを生成する

    パネル1枚ごとに呼び出し、それぞれ独立したインスタンスを返す。

    Args:
        settings: アプリケーション設定

    Returns:
        BaseTransport: SerialTransport または MockTransport
    """
    if settings.TRANSPORT == TransportKind.SERIAL:
        return SerialTransport(settings)
    return MockTransport()


__all__ = [
    "BaseTransport",
    "MockTransport",
    "ReceiveCallback",
    "SerialTransport",
    "create_transport",
]
