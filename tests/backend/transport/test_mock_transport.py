"""MockTransport / create_transport のテスト"""

from unittest.mock import MagicMock

from backend.transport import create_transport
from backend.transport.mock_transport import MockTransport
from backend.transport.serial_transport import SerialTransport
from config.settings import Settings


class TestMockTransport:
    def test_write_records_payloads(self):
        transport = MockTransport()
        transport.open("COM3")

        transport.write('{"link":"oid1"}')
        transport.write('{"link":"oid2"}')

        assert transport.written == ['{"link":"oid1"}', '{"link":"oid2"}']

    def test_feed_calls_callback_when_open(self):
        transport = MockTransport()
        callback = MagicMock()
        transport.set_receive_callback(callback)
        transport.open("COM3")

        assert transport.feed("oid1 I 1") is True
        callback.assert_called_once_with("COM3", "oid1 I 1")

    def test_feed_ignored_when_closed(self):
        """ポートが閉じていれば通知しないか"""
        transport = MockTransport()
        callback = MagicMock()
        transport.set_receive_callback(callback)

        assert transport.feed("oid1 I 1") is False
        callback.assert_not_called()

    def test_open_close(self):
        transport = MockTransport(available_ports=["COM3"])

        assert transport.scan_ports() == ["COM3"]
        assert transport.open("COM3") is True
        assert transport.is_open is True
        assert transport.close() is True
        assert transport.is_open is False


class TestCreateTransport:
    def test_mock(self):
        assert isinstance(create_transport(Settings(TRANSPORT="mock")), MockTransport)

    def test_serial(self):
        transport = create_transport(Settings(TRANSPORT="serial"))
        assert isinstance(transport, SerialTransport)
        assert transport.is_open is False
