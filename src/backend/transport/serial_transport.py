import threading
import time
from functools import wraps
from typing import Any, Callable, TypeAlias

import serial
from serial.tools import list_ports

from .base import BaseTransport, ReceiveCallback
from backend.exceptions import TransportWriteError
from backend.logging import transport_logger as logger
from config.settings import Settings

Func: TypeAlias = Callable[..., Any]

LINE_TERMINATOR = "\n"
ENCODING = "utf-8"
READER_JOIN_TIMEOUT = 2.0  # 受信スレッド停止待ち（秒）
READ_RETRY_DELAY = 0.05  # 読み取りエラー後の初回待機（秒）
READ_BACKOFF_MAX = 5.0  # 読み取りエラー後の待機上限（秒）


def func_name(func: Func) -> str:
    """関数の名前を取得するユーティリティ関数

    Args:
        func: 関数オブジェクト

    Returns:
        str: 関数名
    """
    return getattr(func, "__name__", repr(func))


def backoff_delay(attempt: int, initial: float, maximum: float) -> float:
    """attempt回目 (0始まり) のリトライ待機時間を計算する

    Examples:
        >>> [backoff_delay(i, 0.2, 1.0) for i in range(4)]
        [0.2, 0.4, 0.8, 1.0]
    """
    return min(initial * (2**attempt), maximum)


def retry_write(func: Func) -> Func:
    """書き込み失敗時に指数バックオフでリトライするデコレータ

    SerialException / OSError / TimeoutError 発生時に、
    設定WRITE_RETRY回まで再試行する。ポートが閉じていれば再オープンを試みる。
    全試行が失敗した場合はTransportWriteErrorを送出する。

    Args:
        func: デコレート対象の関数

    Returns:
        wrapper: ラップされた関数
    """

    @wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        retries = self.settings.WRITE_RETRY
        last_error: Exception | None = None

        for attempt in range(retries + 1):
            try:
                return func(self, *args, **kwargs)
            except (serial.SerialException, OSError, TimeoutError) as e:
                last_error = e
                logger.warning(
                    f"{func_name(func)} failed on {self.port} "
                    f"(attempt {attempt + 1}/{retries + 1}): {e}"
                )
                if attempt >= retries:
                    break
                time.sleep(
                    backoff_delay(
                        attempt,
                        self.settings.WRITE_RETRY_DELAY,
                        self.settings.WRITE_BACKOFF_MAX,
                    )
                )
                if not self.is_open and self.port:
                    self._reopen()

        logger.error(f"Write to {self.port} failed after {retries + 1} attempts")
        raise TransportWriteError(
            f"write to {self.port} failed after {retries + 1} attempts: {last_error}"
        ) from last_error

    return wrapper


class SerialTransport(BaseTransport):
    """pyserialによるシリアルトランスポート

    1パネル = 1インスタンス。open()で受信スレッドを起動し、
    受信した1行ごとに登録済みコールバックへ (ポート名, 行) を通知する。

    使用例:
        >>> transport = SerialTransport(settings)
        >>> transport.set_receive_callback(panel.on_data_received)
        >>> transport.open("/dev/ttyUSB0")
        >>> transport.write('{"link":"oid1","type":"F","value":"12.5"}')

    Attributes:
        settings (Settings): 通信設定 (ボーレート、タイムアウト、リトライ)
        port (str | None): 開いているポート名
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.port: str | None = None
        self._serial: serial.Serial | None = None
        self._callback: ReceiveCallback | None = None
        self._write_lock = threading.Lock()
        self._stop = threading.Event()
        self._reader: threading.Thread | None = None

    def scan_ports(self) -> list[str]:
        ports = [p.device for p in list_ports.comports()]
        logger.debug(f"Available serial ports: {ports}")
        return ports

    def open(self, port: str) -> bool:
        """シリアルポートを開き、受信スレッドを起動する

        Args:
            port: ポート名 (例: "COM3", "/dev/ttyUSB0")

        Returns:
            bool: 成功時True、失敗時False
        """
        if self.is_open:
            if not self._reader_alive():
                logger.warning(f"Reader for {self.port} is not running, restarting")
                self._start_reader()
            else:
                logger.debug(f"Port {self.port} already open")
            return True

        try:
            self._serial = serial.Serial(
                port=port,
                baudrate=self.settings.SERIAL_BAUDRATE,
                timeout=self.settings.SERIAL_TIMEOUT,
                write_timeout=self.settings.SERIAL_TIMEOUT,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            logger.error(f"Failed to open serial port {port}: {e}")
            self._serial = None
            return False

        self.port = port
        self._start_reader()
        logger.info(f"Opened serial port {port} @ {self.settings.SERIAL_BAUDRATE}")
        return True

    def _reader_alive(self) -> bool:
        return self._reader is not None and self._reader.is_alive()

    def _start_reader(self) -> None:
        self._stop.clear()
        self._reader = threading.Thread(
            target=self._rx_loop, name=f"rx-{self.port}", daemon=True
        )
        self._reader.start()

    def _reopen(self) -> None:
        """閉じてしまったポートを開き直す (書き込みリトライ / 受信エラー時)

        受信スレッドが停止していれば再起動する。
        """
        try:
            if self._serial is not None and not self._serial.is_open:
                self._serial.open()
                logger.info(f"Reopened serial port {self.port}")
        except (serial.SerialException, OSError) as e:
            logger.warning(f"Failed to reopen serial port {self.port}: {e}")
            return
        if self.is_open and not self._reader_alive():
            logger.info(f"Restarting reader for {self.port}")
            self._start_reader()

    def close(self) -> bool:
        """受信スレッドを停止し、ポートを閉じる

        Returns:
            bool: 成功時True、失敗時False
        """
        self._stop.set()
        if self._reader is not None and self._reader is not threading.current_thread():
            self._reader.join(timeout=READER_JOIN_TIMEOUT)
        self._reader = None

        try:
            if self._serial is not None:
                self._serial.close()
            logger.info(f"Closed serial port {self.port}")
            return True
        except (serial.SerialException, OSError) as e:
            logger.error(f"Failed to close serial port {self.port}: {e}")
            return False
        finally:
            self._serial = None

    @retry_write
    def write(self, payload: str) -> None:
        with self._write_lock:
            if self._serial is None:
                raise serial.SerialException("Serial port is not open")
            self._serial.write((payload + LINE_TERMINATOR).encode(ENCODING))
            self._serial.flush()
        logger.debug(f"Wrote to {self.port}: {payload}")

    def set_receive_callback(self, callback: ReceiveCallback | None) -> None:
        self._callback = callback

    @property
    def is_open(self) -> bool:
        return self._serial is not None and bool(self._serial.is_open)

    def _rx_loop(self) -> None:
        """受信ループ

        タイムアウト付きreadlineで1行ずつ読み、改行を除いてコールバックへ渡す。
        コールバック内の例外はログに残して受信を継続する。
        読み取りエラー時は指数バックオフで待機し、ポートが閉じていれば開き直して
        受信を再開する。ループを抜けるのはclose()されたときだけ。
        """
        errors = 0
        while not self._stop.is_set():
            ser = self._serial
            if ser is None:
                break
            try:
                raw = ser.readline()
            except (serial.SerialException, OSError) as e:
                if self._stop.is_set():
                    break
                delay = backoff_delay(errors, READ_RETRY_DELAY, READ_BACKOFF_MAX)
                logger.error(
                    f"Read error on {self.port}: {e} (retry in {delay:.2f}s)"
                )
                errors += 1
                # close()で待機を中断できるようにEventで待つ
                if self._stop.wait(delay):
                    break
                self._reopen()
                continue

            errors = 0
            if not raw:
                continue

            line = raw.decode(ENCODING, errors="replace").rstrip("\r\n")
            logger.debug(f"Received on {self.port}: {line!r}")
            callback = self._callback
            if callback is None:
                continue
            try:
                callback(self.port or "", line)
            except Exception as e:
                logger.exception(f"Receive callback failed on {self.port}: {e}")
