"""ディスパッチイベントの通知

パネル/ディスパッチャは標準出力やグローバルロガーへ直接書かず、
注入されたReporterのreport()へイベントを渡す。
制御フローには一切使わない副チャネル。
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from backend.logging import panel_logger


class EventKind(str, Enum):
    """イベント種別"""

    RECEIVED = "received"
    SUPPRESSED = "suppressed"
    FORMAT_INVALID = "format_invalid"
    SIGNAL_UNRESOLVED = "signal_unresolved"
    TYPE_UNKNOWN = "type_unknown"
    VALUE_INVALID = "value_invalid"
    APPLIED = "applied"
    TRANSPORT_ERROR = "transport_error"
    UNKNOWN_SIGNAL_NAME = "unknown_signal_name"
    LIFECYCLE = "lifecycle"
    REJECTED = "rejected"


class DispatchEvent(BaseModel):
    """通知イベント

    Attributes:
        source: 発生元 (パネル名またはモジュール名)
        kind: イベント種別
        message: 人が読むためのメッセージ
        level: ログレベル (logging.INFO等)
        timestamp: 発生時刻
    """

    model_config = ConfigDict(frozen=True)

    source: str
    kind: EventKind
    message: str
    level: int = logging.INFO
    timestamp: datetime = Field(default_factory=datetime.now)


class BaseReporter(ABC):
    """イベント通知の抽象基底クラス"""

    @abstractmethod
    def report(self, event: DispatchEvent) -> None:
        """イベントを1件通知する

        Args:
            event: 通知するイベント
        """
        ...


class LoggerReporter(BaseReporter):
    """loggingへ転送するReporter (デフォルト)"""

    def __init__(self, logger: logging.Logger = panel_logger) -> None:
        self.logger = logger

    def report(self, event: DispatchEvent) -> None:
        self.logger.log(
            event.level, f"[{event.source}] {event.kind.value}: {event.message}"
        )


class ListReporter(BaseReporter):
    """イベントをメモリに溜めるReporter

    APIの直近イベント表示やテストで使用する。
    report()は各パネルの受信スレッドから並行に呼ばれるため、追加と読み出しはロックで保護する。
    maxlenを超えた分は古いものから捨てる。
    """

    def __init__(self, maxlen: int | None = None) -> None:
        self.events: deque[DispatchEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def report(self, event: DispatchEvent) -> None:
        with self._lock:
            self.events.append(event)

    def snapshot(self) -> list[DispatchEvent]:
        """溜まっているイベントのコピーを古い順に返す"""
        with self._lock:
            return list(self.events)

    def kinds(self) -> list[EventKind]:
        return [event.kind for event in self.snapshot()]


class CompositeReporter(BaseReporter):
    """複数のReporterへ同じイベントを配る"""

    def __init__(self, *reporters: BaseReporter) -> None:
        self.reporters = list(reporters)

    def report(self, event: DispatchEvent) -> None:
        for reporter in self.reporters:
            reporter.report(event)
