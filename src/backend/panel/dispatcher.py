"""メッセージディスパッチャ

受信行 → 分割 → シグナル解決 → 型変換 → ステート更新 → 転送 を1回の呼び出しで完結させる。
解決範囲 (ResolutionScope) を差し替えることで、
パネル単体とモジュール全体の両方のディスパッチを同じ処理で扱う。
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator

from backend.exceptions import (
    InvalidValueError,
    MessageFormatError,
    TransportError,
    UnknownTypeError,
)
from backend.panel.parser import coerce_value, tokenize
from backend.panel.reporter import BaseReporter, DispatchEvent, EventKind, LoggerReporter
from backend.state.state_store import StateStore
from backend.transport.base import BaseTransport
from schemas.message import ParsedMessage
from schemas.oid import Oid
from schemas.outcome import DispatchOutcome

if TYPE_CHECKING:
    from backend.panel.module import Module
    from backend.panel.panel import Panel


class ResolutionScope(ABC):
    """シグナル解決の範囲"""

    @abstractmethod
    def candidates(self) -> Iterator[Oid]:
        """検索対象のシグナルを登録順に返す"""
        ...

    def resolve(self, link: str) -> Oid:
        """シグナル名を登録済みシグナルへ解決する

        登録順に検索し、最初に一致したものを返す。

        Args:
            link: 受信したシグナル名

        Returns:
            Oid: 一致したシグナル (見つからなければOid.Undefined)
        """
        for candidate in self.candidates():
            if candidate.value == link:
                return candidate
        return Oid.Undefined


class PanelScope(ResolutionScope):
    """パネル自身のシグナルだけを検索する"""

    def __init__(self, panel: "Panel") -> None:
        self.panel = panel

    def candidates(self) -> Iterator[Oid]:
        yield from self.panel.signals


class ModuleScope(ResolutionScope):
    """モジュールに登録された全パネルのシグナルを検索する

    パネル一覧はモジュールのロック下で取ったスナップショットを使う。
    """

    def __init__(self, module: "Module") -> None:
        self.module = module

    def candidates(self) -> Iterator[Oid]:
        for panel in self.module.panels:
            yield from panel.signals


class Dispatcher:
    """1パネル分のディスパッチ処理

    呼び出しはロックで直列化され、パネルごとに独立して動作する。

    Attributes:
        name: 所属パネル名 (イベントの発生元)
        scope: シグナル解決範囲
        transport: 転送先 (Noneなら転送しない)
        state_store: 既定のステートストア
        pending_message: 最後に受信した行
        previous_message: 最後に適用に成功した行 (重複抑止に使用)
        last_resolved_signal: 最後に適用したシグナル
    """

    def __init__(
        self,
        name: str,
        scope: ResolutionScope,
        transport: BaseTransport | None = None,
        state_store: StateStore | None = None,
        reporter: BaseReporter | None = None,
    ) -> None:
        self.name = name
        self.scope = scope
        self.transport = transport
        self.state_store = state_store if state_store is not None else StateStore()
        self.reporter = reporter if reporter is not None else LoggerReporter()
        self.pending_message: str | None = None
        self.previous_message: str | None = None
        self.last_resolved_signal: Oid = Oid.Undefined
        self._lock = threading.Lock()

    def _report(self, kind: EventKind, message: str, level: int = logging.INFO) -> None:
        self.reporter.report(
            DispatchEvent(source=self.name, kind=kind, message=message, level=level)
        )

    def on_data_received(
        self, source_name: str, raw_line: str, state: StateStore | None = None
    ) -> DispatchOutcome:
        """受信した1行を処理する

        失敗はすべてReporterへ通知し、結果として返す (例外は送出しない)。
        適用に成功した場合だけ previous_message を更新するので、
        失敗した行は次回受信時にもう一度処理される。

        Args:
            source_name: 受信元 (パネル名)
            raw_line: 受信した1行
            state: 書き込み先のステートストア (Noneなら既定のストア)

        Returns:
            DispatchOutcome: 処理結果
        """
        store = state if state is not None else self.state_store

        with self._lock:
            self._report(
                EventKind.RECEIVED,
                f"{source_name} has received: {raw_line}",
                logging.DEBUG,
            )
            self.pending_message = raw_line

            if not raw_line or raw_line == self.previous_message:
                self._report(
                    EventKind.SUPPRESSED,
                    f"Unchanged data ignored: {raw_line!r}",
                    logging.DEBUG,
                )
                return DispatchOutcome.SUPPRESSED

            try:
                parsed = tokenize(raw_line)
            except MessageFormatError as e:
                self._report(
                    EventKind.FORMAT_INVALID,
                    f"Received invalid data format: {e}",
                    logging.WARNING,
                )
                return DispatchOutcome.FORMAT_INVALID

            target = self.scope.resolve(parsed.link)
            if not target.is_defined:
                self._report(
                    EventKind.SIGNAL_UNRESOLVED,
                    f"Invalid Oid: {parsed.link}",
                    logging.WARNING,
                )
                return DispatchOutcome.SIGNAL_UNRESOLVED

            try:
                value = coerce_value(parsed.type, parsed.value)
            except UnknownTypeError:
                self._report(
                    EventKind.TYPE_UNKNOWN,
                    f"Unknown type {parsed.type} for Oid {target}",
                    logging.WARNING,
                )
                return DispatchOutcome.TYPE_UNKNOWN
            except InvalidValueError as e:
                self._report(
                    EventKind.VALUE_INVALID,
                    f"Format error while parsing value: {parsed.value} ({e})",
                    logging.WARNING,
                )
                return DispatchOutcome.VALUE_INVALID

            store.set(target, value)
            self._forward(parsed)

            self.previous_message = raw_line
            self.last_resolved_signal = target
            self._report(EventKind.APPLIED, f"Set {target} to {value.value}")
            return DispatchOutcome.APPLIED

    def _forward(self, parsed: ParsedMessage) -> None:
        """解析済みメッセージをJSONにしてトランスポートへ渡す

        書き込み失敗は通知のみ行い、適用結果には影響させない。
        """
        if self.transport is None:
            self._report(
                EventKind.TRANSPORT_ERROR,
                "No transport attached, payload not forwarded",
                logging.DEBUG,
            )
            return

        try:
            self.transport.write(parsed.to_payload())
        except TransportError as e:
            self._report(
                EventKind.TRANSPORT_ERROR,
                f"Failed to forward {parsed}: {e}",
                logging.ERROR,
            )
