import logging
from typing import Iterable

from .base import BaseHardwareModule
from .dispatcher import Dispatcher, PanelScope, ResolutionScope
from .reporter import BaseReporter, DispatchEvent, EventKind, LoggerReporter
from backend.exceptions import DuplicateSignalError
from backend.state.state_store import StateStore
from backend.transport.base import BaseTransport
from config.settings import Settings
from schemas.oid import Oid
from schemas.outcome import DispatchOutcome
from schemas.registry import PanelDescriptor


class Panel(BaseHardwareModule):
    """コントロールパネル

    名前・ポート・有効フラグと、アドレス可能なシグナルの部分集合を持つ。
    受信した行は自身のDispatcherで処理する。

    使用例:
        >>> panel = Panel("Pedestal.Trim", ["OverheadBrightForOledStep"], "COM3")
        >>> panel.on_data_received(panel.name, "OverheadBrightForOledStep I 100")
        <DispatchOutcome.APPLIED: 'applied'>

    Attributes:
        name (str): パネル名 (モジュール内で一意)
        port (str): 論理ポート名
        enabled (bool): 有効フラグ (Falseならディスパッチしない)
        signals (tuple[Oid, ...]): 登録シグナル (構築後は変更しない)
        transport (BaseTransport | None): 転送先
        dispatcher (Dispatcher): ディスパッチ処理
    """

    def __init__(
        self,
        name: str,
        signal_names: Iterable[str],
        port: str,
        enabled: bool = True,
        transport: BaseTransport | None = None,
        state_store: StateStore | None = None,
        reporter: BaseReporter | None = None,
    ) -> None:
        """パネルを構築する

        シグナル名はOidへ解決する。解決できない名前は警告を出して除外し、
        同じシグナルへ解決される名前が2つ以上あれば構築自体を失敗させる。

        Args:
            name: パネル名
            signal_names: シグナル名のリスト
            port: 論理ポート名
            enabled: 有効フラグ
            transport: 転送先トランスポート
            state_store: 既定のステートストア (Noneならパネル専用に生成)
            reporter: イベント通知先 (NoneならLoggerReporter)

        Raises:
            DuplicateSignalError: 同じシグナルが重複している場合
        """
        self.name = name
        self.port = port
        self.enabled = enabled
        self.transport = transport
        self.reporter = reporter if reporter is not None else LoggerReporter()
        self.signals: tuple[Oid, ...] = self._resolve_signals(signal_names)
        self.dispatcher = Dispatcher(
            name,
            PanelScope(self),
            transport=transport,
            state_store=state_store,
            reporter=self.reporter,
        )
        self.connected = False
        self._stopped = False

    def __str__(self) -> str:
        return f"Name: {self.name} Port: {self.port} Status: {self.enabled}"

    def _report(self, kind: EventKind, message: str, level: int = logging.INFO) -> None:
        self.reporter.report(
            DispatchEvent(source=self.name, kind=kind, message=message, level=level)
        )

    def _resolve_signals(self, signal_names: Iterable[str]) -> tuple[Oid, ...]:
        resolved: list[Oid] = []
        for signal_name in signal_names:
            oid = Oid.resolve(signal_name)
            if not oid.is_defined:
                self._report(
                    EventKind.UNKNOWN_SIGNAL_NAME,
                    f"Unknown signal name {signal_name!r} ignored",
                    logging.WARNING,
                )
                continue
            if oid in resolved:
                raise DuplicateSignalError(
                    f"Signal {oid} is listed more than once in panel {self.name}"
                )
            resolved.append(oid)
        return tuple(resolved)

    @property
    def descriptor(self) -> PanelDescriptor:
        """レジストリ登録用の記述子"""
        return PanelDescriptor(
            name=self.name, signals=self.signals, port=self.port, enabled=self.enabled
        )

    @property
    def state_store(self) -> StateStore:
        return self.dispatcher.state_store

    @property
    def last_raw_message(self) -> str | None:
        return self.dispatcher.pending_message

    @property
    def previous_raw_message(self) -> str | None:
        return self.dispatcher.previous_message

    @property
    def last_resolved_signal(self) -> Oid:
        return self.dispatcher.last_resolved_signal

    @property
    def accepting(self) -> bool:
        """ディスパッチを受け付ける状態ならTrue"""
        return self.enabled and not self._stopped

    def set_scope(self, scope: ResolutionScope) -> None:
        """シグナル解決範囲を差し替える (モジュール登録時に使用)"""
        self.dispatcher.scope = scope

    def initialize(self, config: Settings | None = None) -> bool:
        self._report(EventKind.LIFECYCLE, f"Initializing panel {self.name}")
        return True

    def connect(self, config: Settings | None = None) -> bool:
        """ポートを開き、受信通知をon_data_receivedへ接続する

        Returns:
            bool: 成功時True、トランスポート未設定またはオープン失敗時False
        """
        self._report(EventKind.LIFECYCLE, f"Connecting panel {self.name}")
        if self.transport is None:
            self._report(
                EventKind.LIFECYCLE,
                f"No transport attached to panel {self.name}",
                logging.ERROR,
            )
            return False

        available = self.transport.scan_ports()
        if available and self.port not in available:
            self._report(
                EventKind.LIFECYCLE,
                f"Port {self.port} not found in {available}",
                logging.WARNING,
            )

        if not self.transport.open(self.port):
            self._report(
                EventKind.LIFECYCLE,
                f"Failed to open port {self.port}",
                logging.ERROR,
            )
            return False

        self.transport.set_receive_callback(self._on_transport_received)
        self._stopped = False
        self.connected = True
        return True

    def disconnect(self) -> bool:
        """受信を止めてポートを閉じる

        以降のディスパッチはconnect()し直すまでPANEL_DISCONNECTEDになる。

        Returns:
            bool: 成功時True、失敗時False
        """
        self._report(EventKind.LIFECYCLE, f"Disconnecting panel {self.name}")
        self._stopped = True
        self.connected = False
        if self.transport is None:
            return True
        self.transport.set_receive_callback(None)
        return self.transport.close()

    def _on_transport_received(self, port_name: str, raw_line: str) -> None:
        self.on_data_received(self.name, raw_line)

    def on_data_received(
        self, source_name: str, raw_line: str, state: StateStore | None = None
    ) -> DispatchOutcome:
        """受信した1行をディスパッチする

        Args:
            source_name: 受信元 (通常はパネル名)
            raw_line: 受信した1行
            state: 書き込み先のステートストア (Noneならパネルの既定ストア)

        Returns:
            DispatchOutcome: 処理結果
        """
        if not self.enabled:
            self._report(
                EventKind.REJECTED,
                f"Panel {self.name} is not enabled, dropped: {raw_line!r}",
                logging.WARNING,
            )
            return DispatchOutcome.PANEL_DISABLED
        if self._stopped:
            self._report(
                EventKind.REJECTED,
                f"Panel {self.name} is disconnected, dropped: {raw_line!r}",
                logging.WARNING,
            )
            return DispatchOutcome.PANEL_DISCONNECTED
        return self.dispatcher.on_data_received(source_name, raw_line, state=state)
