import logging
import threading
from typing import Callable

from .base import BaseHardwareModule
from .dispatcher import ModuleScope
from .panel import Panel
from .reporter import BaseReporter, DispatchEvent, EventKind, LoggerReporter
from backend.exceptions import DuplicatePanelError, DuplicateSignalError
from config.settings import ResolutionMode, Settings
from schemas.oid import Oid
from schemas.registry import LifecycleReport, PanelDescriptor


class Module(BaseHardwareModule):
    """パネルの集合

    パネルを登録順に保持し、ライフサイクル呼び出しを各パネルへ配る。
    レジストリ (パネル名 → 記述子) でパネル名の一意性を保証する。

    resolution=ResolutionMode.MODULE の場合、登録したパネルのディスパッチは
    モジュール内の全パネルのシグナルを検索する。

    使用例:
        >>> module = Module("Pedestal")
        >>> module.add_panel(Panel("Pedestal.Trim", ["OverheadBrightForOledStep"], "COM3"))
        >>> module.initialize_all().ok
        True
    """

    def __init__(
        self,
        name: str,
        resolution: ResolutionMode = ResolutionMode.PANEL,
        reporter: BaseReporter | None = None,
    ) -> None:
        self.name = name
        self.resolution = resolution
        self.reporter = reporter if reporter is not None else LoggerReporter()
        self._panels: list[Panel] = []
        self._registry: dict[str, PanelDescriptor] = {}
        self._lock = threading.RLock()

    def __str__(self) -> str:
        return f"Module: {self.name} Panels: {len(self._panels)}"

    def _report(self, message: str, level: int = logging.INFO) -> None:
        self.reporter.report(
            DispatchEvent(
                source=self.name, kind=EventKind.LIFECYCLE, message=message, level=level
            )
        )

    @property
    def panels(self) -> tuple[Panel, ...]:
        """登録順のパネル一覧 (スナップショット)"""
        with self._lock:
            return tuple(self._panels)

    @property
    def registry(self) -> dict[str, PanelDescriptor]:
        """パネル名 → 記述子 (コピー)"""
        with self._lock:
            return dict(self._registry)

    def add_panel(self, panel: Panel) -> None:
        """パネルを登録する

        検証に失敗した場合は何も変更しない。

        Args:
            panel: 登録するパネル

        Raises:
            DuplicatePanelError: 同名のパネルが登録済みの場合
            DuplicateSignalError: 他のパネルと同じシグナルを持つ場合
        """
        with self._lock:
            if panel.name in self._registry:
                raise DuplicatePanelError(
                    f"Panel {panel.name} is already registered in module {self.name}"
                )

            # モジュール内のパネル間でシグナル名が重複すると解決先が曖昧になる
            for descriptor in self._registry.values():
                overlap = set(descriptor.signals) & set(panel.signals)
                if overlap:
                    names = ", ".join(sorted(oid.value for oid in overlap))
                    raise DuplicateSignalError(
                        f"Panel {panel.name} shares signals ({names}) "
                        f"with panel {descriptor.name} in module {self.name}"
                    )

            self._panels.append(panel)
            self._registry[panel.name] = panel.descriptor
            if self.resolution == ResolutionMode.MODULE:
                panel.set_scope(ModuleScope(self))

        self._report(f"Registered panel {panel}")

    def get_panel(self, name: str) -> Panel | None:
        with self._lock:
            for panel in self._panels:
                if panel.name == name:
                    return panel
        return None

    def resolve_signal(self, link: str) -> Oid:
        """モジュール全体からシグナル名を解決する

        Args:
            link: シグナル名

        Returns:
            Oid: 最初に登録されたパネルで一致したシグナル (なければOid.Undefined)
        """
        return ModuleScope(self).resolve(link)

    def initialize(self, config: Settings | None = None) -> bool:
        self._report(f"Initializing module {self.name}")
        return True

    def connect(self, config: Settings | None = None) -> bool:
        self._report(f"Connecting module {self.name}")
        return True

    def disconnect(self) -> bool:
        self._report(f"Disconnecting module {self.name}")
        return True

    def _fan_out(
        self,
        stage: str,
        module_call: Callable[[], bool],
        panel_call: Callable[[Panel], bool],
    ) -> LifecycleReport:
        """モジュール → 各パネルの順に呼び出す

        無効なパネルは呼び出さない。パネルが失敗・例外を起こしても
        残りのパネルの呼び出しは継続する。
        """
        report = LifecycleReport(stage=stage, module=self.name, module_ok=module_call())

        for panel in self.panels:
            if not panel.enabled:
                self._report(f"{panel.name} is not enabled", logging.DEBUG)
                report.skipped.append(panel.name)
                continue
            try:
                report.panels[panel.name] = bool(panel_call(panel))
            except Exception as e:
                self._report(
                    f"{stage} failed for panel {panel.name}: {e}", logging.ERROR
                )
                report.panels[panel.name] = False

        if not report.ok:
            self._report(
                f"{stage} incomplete for module {self.name}: failed={report.failed}",
                logging.WARNING,
            )
        return report

    def initialize_all(self, config: Settings | None = None) -> LifecycleReport:
        return self._fan_out(
            "initialize",
            lambda: self.initialize(config),
            lambda panel: panel.initialize(config),
        )

    def connect_all(self, config: Settings | None = None) -> LifecycleReport:
        return self._fan_out(
            "connect",
            lambda: self.connect(config),
            lambda panel: panel.connect(config),
        )

    def disconnect_all(self) -> LifecycleReport:
        return self._fan_out(
            "disconnect",
            self.disconnect,
            lambda panel: panel.disconnect(),
        )
