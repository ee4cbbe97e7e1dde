"""モジュール管理サービス

構成ファイルからモジュール/パネルを組み立て、APIサーバー内で一元管理するシングルトン。
受信行のルーティング、ステート参照、ライフサイクル管理を提供する。

ルーティング:
- パネル名でパネルを特定し、そのパネルのディスパッチャへ渡す
- 無効なパネルにはディスパッチしない (PANEL_DISABLED を返す)
"""

import threading
from datetime import datetime
from typing import Any

from backend.logging import api_logger as logger
from backend.logging import app_loggers, apply_log_level
from backend.panel import (
    CompositeReporter,
    ListReporter,
    LoggerReporter,
    Module,
    Panel,
    build_modules,
)
from backend.state.state_store import StateStore
from config.modules_config import load_modules_config, resolve_config_path
from config.settings import Settings
from schemas.outcome import DispatchOutcome
from schemas.registry import LifecycleReport

RECENT_EVENTS_LIMIT = 100


class ModuleService:
    """モジュール管理サービス (シングルトン)

    APIサーバー内でモジュール/パネルを一元管理する。
    """

    _instance: "ModuleService | None" = None
    _lock = threading.Lock()
    _initialized: bool = False

    def __new__(cls) -> "ModuleService":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return
        self._initialized = True

        self._settings = Settings()
        self._modules: list[Module] = []
        self._state_store = StateStore()
        self._recent_events = ListReporter(maxlen=RECENT_EVENTS_LIMIT)
        self._reporter = CompositeReporter(LoggerReporter(), self._recent_events)
        self._started_at: datetime | None = None
        self._last_update: datetime | None = None
        self._ready = False
        self._access_lock = threading.Lock()

        apply_log_level(self._settings.LOG_LEVEL.value, app_loggers)

        logger.info(
            f"ModuleService initialized (TRANSPORT={self._settings.TRANSPORT.value}, "
            f"RESOLUTION_MODE={self._settings.RESOLUTION_MODE.value})"
        )

    def initialize(self) -> list[LifecycleReport]:
        """構成を読み込み、全モジュールを初期化・接続する

        Returns:
            list[LifecycleReport]: 初期化と接続の結果 (モジュールごと)

        Raises:
            FileNotFoundError: 構成ファイルが見つからない場合
            ValueError: 構成ファイルが不正な場合
            RegistrationError: パネル名/シグナルが重複している場合
        """
        # 再初期化時は既存の接続を先に閉じる
        if self._modules:
            self.shutdown()

        config_path = resolve_config_path(self._settings.MODULES_CONFIG_PATH)
        config = load_modules_config(config_path)
        modules = build_modules(
            config,
            self._settings,
            state_store=self._state_store,
            reporter=self._reporter,
        )

        reports: list[LifecycleReport] = []
        for module in modules:
            reports.append(module.initialize_all(self._settings))
            reports.append(module.connect_all(self._settings))

        with self._access_lock:
            self._modules = modules
            self._started_at = datetime.now()
            self._ready = True

        logger.info(
            f"Loaded {len(modules)} modules from {config_path} "
            f"({config.panel_count()} panels)"
        )
        return reports

    def shutdown(self) -> list[LifecycleReport]:
        """全モジュールを切断する

        Returns:
            list[LifecycleReport]: 切断結果 (モジュールごと)
        """
        with self._access_lock:
            modules = list(self._modules)
            self._ready = False

        reports = []
        for module in modules:
            try:
                reports.append(module.disconnect_all())
            except Exception as e:
                logger.warning(f"Error during disconnect of module {module.name}: {e}")
        logger.info("All modules disconnected")
        return reports

    def is_ready(self) -> bool:
        return self._ready

    @property
    def modules(self) -> list[Module]:
        with self._access_lock:
            return list(self._modules)

    def find_panel(self, panel_name: str) -> Panel | None:
        """パネル名からパネルを検索する

        Args:
            panel_name: パネルの完全名 (例: "Pedestal.Trim")

        Returns:
            Panel | None: 見つからなければNone
        """
        for module in self.modules:
            panel = module.get_panel(panel_name)
            if panel is not None:
                return panel
        return None

    def submit(self, panel_name: str, raw_line: str) -> DispatchOutcome:
        """受信行をパネルへルーティングする

        無効なパネルは呼び出さずにPANEL_DISABLEDを返す。

        Args:
            panel_name: パネルの完全名
            raw_line: 受信した1行

        Returns:
            DispatchOutcome: 処理結果

        Raises:
            KeyError: パネルが存在しない場合
        """
        panel = self.find_panel(panel_name)
        if panel is None:
            raise KeyError(f"Unknown panel: {panel_name}")

        if not panel.enabled:
            logger.warning(f"{panel_name} is not enabled, line not dispatched")
            return DispatchOutcome.PANEL_DISABLED

        outcome = panel.on_data_received(panel.name, raw_line)
        if outcome == DispatchOutcome.APPLIED:
            self._last_update = datetime.now()
        return outcome

    def get_state(self) -> dict[str, dict[str, Any]]:
        """ステートストアの現在値を取得

        Returns:
            dict: {"oid1": {"type": "F", "value": 12.5}, ...}
        """
        return self._state_store.dump()

    def get_recent_events(self) -> list[dict[str, Any]]:
        """直近のディスパッチイベントを取得 (古い順)"""
        return [
            event.model_dump(mode="json") for event in self._recent_events.snapshot()
        ]

    def get_status(self) -> dict[str, Any]:
        """サービス状態を取得

        Returns:
            dict: 状態情報
        """
        panels = [panel for module in self.modules for panel in module.panels]
        return {
            "ready": self._ready,
            "transport": self._settings.TRANSPORT.value,
            "resolution_mode": self._settings.RESOLUTION_MODE.value,
            "module_count": len(self.modules),
            "panel_count": len(panels),
            "connected_panels": sum(1 for panel in panels if panel.connected),
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "last_update": (
                self._last_update.isoformat() if self._last_update else None
            ),
        }


# シングルトンインスタンス
module_service = ModuleService()
