"""モジュール構成からModule/Panelを組み立てる"""

from typing import Callable

from .module import Module
from .panel import Panel
from .reporter import BaseReporter, LoggerReporter
from backend.logging import panel_logger as logger
from backend.state.state_store import StateStore
from backend.transport import create_transport
from backend.transport.base import BaseTransport
from config.settings import Settings
from schemas.modules_config import ModulesConfig

PANEL_NAME_SEPARATOR = "."


def panel_full_name(module_name: str, panel_name: str) -> str:
    """モジュール名とパネル名からパネルの完全名を作る

    Examples:
        >>> panel_full_name("Pedestal", "Trim")
        'Pedestal.Trim'
    """
    return f"{module_name}{PANEL_NAME_SEPARATOR}{panel_name}"


def build_modules(
    config: ModulesConfig,
    settings: Settings,
    transport_factory: Callable[[Settings], BaseTransport] = create_transport,
    state_store: StateStore | None = None,
    reporter: BaseReporter | None = None,
) -> list[Module]:
    """モジュール構成からモジュールとパネルを生成する

    全パネルで1つのステートストアを共有する。
    無効なパネルもレジストリには登録するが、トランスポートは割り当てない。

    Args:
        config: 検証済みのモジュール構成
        settings: アプリケーション設定 (解決スコープ、トランスポート種別)
        transport_factory: パネルごとのトランスポート生成関数
        state_store: 共有ステートストア (Noneなら新規生成)
        reporter: イベント通知先 (NoneならLoggerReporter)

    Returns:
        list[Module]: 構成の記述順に並んだモジュール

    Raises:
        DuplicatePanelError: パネル名が重複した場合
        DuplicateSignalError: シグナルが重複した場合
    """
    store = state_store if state_store is not None else StateStore()
    reporter = reporter if reporter is not None else LoggerReporter()
    modules: list[Module] = []

    for module_name, panels in config.modules.items():
        module = Module(
            module_name, resolution=settings.RESOLUTION_MODE, reporter=reporter
        )
        for panel_name, panel_config in panels.items():
            if not panel_config.status:
                logger.info(f"{panel_full_name(module_name, panel_name)} is not enabled")

            panel = Panel(
                panel_full_name(module_name, panel_name),
                panel_config.oids,
                panel_config.port,
                enabled=panel_config.status,
                transport=transport_factory(settings) if panel_config.status else None,
                state_store=store,
                reporter=reporter,
            )
            module.add_panel(panel)

        modules.append(module)
        logger.info(f"Built module {module_name} with {len(module.panels)} panels")

    return modules
