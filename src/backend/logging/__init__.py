from pathlib import Path

from .logger import apply_log_level, setup_logger

# プロジェクトルートのlogsフォルダを使用
# src/backend/logging/__init__.py → 3つ上がプロジェクトルート
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_LOGS_DIR = _PROJECT_ROOT / "logs"

# アプリケーション全体で共通のロガー設定
launcher_logger = setup_logger(
    "backend.launcher", log_file=str(_LOGS_DIR / "launcher.log")
)
panel_logger = setup_logger("backend.panel", log_file=str(_LOGS_DIR / "panel.log"))
transport_logger = setup_logger(
    "backend.transport", log_file=str(_LOGS_DIR / "transport.log")
)
api_logger = setup_logger("api", log_file=str(_LOGS_DIR / "api.log"), level=20)  # INFO

# Settings.LOG_LEVEL の反映対象
app_loggers = (launcher_logger, panel_logger, transport_logger, api_logger)

__all__ = [
    "setup_logger",
    "apply_log_level",
    "launcher_logger",
    "panel_logger",
    "transport_logger",
    "api_logger",
    "app_loggers",
]
