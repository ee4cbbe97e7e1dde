from .settings import LogLevel, ResolutionMode, Settings, TransportKind
from .modules_config import ModulesConfigManager

__all__ = [
    "LogLevel",
    "ModulesConfigManager",
    "ResolutionMode",
    "Settings",
    "TransportKind",
]
