from .builder import build_modules, panel_full_name
from .dispatcher import Dispatcher, ModuleScope, PanelScope, ResolutionScope
from .module import Module
from .panel import Panel
from .reporter import (
    BaseReporter,
    CompositeReporter,
    DispatchEvent,
    EventKind,
    ListReporter,
    LoggerReporter,
)

__all__ = [
    "BaseReporter",
    "CompositeReporter",
    "DispatchEvent",
    "Dispatcher",
    "EventKind",
    "ListReporter",
    "LoggerReporter",
    "Module",
    "ModuleScope",
    "Panel",
    "PanelScope",
    "ResolutionScope",
    "build_modules",
    "panel_full_name",
]
