from .message import ParsedMessage
from .modules_config import ModulesConfig, PanelConfig
from .oid import Oid
from .outcome import DispatchOutcome
from .registry import LifecycleReport, PanelDescriptor
from .state_value import BoolValue, FloatValue, IntValue, StateValue, ValueType

__all__ = [
    "BoolValue",
    "DispatchOutcome",
    "FloatValue",
    "IntValue",
    "LifecycleReport",
    "ModulesConfig",
    "Oid",
    "PanelConfig",
    "PanelDescriptor",
    "ParsedMessage",
    "StateValue",
    "ValueType",
]
