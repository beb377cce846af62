"""
Utility modules for Blocky.
"""

from .errors import (
    BlockUpdateError,
    BlockyError,
    ClickSpawnError,
    CommandTimeoutError,
    ConfigurationError,
    ConstructionError,
    FormatParseError,
    FormatRenderError,
    RecoverableReadingError,
    SensorParseError,
    error_boundary,
)
from .format import FormatTemplate
from .severity import Thresholds, classify

__all__ = [
    "BlockyError",
    "ConfigurationError",
    "ConstructionError",
    "FormatParseError",
    "FormatRenderError",
    "BlockUpdateError",
    "SensorParseError",
    "CommandTimeoutError",
    "RecoverableReadingError",
    "ClickSpawnError",
    "error_boundary",
    "FormatTemplate",
    "Thresholds",
    "classify",
]
