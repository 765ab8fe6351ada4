"""
reporting/ - Notification logging and scenario harness
"""

from .selection_log import (
    SelectionLogEntry,
    SelectionLogReporter,
    format_notification,
)
from .matrix import (
    DEFAULT_SCENARIOS,
    RESET_STEP,
    AvailabilityMatrix,
    ScenarioMatrix,
    ScenarioResult,
)

__all__ = [
    # Selection log
    "SelectionLogEntry",
    "SelectionLogReporter",
    "format_notification",
    # Matrix
    "DEFAULT_SCENARIOS",
    "RESET_STEP",
    "AvailabilityMatrix",
    "ScenarioMatrix",
    "ScenarioResult",
]
