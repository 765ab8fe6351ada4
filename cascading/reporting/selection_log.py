"""
reporting/selection_log.py - Change-notification reporter

An observer object that turns every engine notification into a log
line and keeps a bounded history of them. Output goes to the module
logger and, optionally, to an injected sink such as ``print``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import json
import logging

from cascading.core.engine import RESET_EVENT, CascadeEngine
from cascading.core.records import FieldValue
from cascading.core.view import DerivedView

logger = logging.getLogger(__name__)


@dataclass
class SelectionLogEntry:
    """One formatted notification."""
    field_name: str
    value: FieldValue
    option_counts: Dict[str, int]
    record_count: int
    message: str
    sequence: int = 0
    timestamp: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_reset(self) -> bool:
        return self.value is None

    @property
    def is_cascade_reset(self) -> bool:
        """A dependent cleared by select(), as opposed to a full reset()."""
        return self.is_reset and self.field_name != RESET_EVENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequence": self.sequence,
            "field": self.field_name,
            "value": self.value,
            "option_counts": dict(self.option_counts),
            "record_count": self.record_count,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


def format_notification(field_name: str, value: FieldValue, view: DerivedView) -> str:
    """``[FIELD] value → Options: {...} | Products: n``, RESET when unset."""
    shown = "RESET" if value is None else value
    counts = json.dumps(view.option_counts, separators=(",", ":"))
    return f"[{field_name.upper()}] {shown} → Options: {counts} | Products: {len(view.filtered_data)}"


class SelectionLogReporter:
    """
    Records engine notifications.

    Usage:
        reporter = SelectionLogReporter(sink=print)
        reporter.attach(engine)
        engine.select("category", "Sports")
        reporter.history[-1].message
    """

    def __init__(
        self,
        sink: Optional[Callable[[str], None]] = None,
        max_history: int = 1000,
    ):
        self._sink = sink
        self._max_history = max_history
        self._history: List[SelectionLogEntry] = []
        self._counter = 0
        self._reset_counter = 0
        self._unsubscribe: Optional[Callable[[], bool]] = None

    def __call__(self, field_name: str, value: FieldValue, view: DerivedView) -> None:
        message = format_notification(field_name, value, view)
        self._counter += 1
        entry = SelectionLogEntry(
            field_name=field_name,
            value=value,
            option_counts=view.option_counts,
            record_count=len(view.filtered_data),
            message=message,
            sequence=self._counter,
        )

        if entry.is_cascade_reset:
            self._reset_counter += 1

        self._history.append(entry)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        logger.info(message)
        if self._sink is not None:
            self._sink(message)

    def attach(self, engine: CascadeEngine) -> None:
        """Register with an engine, detaching from any previous one."""
        self.detach()
        self._unsubscribe = engine.on_change(self)

    def detach(self) -> bool:
        if self._unsubscribe is None:
            return False
        removed = self._unsubscribe()
        self._unsubscribe = None
        return removed

    @property
    def history(self) -> List[SelectionLogEntry]:
        return list(self._history)

    @property
    def event_count(self) -> int:
        """Notifications received since creation or the last clear."""
        return self._counter

    @property
    def reset_count(self) -> int:
        """Cascade clears received, counted like event_count."""
        return self._reset_counter

    def get_history(self, limit: int = 20, field_name: Optional[str] = None) -> List[SelectionLogEntry]:
        """Most recent entries, optionally for one field."""
        entries = self._history
        if field_name is not None:
            entries = [e for e in entries if e.field_name == field_name]
        return entries[-limit:]

    def messages(self) -> List[str]:
        return [e.message for e in self._history]

    def clear_history(self) -> None:
        self._history.clear()
        self._counter = 0
        self._reset_counter = 0
