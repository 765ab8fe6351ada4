"""
errors/aggregator.py - Collect observer failures

The engine isolates observers that raise during a change notification.
An injected ErrorAggregator keeps those failures so callers can report
them after a run, grouped by observer and by notified field.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime
import uuid

from .taxonomy import CascadingError


@dataclass
class ErrorReport:
    """Observer failures grouped for display."""

    report_id: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)

    total_errors: int = 0
    by_source: Dict[str, int] = field(default_factory=dict)
    by_field: Dict[str, int] = field(default_factory=dict)

    summary: str = ""

    all_errors: List[CascadingError] = field(default_factory=list)

    def lines(self) -> List[str]:
        out = [self.summary]
        for source, count in self.by_source.items():
            out.append(f"  {source}: {count}")
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "total_errors": self.total_errors,
            "by_source": self.by_source,
            "by_field": self.by_field,
            "summary": self.summary,
        }


class ErrorAggregator:
    """
    Keeps observer failures reported by a CascadeEngine.

    Usage:
        errors = ErrorAggregator()
        engine = CascadeEngine(data, deps, error_aggregator=errors)
        ...
        errors.generate_report().summary
    """

    def __init__(self):
        self._errors: List[CascadingError] = []
        self._by_source: Dict[str, List[CascadingError]] = {}

    def __len__(self) -> int:
        return len(self._errors)

    @property
    def errors(self) -> List[CascadingError]:
        return list(self._errors)

    def add(self, error: CascadingError) -> None:
        self._errors.append(error)
        self._by_source.setdefault(error.source, []).append(error)

    def get_by_source(self, source: str) -> List[CascadingError]:
        """Failures of one observer."""
        return list(self._by_source.get(source, []))

    def get_by_field(self, field_name: Optional[str]) -> List[CascadingError]:
        """Failures raised while notifying one field."""
        return [e for e in self._errors if e.path == field_name]

    def generate_report(self) -> ErrorReport:
        report = ErrorReport(
            report_id=uuid.uuid4().hex[:8],
            total_errors=len(self._errors),
        )

        for source, errors in self._by_source.items():
            report.by_source[source] = len(errors)

        for error in self._errors:
            key = error.path or ""
            report.by_field[key] = report.by_field.get(key, 0) + 1

        if self._errors:
            report.summary = f"{len(self._errors)} observer failure(s)"
        else:
            report.summary = "No observer failures"

        report.all_errors = self._errors.copy()
        return report

    def clear(self) -> None:
        self._errors.clear()
        self._by_source.clear()
