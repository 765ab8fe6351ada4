"""
reporting/matrix.py - Scenario test matrix

Replays scripted selection sequences against an engine and collects
what the reporter saw for each one. The default matrix walks the
product chain: a full path, a category switch, a second path, a
sibling change, a reset and a mid-path category change.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING
import logging

from cascading.core.records import FieldValue, Record
from cascading.core.view import DerivedView

from .selection_log import SelectionLogEntry, SelectionLogReporter

if TYPE_CHECKING:
    from cascading.core.engine import CascadeEngine

logger = logging.getLogger(__name__)


# A step is (field, value); the field "reset" clears everything
Step = Tuple[str, FieldValue]
RESET_STEP = "reset"


DEFAULT_SCENARIOS: List[Tuple[str, List[Step]]] = [
    ("Electronics -> Smartphones -> Apple -> iPhone 14", [
        ("category", "Electronics"),
        ("subcategory", "Smartphones"),
        ("brand", "Apple"),
        ("name", "iPhone 14"),
    ]),
    ("Switch from Electronics to Sports", [
        ("category", "Sports"),
    ]),
    ("Sports -> Footwear -> Nike", [
        ("subcategory", "Footwear"),
        ("brand", "Nike"),
        ("name", "Air Max 90"),
    ]),
    ("Change subcategory within Sports", [
        ("subcategory", "Equipment"),
    ]),
    ("Reset and go Clothing -> Formal", [
        (RESET_STEP, None),
        ("category", "Clothing"),
        ("subcategory", "Formal"),
        ("brand", "Hugo Boss"),
    ]),
    ("Mid-selection category change cascade", [
        ("category", "Electronics"),
        ("subcategory", "Laptops"),
        ("category", "Sports"),
    ]),
]


@dataclass
class ScenarioResult:
    """Outcome of one scripted scenario."""
    name: str
    steps: List[Step]
    final_view: Optional[DerivedView] = None

    # Counted by the reporter, so they stay exact when its history
    # no longer holds every entry
    event_count: int = 0
    reset_count: int = 0

    # Retained notifications, at most event_count of them
    entries: List[SelectionLogEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "steps": [list(s) for s in self.steps],
            "event_count": self.event_count,
            "reset_count": self.reset_count,
            "events": [e.message for e in self.entries],
            "record_count": len(self.final_view.filtered_data) if self.final_view else 0,
        }


@dataclass
class AvailabilityMatrix:
    """Options per field and the matching records at one moment."""
    options: Dict[str, List[Any]]
    records: List[Record]

    def lines(self, label_field: str = "name", detail_field: str = "brand") -> List[str]:
        width = max((len(f) for f in self.options), default=0) + 1
        out = [f"{name.ljust(width)}: [{', '.join(str(o) for o in options)}]"
               for name, options in self.options.items()]
        out.append("")
        out.append(f"Filtered Products: {len(self.records)}")
        for record in self.records:
            out.append(f"  * {record.get(label_field)} ({record.get(detail_field)})")
        return out


class ScenarioMatrix:
    """
    Drives an engine through scripted scenarios.

    The reporter is injected so callers choose where lines go; it is
    attached to the engine on construction.
    """

    def __init__(self, engine: "CascadeEngine", reporter: Optional[SelectionLogReporter] = None):
        self._engine = engine
        self._reporter = reporter or SelectionLogReporter()
        self._reporter.attach(engine)
        self._results: List[ScenarioResult] = []

    @property
    def engine(self) -> "CascadeEngine":
        return self._engine

    @property
    def reporter(self) -> SelectionLogReporter:
        return self._reporter

    @property
    def results(self) -> List[ScenarioResult]:
        return list(self._results)

    def run_scenario(self, name: str, steps: Sequence[Step]) -> ScenarioResult:
        """Apply each step in order and capture the notifications it caused."""
        logger.info(f"Scenario: {name}")
        events_before = self._reporter.event_count
        resets_before = self._reporter.reset_count
        view = None

        for field_name, value in steps:
            if field_name == RESET_STEP:
                view = self._engine.reset()
            else:
                view = self._engine.select(field_name, value)

        emitted = self._reporter.event_count - events_before
        history = self._reporter.history
        kept = min(emitted, len(history))

        result = ScenarioResult(
            name=name,
            steps=list(steps),
            final_view=view if view is not None else self._engine.get_current_state(),
            event_count=emitted,
            reset_count=self._reporter.reset_count - resets_before,
            entries=history[len(history) - kept:] if kept else [],
        )
        self._results.append(result)
        return result

    def run_default_matrix(self) -> List[ScenarioResult]:
        """Run DEFAULT_SCENARIOS against the product chain."""
        return [self.run_scenario(name, steps) for name, steps in DEFAULT_SCENARIOS]

    def availability_matrix(self) -> AvailabilityMatrix:
        view = self._engine.get_current_state()
        return AvailabilityMatrix(options=view.available_options, records=view.filtered_data)

    def summary(self) -> Dict[str, Any]:
        selected = {
            (step_field, value)
            for result in self._results
            for step_field, value in result.steps
            if step_field != RESET_STEP
        }
        return {
            "scenarios": len(self._results),
            "total_events": self._reporter.event_count,
            "cascade_resets": sum(r.reset_count for r in self._results),
            "values_selected": {
                f: sorted(str(v) for (sf, v) in selected if sf == f)
                for f in self._engine.get_selection_sequence()
            },
        }
