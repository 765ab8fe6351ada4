"""
Derived view snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .records import FieldValue, Record


@dataclass
class DerivedView:
    """
    Snapshot of selections, per-field options and matching records.

    Built fresh by CascadeEngine.get_current_state(); never cached.
    The selection and option containers are copies, the records are
    the dataset's own objects.
    """
    current_selections: Dict[str, FieldValue] = field(default_factory=dict)
    available_options: Dict[str, List[Any]] = field(default_factory=dict)
    filtered_data: List[Record] = field(default_factory=list)

    @property
    def option_counts(self) -> Dict[str, int]:
        return {name: len(options) for name, options in self.available_options.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentSelections": dict(self.current_selections),
            "availableOptions": {k: list(v) for k, v in self.available_options.items()},
            "filteredData": [dict(record) for record in self.filtered_data],
        }
