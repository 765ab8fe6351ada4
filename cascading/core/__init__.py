"""
Cascading Core

Provides:
- CascadeEngine: selection state, derived options and filtered records
- DerivedView: snapshot handed to observers and callers
- Record validation helpers
- Stateless helpers for selections kept in a (primary_key, property, value) table
"""

from .records import (
    FieldValue,
    Record,
    is_field_value,
    is_set,
    validate_value,
    validate_records,
    distinct_sorted,
    option_sort_key,
)
from .view import DerivedView
from .engine import (
    CascadeEngine,
    Observer,
    Subscription,
    RESET_EVENT,
)
from .table import (
    SelectionEntry,
    normalize_entries,
    selections_for,
    filter_data_with_dependencies,
    get_available_options,
    reset_dependent_fields,
)

__all__ = [
    # Records
    "FieldValue",
    "Record",
    "is_field_value",
    "is_set",
    "validate_value",
    "validate_records",
    "distinct_sorted",
    "option_sort_key",
    # View
    "DerivedView",
    # Engine
    "CascadeEngine",
    "Observer",
    "Subscription",
    "RESET_EVENT",
    # Selection table
    "SelectionEntry",
    "normalize_entries",
    "selections_for",
    "filter_data_with_dependencies",
    "get_available_options",
    "reset_dependent_fields",
]
