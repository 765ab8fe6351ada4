"""
core/table.py - Stateless cascading over a selection table

Selections stored as rows of (primary_key, property, value_label), one
group of rows per edited item, instead of inside a CascadeEngine. The
hierarchy is an ordered list of field names: a field is filtered by the
fields before it, and fields outside the hierarchy act as plain
filters wherever the source data has them.

Usage:
    entries = [
        {"primaryKey": 1, "property": "category", "valueLabel": "Electronics"},
        {"primaryKey": 1, "property": "type", "valueLabel": "sale"},
    ]
    hierarchy = engine.get_selection_sequence()
    get_available_options(1, "subcategory", entries, products, hierarchy)
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cascading.errors import RecordValidationError

from .records import Record

logger = logging.getLogger(__name__)


class SelectionEntry(BaseModel):
    """One selected value of one property for one item."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    primary_key: int = Field(..., alias="primaryKey")
    property: str = Field(..., min_length=1)
    value_label: str = Field(..., alias="valueLabel")


EntryLike = Union[SelectionEntry, Mapping[str, Any]]


def normalize_entries(entries: Iterable[EntryLike]) -> List[SelectionEntry]:
    """Coerce mappings into SelectionEntry, keeping their order."""
    result = []
    for index, entry in enumerate(entries):
        if isinstance(entry, SelectionEntry):
            result.append(entry)
            continue
        try:
            result.append(SelectionEntry.model_validate(entry))
        except ValidationError as e:
            raise RecordValidationError(
                f"Invalid selection entry at position {index}: {e}",
                index=index,
            ) from e
    return result


def selections_for(primary_key: int, entries: Iterable[EntryLike]) -> Dict[str, str]:
    """property -> value_label for one item; a later row wins."""
    return {
        e.property: e.value_label
        for e in normalize_entries(entries)
        if e.primary_key == primary_key
    }


def _has_field(records: Sequence[Record], field_name: str) -> bool:
    return any(field_name in record for record in records)


def _apply(records: Sequence[Record], criteria: Dict[str, str], skip_missing: bool) -> List[Record]:
    filtered = list(records)
    for field_name, value in criteria.items():
        if not value:
            continue
        if skip_missing and not (filtered and _has_field(filtered, field_name)):
            continue
        filtered = [r for r in filtered if r.get(field_name) == value]
    return filtered


def _distinct_labels(records: Iterable[Record], field_name: str) -> List[str]:
    # First-seen order, as labels
    values = (record.get(field_name) for record in records)
    return list(dict.fromkeys(str(v) for v in values if v is not None))


# =============================================================================
# OPERATIONS
# =============================================================================

def filter_data_with_dependencies(
    primary_key: int,
    changed_field: str,
    entries: Iterable[EntryLike],
    source_data: Sequence[Record],
    hierarchy: Sequence[str],
) -> Dict[str, List[str]]:
    """
    Options of every hierarchy field after ``changed_field`` changed.

    A hierarchy field filters by itself and every level above it. A field
    outside the hierarchy filters by its own value plus all hierarchy
    selections. Criteria naming a field the source data lacks are
    skipped.

    Returns:
        hierarchy field -> distinct labels; all empty when the item has
        no row for ``changed_field``
    """
    entries = normalize_entries(entries)
    target = next(
        (e for e in entries if e.primary_key == primary_key and e.property == changed_field),
        None,
    )
    if target is None:
        logger.warning(f"No entry for primary key {primary_key} and field '{changed_field}'")
        return {name: [] for name in hierarchy}

    logger.debug(f"Found '{target.value_label}' for field '{changed_field}'")
    selections = selections_for(primary_key, entries)

    criteria: Dict[str, str] = {}
    if changed_field in hierarchy:
        level = list(hierarchy).index(changed_field)
        for name in hierarchy[:level + 1]:
            if selections.get(name):
                criteria[name] = selections[name]
    else:
        criteria[changed_field] = target.value_label
        for name in hierarchy:
            if selections.get(name):
                criteria[name] = selections[name]

    filtered = _apply(source_data, criteria, skip_missing=True)

    return {
        name: _distinct_labels(filtered, name) if _has_field(source_data, name) else []
        for name in hierarchy
    }


def get_available_options(
    primary_key: int,
    target_field: str,
    entries: Iterable[EntryLike],
    source_data: Sequence[Record],
    hierarchy: Sequence[str],
) -> List[str]:
    """
    Options for one field of one item.

    Hierarchy levels above ``target_field`` filter; so does every other
    selected property outside the hierarchy that the source data has.
    """
    if not _has_field(source_data, target_field):
        logger.warning(f"Field '{target_field}' does not exist in source data")
        return []

    selections = selections_for(primary_key, entries)

    criteria: Dict[str, str] = {}
    if target_field in hierarchy:
        level = list(hierarchy).index(target_field)
        for name in hierarchy[:level]:
            if selections.get(name):
                criteria[name] = selections[name]

    for name, value in selections.items():
        if name not in hierarchy and name != target_field and _has_field(source_data, name):
            criteria[name] = value

    return _distinct_labels(_apply(source_data, criteria, skip_missing=False), target_field)


def reset_dependent_fields(
    primary_key: int,
    changed_field: str,
    entries: Iterable[EntryLike],
    hierarchy: Sequence[str],
) -> List[SelectionEntry]:
    """
    Drop the item's rows for hierarchy levels below ``changed_field``.

    Other items' rows and properties outside the hierarchy are kept.
    Returns a new list; the input is not modified.
    """
    entries = normalize_entries(entries)
    if changed_field not in hierarchy:
        return entries

    levels = {name: position for position, name in enumerate(hierarchy)}
    changed_level = levels[changed_field]

    return [
        e for e in entries
        if e.primary_key != primary_key
        or e.property not in levels
        or levels[e.property] <= changed_level
    ]
