"""
Record and field-value validation.

Records enter the engine once, at construction, and are checked here:
every declared field must hold a scalar (str, int, float) or be
absent/None. Undeclared keys are left alone.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import StrictFloat, StrictInt, StrictStr, TypeAdapter, ValidationError

from cascading.errors import RecordValidationError, SelectionValueError


FieldValue = Optional[Union[StrictStr, StrictInt, StrictFloat]]
Record = Mapping[str, Any]

_field_value_adapter: TypeAdapter = TypeAdapter(FieldValue)


def is_field_value(value: Any) -> bool:
    """True if value is a valid scalar field value (bool is not)."""
    if isinstance(value, bool):
        return False
    try:
        _field_value_adapter.validate_python(value, strict=True)
    except ValidationError:
        return False
    return True


def is_set(value: Any) -> bool:
    """Unset means None."""
    return value is not None


def validate_value(field_name: str, value: Any) -> None:
    """Raise SelectionValueError unless value is a scalar or None."""
    if not is_field_value(value):
        raise SelectionValueError(field_name, value)


def validate_records(records: Sequence[Any], fields: Iterable[str]) -> None:
    """
    Check every record is a mapping with scalar values at declared fields.

    Args:
        records: Dataset rows
        fields: Declared field names

    Raises:
        RecordValidationError: On the first offending record
    """
    fields = tuple(fields)
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise RecordValidationError(
                f"Record {index} is {type(record).__name__}, expected a mapping",
                index=index,
            )
        for field_name in fields:
            value = record.get(field_name)
            if not is_field_value(value):
                raise RecordValidationError(
                    f"Record {index} field '{field_name}' has non-scalar "
                    f"value of type {type(value).__name__}",
                    index=index,
                    field_name=field_name,
                )


def option_sort_key(value: Union[str, int, float]) -> Tuple[int, Any]:
    # Numbers before strings when a field mixes both
    if isinstance(value, str):
        return (1, value)
    return (0, value)


def distinct_sorted(values: Iterable[Any]) -> List[Any]:
    """Distinct non-None values in natural order."""
    return sorted({v for v in values if v is not None}, key=option_sort_key)
