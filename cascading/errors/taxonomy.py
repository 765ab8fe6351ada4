"""
errors/taxonomy.py - Error classification system

Exception hierarchy raised by the cascade engine, plus the structured
error record used when failures are collected instead of raised
(observer failures).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum
import uuid


class ErrorCategory(Enum):
    """Error categories."""
    # Not classified by a subclass
    GENERAL = "general"

    # Declaration errors (1xxx)
    DEPENDENCY = "dependency"

    # Record errors (2xxx)
    VALIDATION = "validation"

    # Selection errors (3xxx)
    SELECTION = "selection"

    # Observer errors (4xxx)
    OBSERVER = "observer"

    # Configuration errors (5xxx)
    CONFIGURATION = "configuration"


class ErrorCode(Enum):
    """Specific error codes."""

    GENERAL = 9000

    # Dependency declarations (1xxx)
    DEP_CYCLE = 1001
    DEP_UNKNOWN_REFERENCE = 1002
    DEP_DUPLICATE_FIELD = 1003
    DEP_MALFORMED = 1004

    # Records (2xxx)
    VAL_RECORD = 2001
    VAL_VALUE_TYPE = 2002

    # Selection (3xxx)
    SEL_UNKNOWN_FIELD = 3001
    SEL_PRECEDENCE = 3002
    SEL_REENTRANT = 3003

    # Observer (4xxx)
    OBS_FAILED = 4001

    # Configuration (5xxx)
    CFG_INVALID = 5001


# =============================================================================
# EXCEPTIONS
# =============================================================================

class CascadingException(Exception):
    """Base exception for the cascading package."""

    code: ErrorCode = ErrorCode.GENERAL
    category: ErrorCategory = ErrorCategory.GENERAL


class DependencyConfigurationError(CascadingException):
    """Dependency declarations are malformed."""

    code = ErrorCode.DEP_MALFORMED
    category = ErrorCategory.DEPENDENCY


class CyclicDependencyError(DependencyConfigurationError):
    """Raised when a cyclic dependency is detected."""

    code = ErrorCode.DEP_CYCLE

    def __init__(self, cycle: List[str]):
        self.cycle = cycle
        super().__init__(f"Cyclic dependency detected: {' -> '.join(cycle)}")


class UnknownFieldReferenceError(DependencyConfigurationError):
    """A depends_on entry names a field that is not declared."""

    code = ErrorCode.DEP_UNKNOWN_REFERENCE

    def __init__(self, field_name: str, reference: str):
        self.field_name = field_name
        self.reference = reference
        super().__init__(
            f"Field '{field_name}' depends on undeclared field '{reference}'"
        )


class DuplicateFieldError(DependencyConfigurationError):
    """The same field is declared more than once."""

    code = ErrorCode.DEP_DUPLICATE_FIELD

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' is declared more than once")


class RecordValidationError(CascadingException):
    """A dataset record is not a flat mapping of scalar values."""

    code = ErrorCode.VAL_RECORD
    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, index: Optional[int] = None, field_name: Optional[str] = None):
        self.index = index
        self.field_name = field_name
        super().__init__(message)


class SelectionError(CascadingException):
    """Base class for rejected selection mutations."""

    code = ErrorCode.SEL_UNKNOWN_FIELD
    category = ErrorCategory.SELECTION


class UnknownFieldError(SelectionError):
    """Selection targets a field that is not declared."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Unknown field: '{field_name}'")


class SelectionValueError(SelectionError):
    """Selection value is not a scalar."""

    code = ErrorCode.VAL_VALUE_TYPE

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Value for '{field_name}' must be str, int, float or None, "
            f"got {type(value).__name__}"
        )


class PrecedenceViolationError(SelectionError):
    """Strict mode: a field was selected before its prerequisites."""

    code = ErrorCode.SEL_PRECEDENCE

    def __init__(self, field_name: str, missing: List[str]):
        self.field_name = field_name
        self.missing = missing
        super().__init__(
            f"Cannot select '{field_name}' before {', '.join(missing)}"
        )


class ReentrantMutationError(SelectionError):
    """A mutation was issued from inside an observer notification."""

    code = ErrorCode.SEL_REENTRANT

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"'{operation}' called from inside a change notification"
        )


class ConfigurationValueError(CascadingException):
    """A configuration value is outside its allowed set."""

    code = ErrorCode.CFG_INVALID
    category = ErrorCategory.CONFIGURATION


# =============================================================================
# STRUCTURED ERROR RECORD
# =============================================================================

@dataclass
class CascadingError:
    """An observer failure, recorded instead of raised."""

    error_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    code: ErrorCode = ErrorCode.OBS_FAILED
    category: ErrorCategory = ErrorCategory.OBSERVER

    message: str = ""

    source: str = ""  # Observer that failed
    path: Optional[str] = None  # Field being notified
    value: Any = None  # Value carried by the notification

    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category.value,
            "message": self.message,
            "source": self.source,
            "path": self.path,
            "value": self.value,
            "created_at": self.created_at.isoformat(),
        }


def create_observer_error(
    exc: BaseException,
    source: str,
    path: Optional[str] = None,
    value: Any = None,
) -> CascadingError:
    """Factory for observer failures."""
    return CascadingError(
        message=f"{type(exc).__name__}: {exc}",
        source=source,
        path=path,
        value=value,
    )
