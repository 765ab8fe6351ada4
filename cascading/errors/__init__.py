"""
errors/ - Error Taxonomy

Exception hierarchy for declaration, record and selection failures, and
an aggregator for failures that are isolated instead of raised.
"""

from .taxonomy import (
    ErrorCategory,
    ErrorCode,
    CascadingException,
    DependencyConfigurationError,
    CyclicDependencyError,
    UnknownFieldReferenceError,
    DuplicateFieldError,
    RecordValidationError,
    SelectionError,
    UnknownFieldError,
    SelectionValueError,
    PrecedenceViolationError,
    ReentrantMutationError,
    ConfigurationValueError,
    CascadingError,
    create_observer_error,
)

from .aggregator import (
    ErrorReport,
    ErrorAggregator,
)

__all__ = [
    # Taxonomy
    "ErrorCategory",
    "ErrorCode",
    "CascadingException",
    "DependencyConfigurationError",
    "CyclicDependencyError",
    "UnknownFieldReferenceError",
    "DuplicateFieldError",
    "RecordValidationError",
    "SelectionError",
    "UnknownFieldError",
    "SelectionValueError",
    "PrecedenceViolationError",
    "ReentrantMutationError",
    "ConfigurationValueError",
    "CascadingError",
    "create_observer_error",
    # Aggregator
    "ErrorReport",
    "ErrorAggregator",
]
