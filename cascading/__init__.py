"""
cascading - reactive state manager for dependent selection fields

Choosing a value in one field narrows the options of the fields that
depend on it, filters the dataset, and clears dependent selections.
"""

__version__ = "1.0.0"

from cascading.bootstrap import EngineConfig, LoggingConfig, CascadingConfig
from cascading.core import CascadeEngine, DerivedView, RESET_EVENT
from cascading.dependencies import DependencyDeclaration, DependencyGraph
from cascading.errors import (
    CascadingException,
    DependencyConfigurationError,
    CyclicDependencyError,
    RecordValidationError,
    SelectionError,
    PrecedenceViolationError,
    ReentrantMutationError,
    ErrorAggregator,
)

__all__ = [
    "__version__",
    "EngineConfig",
    "LoggingConfig",
    "CascadingConfig",
    "CascadeEngine",
    "DerivedView",
    "RESET_EVENT",
    "DependencyDeclaration",
    "DependencyGraph",
    "CascadingException",
    "DependencyConfigurationError",
    "CyclicDependencyError",
    "RecordValidationError",
    "SelectionError",
    "PrecedenceViolationError",
    "ReentrantMutationError",
    "ErrorAggregator",
]
