"""
bootstrap/ - Configuration

Engine behaviour switches and logging setup, loaded from defaults,
environment variables or a JSON file.
"""

from .config import (
    EngineConfig,
    LoggingConfig,
    CascadingConfig,
    ORDERING_LEGACY,
    ORDERING_TOPOLOGICAL,
    REENTRANCY_RAISE,
    REENTRANCY_DEFER,
    configure_logging,
    load_config,
    get_config,
)

__all__ = [
    "EngineConfig",
    "LoggingConfig",
    "CascadingConfig",
    "ORDERING_LEGACY",
    "ORDERING_TOPOLOGICAL",
    "REENTRANCY_RAISE",
    "REENTRANCY_DEFER",
    "configure_logging",
    "load_config",
    "get_config",
]
