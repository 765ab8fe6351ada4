"""
bootstrap/config.py - Engine and logging configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

from cascading.errors import ConfigurationValueError

logger = logging.getLogger(__name__)


ORDERING_LEGACY = "legacy"
ORDERING_TOPOLOGICAL = "topological"
ORDERINGS = (ORDERING_LEGACY, ORDERING_TOPOLOGICAL)

REENTRANCY_RAISE = "raise"
REENTRANCY_DEFER = "defer"
REENTRANCY_POLICIES = (REENTRANCY_RAISE, REENTRANCY_DEFER)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class EngineConfig:
    """Behaviour switches for CascadeEngine."""

    # "legacy": stable sort by number of prerequisites
    # "topological": Kahn's algorithm, ties in declared order
    ordering: str = ORDERING_LEGACY

    # Reject select() when can_select() is False
    strict: bool = False

    # What to do with select()/reset() issued from inside an observer
    reentrancy: str = REENTRANCY_RAISE

    # Fail fast on cycles, unknown references and duplicate fields
    validate_declarations: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.ordering not in ORDERINGS:
            raise ConfigurationValueError(
                f"ordering must be one of {ORDERINGS}, got '{self.ordering}'"
            )
        if self.reentrancy not in REENTRANCY_POLICIES:
            raise ConfigurationValueError(
                f"reentrancy must be one of {REENTRANCY_POLICIES}, got '{self.reentrancy}'"
            )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            ordering=os.getenv("CASCADING_ORDERING", ORDERING_LEGACY),
            strict=_env_bool("CASCADING_STRICT", "false"),
            reentrancy=os.getenv("CASCADING_REENTRANCY", REENTRANCY_RAISE),
            validate_declarations=_env_bool("CASCADING_VALIDATE", "true"),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("CASCADING_LOG_LEVEL", "INFO"),
            format=os.getenv("CASCADING_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("CASCADING_LOG_FILE"),
        )


@dataclass
class CascadingConfig:
    """Root configuration."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "CascadingConfig":
        """Create configuration from environment variables."""
        return cls(
            engine=EngineConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "CascadingConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "CascadingConfig":
        """Create config from dictionary, file values override environment."""
        config = cls.from_env()

        for section in ("engine", "logging"):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section}.{key}")

        config.engine.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "engine": {
                "ordering": self.engine.ordering,
                "strict": self.engine.strict,
                "reentrancy": self.engine.reentrancy,
                "validate_declarations": self.engine.validate_declarations,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_file": self.logging.log_file,
            },
        }


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """
    Attach a handler to the package logger.

    Args:
        config: Level, format and optional log file

    Returns:
        The configured ``cascading`` logger
    """
    package_logger = logging.getLogger("cascading")
    package_logger.setLevel(config.level.upper())

    if config.log_file:
        handler: logging.Handler = logging.FileHandler(config.log_file)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config.format))

    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)

    return package_logger


# Global config instance
_config: Optional[CascadingConfig] = None


def load_config(filepath: Optional[str] = None) -> CascadingConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        CascadingConfig instance
    """
    global _config

    if filepath:
        _config = CascadingConfig.from_file(filepath)
    else:
        default_paths = [
            "./cascading.json",
            "./config/cascading.json",
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = CascadingConfig.from_file(path)
                return _config

        _config = CascadingConfig.from_env()

    logger.debug(f"Configuration loaded: ordering={_config.engine.ordering}")
    return _config


def get_config() -> CascadingConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
