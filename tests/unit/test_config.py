"""
Unit tests for bootstrap/config.py
"""

import json
import logging

import pytest

from cascading.bootstrap import config as config_module
from cascading.bootstrap.config import (
    CascadingConfig,
    EngineConfig,
    LoggingConfig,
    configure_logging,
    get_config,
    load_config,
)
from cascading.errors import ConfigurationValueError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CASCADING_ORDERING",
        "CASCADING_STRICT",
        "CASCADING_REENTRANCY",
        "CASCADING_VALIDATE",
        "CASCADING_LOG_LEVEL",
        "CASCADING_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config", None)


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.ordering == "legacy"
        assert config.strict is False
        assert config.reentrancy == "raise"
        assert config.validate_declarations is True

    def test_invalid_ordering(self):
        with pytest.raises(ConfigurationValueError):
            EngineConfig(ordering="random")

    def test_invalid_reentrancy(self):
        with pytest.raises(ConfigurationValueError):
            EngineConfig(reentrancy="ignore")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CASCADING_ORDERING", "topological")
        monkeypatch.setenv("CASCADING_STRICT", "true")
        monkeypatch.setenv("CASCADING_REENTRANCY", "defer")
        monkeypatch.setenv("CASCADING_VALIDATE", "false")

        config = EngineConfig.from_env()

        assert config.ordering == "topological"
        assert config.strict is True
        assert config.reentrancy == "defer"
        assert config.validate_declarations is False


class TestCascadingConfig:
    """Tests for the root config and file loading."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "cascading.json"
        path.write_text(json.dumps({
            "engine": {"ordering": "topological", "strict": True},
            "logging": {"level": "DEBUG"},
        }))

        config = CascadingConfig.from_file(str(path))

        assert config.engine.ordering == "topological"
        assert config.engine.strict is True
        assert config.logging.level == "DEBUG"

    def test_from_file_invalid_value(self, tmp_path):
        path = tmp_path / "cascading.json"
        path.write_text(json.dumps({"engine": {"reentrancy": "queue"}}))
        with pytest.raises(ConfigurationValueError):
            CascadingConfig.from_file(str(path))

    def test_missing_file_uses_defaults(self, tmp_path):
        config = CascadingConfig.from_file(str(tmp_path / "absent.json"))
        assert config.engine.ordering == "legacy"

    def test_to_dict(self):
        data = CascadingConfig().to_dict()
        assert data["engine"]["reentrancy"] == "raise"
        assert data["logging"]["level"] == "INFO"

    def test_load_and_get_config(self, tmp_path):
        path = tmp_path / "cascading.json"
        path.write_text(json.dumps({"engine": {"strict": True}}))

        loaded = load_config(str(path))

        assert get_config() is loaded
        assert get_config().engine.strict is True


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_level_and_single_handler(self):
        package_logger = configure_logging(LoggingConfig(level="debug"))
        configure_logging(LoggingConfig(level="WARNING"))

        assert package_logger.name == "cascading"
        assert package_logger.level == logging.WARNING
        assert len(package_logger.handlers) == 1

        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "cascading.log"
        package_logger = configure_logging(LoggingConfig(level="INFO", log_file=str(log_file)))

        assert isinstance(package_logger.handlers[0], logging.FileHandler)

        for handler in list(package_logger.handlers):
            handler.close()
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)
