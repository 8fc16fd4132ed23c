"""Tests for funcmock.config."""

import logging

import pytest
from pydantic import ValidationError

from funcmock.config import MockSettings, configure_logging, get_settings


class TestMockSettings:
    def test_defaults(self):
        s = MockSettings()
        assert s.log_level == "WARNING"
        assert s.check_types is True
        assert s.repr_limit == 120

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FUNCMOCK_LOG_LEVEL", "debug")
        monkeypatch.setenv("FUNCMOCK_CHECK_TYPES", "off")
        monkeypatch.setenv("FUNCMOCK_REPR_LIMIT", "60")
        s = MockSettings.from_env()
        assert s.log_level == "DEBUG"
        assert s.check_types is False
        assert s.repr_limit == 60

    def test_from_env_without_variables(self, monkeypatch):
        for name in ("FUNCMOCK_LOG_LEVEL", "FUNCMOCK_CHECK_TYPES", "FUNCMOCK_REPR_LIMIT"):
            monkeypatch.delenv(name, raising=False)
        assert MockSettings.from_env() == MockSettings()

    @pytest.mark.parametrize(
        "name,value",
        [
            ("FUNCMOCK_LOG_LEVEL", "LOUD"),
            ("FUNCMOCK_CHECK_TYPES", "maybe"),
            ("FUNCMOCK_REPR_LIMIT", "5"),
            ("FUNCMOCK_REPR_LIMIT", "many"),
        ],
    )
    def test_invalid_env(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            MockSettings.from_env()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestConfigureLogging:
    def test_sets_package_level(self):
        logger = logging.getLogger("funcmock")
        previous = logger.level
        try:
            configure_logging(MockSettings(log_level="DEBUG"))
            assert logger.level == logging.DEBUG
            assert logging.getLogger("funcmock.controller").getEffectiveLevel() == logging.DEBUG
        finally:
            logger.setLevel(previous)
