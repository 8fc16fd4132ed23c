"""Configuration for funcmock.

Loads settings from environment variables with sensible defaults.
"""
from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class MockSettings(BaseModel):
    """Settings shared by every FuncMock that is not given its own."""

    log_level: LogLevel = "WARNING"
    check_types: bool = True  # validate returns() values against result types
    repr_limit: int = Field(default=120, gt=10)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("check_types", mode="before")
    @classmethod
    def _parse_flag(cls, value: object) -> object:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(f"expected a boolean flag, got {value!r}")
        return value

    @classmethod
    def from_env(cls) -> "MockSettings":
        return cls(
            log_level=os.getenv("FUNCMOCK_LOG_LEVEL", "WARNING"),
            check_types=os.getenv("FUNCMOCK_CHECK_TYPES", "true"),
            repr_limit=os.getenv("FUNCMOCK_REPR_LIMIT", "120"),
        )


@lru_cache
def get_settings() -> MockSettings:
    """Environment-derived settings, read once per process."""
    return MockSettings.from_env()


def configure_logging(settings: MockSettings | None = None) -> None:
    """Apply the configured level to the ``funcmock`` logger tree."""
    if settings is None:
        settings = get_settings()
    logging.getLogger("funcmock").setLevel(settings.log_level)
