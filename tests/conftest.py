"""Shared pytest fixtures for funcmock tests."""
from __future__ import annotations

from typing import Any, Callable, List, Tuple

import pytest

from funcmock.config import MockSettings
from funcmock.context import RecordingContext

pytest_plugins = ["pytester", "funcmock.pytest_plugin"]


# -- Recording patcher: drives FuncMock without touching any module --

class RecordingGuard:
    def __init__(self, patcher: "RecordingPatcher") -> None:
        self._patcher = patcher
        self.restore_count = 0

    def restore(self) -> None:
        self.restore_count += 1
        self._patcher.active = None


class RecordingPatcher:
    """Minimal patcher that remembers what it was asked to install."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.installs: List[Tuple[Callable[..., Any], Callable[..., Any]]] = []
        self.guards: List[RecordingGuard] = []
        self.active: Callable[..., Any] | None = None
        self._fail_with = fail_with

    def install(self, target: Callable[..., Any], replacement: Callable[..., Any]) -> RecordingGuard:
        if self._fail_with is not None:
            raise self._fail_with
        self.installs.append((target, replacement))
        self.active = replacement
        guard = RecordingGuard(self)
        self.guards.append(guard)
        return guard


@pytest.fixture
def context() -> RecordingContext:
    return RecordingContext()


@pytest.fixture
def patcher() -> RecordingPatcher:
    return RecordingPatcher()


@pytest.fixture
def settings() -> MockSettings:
    return MockSettings()
