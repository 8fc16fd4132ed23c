"""
pytest integration for funcmock.

Enable it from a conftest.py::

    pytest_plugins = ["funcmock.pytest_plugin"]

Fixtures:
    mock_context -- a test context bound to the running test; anything
                    reported to it fails the test once its body has finished
    func_mock    -- factory ``func_mock(target, **kwargs)`` returning enabled
                    mocks that are disabled again at teardown
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

import pytest

from funcmock.config import configure_logging
from funcmock.context import RecordingContext
from funcmock.controller import FuncMock, mock_func

LOG = logging.getLogger("funcmock.pytest_plugin")


class PytestContext(RecordingContext):
    """Test context that collects failures for one pytest item."""

    def __init__(self, nodeid: str = "") -> None:
        super().__init__()
        self.nodeid = nodeid

    def summary(self) -> str:
        return "\n".join(self.failures)


CONTEXT_KEY = pytest.StashKey[PytestContext]()


def pytest_configure(config: pytest.Config) -> None:
    configure_logging()


@pytest.fixture
def mock_context(request: pytest.FixtureRequest) -> PytestContext:
    context = PytestContext(request.node.nodeid)
    request.node.stash[CONTEXT_KEY] = context
    return context


@pytest.fixture
def func_mock(mock_context: PytestContext) -> Iterator[Callable[..., FuncMock | None]]:
    mocks: list[FuncMock] = []

    def factory(target: Callable[..., Any], **kwargs: Any) -> FuncMock | None:
        mock = mock_func(mock_context, target, **kwargs)
        if mock is not None:
            mocks.append(mock)
        return mock

    yield factory

    for mock in reversed(mocks):
        mock.disable()
    LOG.debug("Disabled %d mock(s) for %s", len(mocks), mock_context.nodeid)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Iterator[None]:
    result = yield
    context = item.stash.get(CONTEXT_KEY, None)
    if context is not None and context.has_failed():
        pytest.fail(
            f"funcmock reported {len(context.failures)} failure(s):\n{context.summary()}",
            pytrace=False,
        )
    return result
