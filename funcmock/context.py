"""
Test context seam.

A test context is the sink for recoverable mock failures. Reporting marks the
context as failed but never raises, so the calling test keeps running.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from funcmock.errors import MockFailure
from funcmock.reentry import engine_work

LOG = logging.getLogger("funcmock.context")


@runtime_checkable
class TestContext(Protocol):
    """What funcmock needs from the running test."""

    def report_failure(self, message: str) -> None:
        ...

    def has_failed(self) -> bool:
        ...


class RecordingContext:
    """
    In-memory test context.

    Collects every reported message. Handy for asserting that a registration
    or verification was rejected without failing the surrounding test.
    """

    def __init__(self) -> None:
        self.failures: list[str] = []

    def report_failure(self, message: str) -> None:
        self.failures.append(message)

    def has_failed(self) -> bool:
        return bool(self.failures)

    def clear(self) -> None:
        self.failures = []


def report(context: TestContext | None, failure: MockFailure) -> None:
    """
    Send *failure* to *context*, logging it either way.

    Mocked callables reached while reporting are not intercepted.
    """
    with engine_work():
        LOG.warning("%s", failure)
        if context is not None:
            context.report_failure(str(failure))
