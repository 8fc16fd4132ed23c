"""
Re-entrancy guard for redirected calls.

A mocked callable can be reached again while funcmock is still handling a
call to it: through logging (``LogRecord`` calls ``os.path.basename``),
through a test context, or recursively from inside the real implementation.
Those calls must go straight to the real callable. Two context variables
track this per thread and per asyncio task:

    - engine depth: > 0 while funcmock does its own work (registration,
      dispatch bookkeeping, verification, reporting); every mock passes
      calls through
    - delegating:   ids of the mocks whose real implementation is running;
      only those mocks pass calls through, other mocks keep intercepting
"""

from __future__ import annotations

import contextvars
import functools
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_engine_depth: contextvars.ContextVar[int] = contextvars.ContextVar(
    "funcmock_engine_depth", default=0
)
_delegating: contextvars.ContextVar[frozenset[int]] = contextvars.ContextVar(
    "funcmock_delegating", default=frozenset()
)


@contextmanager
def engine_work() -> Iterator[None]:
    """Mark the current thread or task as running funcmock internals."""
    token = _engine_depth.set(_engine_depth.get() + 1)
    try:
        yield
    finally:
        _engine_depth.reset(token)


@contextmanager
def delegating(owner: object) -> Iterator[None]:
    """Mark *owner*'s real implementation as running."""
    token = _delegating.set(_delegating.get() | {id(owner)})
    try:
        yield
    finally:
        _delegating.reset(token)


def is_bypassed(owner: object) -> bool:
    """True when a call redirected to *owner* must skip interception."""
    return _engine_depth.get() > 0 or id(owner) in _delegating.get()


def engine_operation(method: F) -> F:
    """Run *method* under ``engine_work``."""

    @functools.wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with engine_work():
            return method(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
