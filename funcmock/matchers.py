"""
Argument matchers.

A matcher is any object with an ``accepts(candidate) -> bool`` method. When a
matcher is passed to ``FuncMock.with_args`` the slot matches by calling
``accepts`` instead of comparing with ``==``. Matchers are a registration-time
concept: ``FuncMock.verify`` compares literally.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ArgumentMatcher(Protocol):
    def accepts(self, candidate: Any) -> bool:
        ...


def is_matcher(value: Any) -> bool:
    """True when *value* should be matched by predicate rather than equality."""
    # A class defining accepts() is a literal, only its instances are matchers.
    if isinstance(value, type):
        return False
    return isinstance(value, ArgumentMatcher)


class AnyArgument:
    """Accepts every value, None included."""

    def accepts(self, candidate: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "ANY"


ANY = AnyArgument()


class InstanceOf:
    """Accepts instances of any of the given types."""

    def __init__(self, *types: type) -> None:
        if not types:
            raise ValueError("InstanceOf needs at least one type")
        self.types = types

    def accepts(self, candidate: Any) -> bool:
        return isinstance(candidate, self.types)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self.types)
        return f"InstanceOf({names})"


class Satisfies:
    """Accepts values for which *predicate* returns a truthy result."""

    def __init__(self, predicate: Callable[[Any], Any], description: str = "") -> None:
        self.predicate = predicate
        self.description = description or getattr(predicate, "__name__", "predicate")

    def accepts(self, candidate: Any) -> bool:
        return bool(self.predicate(candidate))

    def __repr__(self) -> str:
        return f"Satisfies({self.description})"


class _NotNone:
    def accepts(self, candidate: Any) -> bool:
        return candidate is not None

    def __repr__(self) -> str:
        return "NotNone"


NotNone = _NotNone()
