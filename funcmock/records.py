"""
Records kept by a function mock.

    - Invocation: an observed argument vector, as stored in the call log
    - Pattern:    a registered argument vector whose slots are tagged either
                  LiteralArg (compare with equality) or MatcherArg (ask the
                  matcher); ``*args`` and ``**kwargs`` slots are tagged per item
    - Response:   MockedValues | DelegateToReal | ReturnDefaults
    - Behavior:   a committed (pattern, response) pair

All records are frozen. The call log only ever records inputs, never what was
returned.
"""

from __future__ import annotations

import reprlib
from dataclasses import dataclass
from typing import Any, Union

from funcmock.matchers import ArgumentMatcher, is_matcher
from funcmock.signature import ParameterSpec, Signature


_SCALARS = (bool, int, float, complex)


def values_equal(expected: Any, actual: Any) -> bool:
    """
    None-safe deep equality.

    None only equals None. Top-level numbers must have the same type, so
    ``1``, ``1.0`` and ``True`` are three different arguments. Values whose
    ``==`` raises or returns something without a truth value (array-likes)
    are treated as unequal. Runs with the controller lock held and must not
    log.
    """
    if expected is None or actual is None:
        return expected is actual
    if expected is actual:
        return True
    if isinstance(expected, _SCALARS) and type(expected) is not type(actual):
        return False
    try:
        return bool(expected == actual)
    except (TypeError, ValueError):
        return False


def format_arguments(arguments: tuple[Any, ...], limit: int = 120) -> str:
    r = reprlib.Repr()
    r.maxstring = limit
    r.maxother = limit
    return "(" + ", ".join(r.repr(a) for a in arguments) + ")"


# -- Pattern slots --


@dataclass(frozen=True)
class LiteralArg:
    value: Any

    def matches(self, candidate: Any) -> bool:
        return values_equal(self.value, candidate)

    def __repr__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class MatcherArg:
    matcher: ArgumentMatcher

    def matches(self, candidate: Any) -> bool:
        return bool(self.matcher.accepts(candidate))

    def __repr__(self) -> str:
        return repr(self.matcher)


@dataclass(frozen=True)
class VariadicArg:
    """Slot of a ``*args`` parameter: same length, item-wise match."""

    items: tuple["PatternArg", ...]

    def matches(self, candidate: Any) -> bool:
        if not isinstance(candidate, tuple) or len(candidate) != len(self.items):
            return False
        return all(slot.matches(value) for slot, value in zip(self.items, candidate))

    def __repr__(self) -> str:
        return repr(self.items)


@dataclass(frozen=True)
class KeywordsArg:
    """Slot of a ``**kwargs`` parameter: same keys, value-wise match."""

    items: tuple[tuple[str, "PatternArg"], ...]

    def matches(self, candidate: Any) -> bool:
        if not isinstance(candidate, dict) or set(candidate) != {name for name, _ in self.items}:
            return False
        return all(slot.matches(candidate[name]) for name, slot in self.items)

    def __repr__(self) -> str:
        return "{" + ", ".join(f"{name!r}: {slot!r}" for name, slot in self.items) + "}"


PatternArg = Union[LiteralArg, MatcherArg, VariadicArg, KeywordsArg]


def tag(value: Any) -> LiteralArg | MatcherArg:
    if is_matcher(value):
        return MatcherArg(value)
    return LiteralArg(value)


def make_slot(value: Any, parameter: ParameterSpec) -> PatternArg:
    if parameter.is_variadic:
        return VariadicArg(tuple(tag(v) for v in value))
    if parameter.is_keywords:
        return KeywordsArg(tuple((name, tag(v)) for name, v in value.items()))
    return tag(value)


@dataclass(frozen=True)
class Pattern:
    slots: tuple[PatternArg, ...]

    @classmethod
    def from_arguments(cls, signature: Signature, arguments: tuple[Any, ...]) -> "Pattern":
        return cls(tuple(make_slot(v, p) for v, p in zip(arguments, signature.parameters)))

    def matches(self, arguments: tuple[Any, ...]) -> bool:
        if len(arguments) != len(self.slots):
            return False
        return all(slot.matches(value) for slot, value in zip(self.slots, arguments))

    def __repr__(self) -> str:
        return "(" + ", ".join(repr(s) for s in self.slots) + ")"


@dataclass(frozen=True)
class Invocation:
    """An observed call, inputs only."""

    arguments: tuple[Any, ...]

    def same_as(self, arguments: tuple[Any, ...]) -> bool:
        """Literal comparison, used by verification."""
        if len(arguments) != len(self.arguments):
            return False
        return all(values_equal(a, b) for a, b in zip(arguments, self.arguments))

    def describe(self, limit: int = 120) -> str:
        return format_arguments(self.arguments, limit)


# -- Responses --


@dataclass(frozen=True)
class MockedValues:
    values: tuple[Any, ...]


@dataclass(frozen=True)
class DelegateToReal:
    pass


@dataclass(frozen=True)
class ReturnDefaults:
    pass


Response = Union[MockedValues, DelegateToReal, ReturnDefaults]


@dataclass(frozen=True)
class Behavior:
    """A committed registration."""

    pattern: Pattern
    response: Response

    def matches(self, arguments: tuple[Any, ...]) -> bool:
        return self.pattern.matches(arguments)
