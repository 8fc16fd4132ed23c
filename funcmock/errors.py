"""
Failure taxonomy for function mocks.

Validation problems are not raised: they are described by a MockFailure and
handed to the test context, so a test can keep exercising other registrations
after one of them was rejected.

Failure kinds:
    - CONSTRUCTION: the target is not a callable with an inspectable signature
    - ARITY_MISMATCH: a pattern, response or query has the wrong number of values
    - TYPE_MISMATCH: a mocked value is not assignable to its result type
    - VERIFICATION_MISS: no logged call matches the queried arguments

The only fatal condition is a patcher that cannot install, which raises
PatchError.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class FailureKind(StrEnum):
    """Classification of a reported mock failure."""

    CONSTRUCTION = "construction"
    ARITY_MISMATCH = "arity_mismatch"
    TYPE_MISMATCH = "type_mismatch"
    VERIFICATION_MISS = "verification_miss"


@dataclass(frozen=True)
class MockFailure:
    """A recoverable failure, rendered into the message sent to the test context."""

    kind: FailureKind
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


class FuncMockError(Exception):
    """Base class for errors raised (not reported) by funcmock."""

    pass


class SignatureError(FuncMockError):
    """Raised when a target's signature cannot be captured."""

    pass


class PatchError(FuncMockError):
    """Raised when a call redirection cannot be installed."""

    pass
