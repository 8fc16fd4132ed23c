"""
funcmock: per-argument mocking of arbitrary callables.

Patch a function by its signature, script responses for specific argument
vectors, fall back to zero values or to the real implementation, and verify
afterwards which argument vectors were observed.

Submodules:
    - controller: FuncMock and mock_func, the registration/dispatch engine
    - signature: signature capture, zero values, result type checks
    - records: invocations, patterns, responses and behaviors
    - matchers: argument matchers usable in place of literal values
    - patching: call redirection (Patcher protocol, AttributePatcher)
    - reentry: bypass for calls made while funcmock or a real call is running
    - context: test context protocol and an in-memory implementation
    - pytest_plugin: fixtures for pytest
"""

from __future__ import annotations

from funcmock.config import MockSettings, configure_logging, get_settings
from funcmock.context import RecordingContext, TestContext
from funcmock.controller import FuncMock, mock_func
from funcmock.errors import FailureKind, FuncMockError, MockFailure, PatchError, SignatureError
from funcmock.matchers import ANY, AnyArgument, ArgumentMatcher, InstanceOf, NotNone, Satisfies
from funcmock.patching import AttributePatcher, Patcher
from funcmock.records import Behavior, DelegateToReal, Invocation, MockedValues, ReturnDefaults

__all__ = [
    "ANY",
    "AnyArgument",
    "ArgumentMatcher",
    "AttributePatcher",
    "Behavior",
    "DelegateToReal",
    "FailureKind",
    "FuncMock",
    "FuncMockError",
    "InstanceOf",
    "Invocation",
    "MockFailure",
    "MockSettings",
    "MockedValues",
    "NotNone",
    "PatchError",
    "Patcher",
    "RecordingContext",
    "ReturnDefaults",
    "Satisfies",
    "SignatureError",
    "TestContext",
    "configure_logging",
    "get_settings",
    "mock_func",
]
