"""
Function mock controller.

A FuncMock sits behind a patched callable. Every redirected call goes through
``dispatch``: the arguments are normalized against the captured signature,
appended to the call log, matched against the registered behaviors in
registration order, and answered with mocked values, the real implementation,
or the zero values of the result types.

Usage::

    mock = mock_func(context, module.fetch_name)
    mock.with_args("known-id").returns("Ada")
    mock.with_args(ANY).call_real()

    module.fetch_name("known-id")   # -> "Ada"
    mock.verify(context, "known-id")
    mock.disable()

Registration and verification problems are reported to the test context and
never raised; the offending registration is dropped and the mock stays usable.

Calls that reach the patch while funcmock is doing its own work, or while the
real implementation of this mock is running, go straight to the real callable
(see ``funcmock.reentry``). The lock is never held while logging or while
calling out to the real implementation.
"""

from __future__ import annotations

import copy
import functools
import logging
import threading
from typing import Any, Callable

from funcmock.config import MockSettings, get_settings
from funcmock.context import TestContext, report
from funcmock.errors import FailureKind, MockFailure, SignatureError
from funcmock.patching import AttributePatcher, Guard, Patcher
from funcmock.reentry import delegating, engine_operation, engine_work, is_bypassed
from funcmock.records import (
    Behavior,
    DelegateToReal,
    Invocation,
    MockedValues,
    Pattern,
    Response,
    ReturnDefaults,
    format_arguments,
)
from funcmock.signature import capture_signature, describe_type, is_assignable, zero_value

LOG = logging.getLogger("funcmock.controller")


class FuncMock:
    """
    Registry, call log and lifecycle of one mocked callable.

    Creating a FuncMock directly does not patch anything; ``mock_func`` creates
    and enables one. ``dispatch`` is the entry point the patch forwards to and
    can be called directly.

    Args:
        target: The callable to mock
        context: Test context receiving registration failures
        patcher: Call redirection used by enable/disable
        settings: Overrides the environment-derived settings

    Raises:
        SignatureError: target is not callable or cannot be inspected
    """

    def __init__(
        self,
        target: Callable[..., Any],
        *,
        context: TestContext | None = None,
        patcher: Patcher | None = None,
        settings: MockSettings | None = None,
    ) -> None:
        self.target = target
        self.signature = capture_signature(target)
        self.name = getattr(target, "__qualname__", None) or repr(target)
        self._context = context
        self._patcher = patcher if patcher is not None else AttributePatcher()
        self._settings = settings if settings is not None else get_settings()

        self._lock = threading.Lock()
        self._lifecycle = threading.Lock()  # serializes enable/disable
        self._behaviors: list[Behavior] = []
        self._calls: list[Invocation] = []
        self._pending: Pattern | None = None
        self._guard: Guard | None = None
        self._enabled = False

        self._defaults = tuple(zero_value(t) for t in self.signature.results)
        self.replacement = self._build_replacement()

    def __repr__(self) -> str:
        state = "enabled" if self._enabled else "disabled"
        return f"<FuncMock {self.name}{self.signature.describe()} {state}>"

    def __enter__(self) -> "FuncMock":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.disable()

    # -- Read-only views --

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def calls(self) -> tuple[Invocation, ...]:
        """Snapshot of the call log, oldest first."""
        with self._lock:
            return tuple(self._calls)

    @property
    def behaviors(self) -> tuple[Behavior, ...]:
        """Snapshot of the registry in matching order."""
        with self._lock:
            return tuple(self._behaviors)

    @property
    def defaults(self) -> tuple[Any, ...]:
        return self._defaults

    # -- Registration --

    @engine_operation
    def with_args(self, *args: Any, **kwargs: Any) -> "FuncMock":
        """
        Stage a pattern for the next returns()/call_real()/return_defaults().

        Arguments are bound like a real call. Argument matchers are matched by
        predicate, everything else by equality. A pattern that does not fit
        the signature is reported and dropped.
        """
        try:
            arguments = self.signature.bind(args, kwargs)
        except TypeError as exc:
            with self._lock:
                self._pending = None
            self._fail(
                FailureKind.ARITY_MISMATCH,
                f"with_args{format_arguments(args, self._settings.repr_limit)} does not fit "
                f"{self.name}{self.signature.describe()}: {exc}",
            )
            return self

        pattern = Pattern.from_arguments(self.signature, arguments)
        with self._lock:
            self._pending = pattern
        LOG.debug("Staged pattern %r for %s", pattern, self.name)
        return self

    @engine_operation
    def returns(self, *values: Any) -> Behavior | None:
        """Answer the staged pattern with *values*, one per result type."""
        pattern = self._take_pending("returns")
        if pattern is None:
            return None

        failure = self._check_values(values)
        if failure is not None:
            report(self._context, failure)
            return None
        return self._commit(pattern, MockedValues(tuple(values)))

    @engine_operation
    def call_real(self) -> Behavior | None:
        """Answer the staged pattern by calling the real implementation."""
        pattern = self._take_pending("call_real")
        if pattern is None:
            return None
        return self._commit(pattern, DelegateToReal())

    @engine_operation
    def return_defaults(self) -> Behavior | None:
        """Answer the staged pattern with the zero values of the result types."""
        pattern = self._take_pending("return_defaults")
        if pattern is None:
            return None
        return self._commit(pattern, ReturnDefaults())

    def _take_pending(self, finalizer: str) -> Pattern | None:
        with self._lock:
            pattern, self._pending = self._pending, None
        if pattern is None:
            LOG.warning("%s() on %s has no staged pattern, ignoring", finalizer, self.name)
        return pattern

    def _check_values(self, values: tuple[Any, ...]) -> MockFailure | None:
        expected = self.signature.result_arity
        if len(values) != expected:
            return MockFailure(
                FailureKind.ARITY_MISMATCH,
                f"returns() got {len(values)} value(s) but {self.name} has {expected} result(s)",
            )
        if not self._settings.check_types:
            return None
        for position, (value, annotation) in enumerate(zip(values, self.signature.results)):
            if not is_assignable(value, annotation):
                return MockFailure(
                    FailureKind.TYPE_MISMATCH,
                    f"result {position} of {self.name}: {value!r} is not assignable to "
                    f"{describe_type(annotation)}",
                )
        return None

    def _commit(self, pattern: Pattern, response: Response) -> Behavior:
        behavior = Behavior(pattern, response)
        with self._lock:
            self._behaviors.append(behavior)
            count = len(self._behaviors)
        LOG.debug("Registered behavior #%d for %s: %r -> %r", count, self.name, pattern, response)
        return behavior

    # -- Dispatch --

    def dispatch(self, *args: Any, **kwargs: Any) -> Any:
        """Entry point of a redirected call."""
        if is_bypassed(self):
            return self.target(*args, **kwargs)
        with engine_work():
            response = self._intercept(args, kwargs)
        if response is None:
            return self.target(*args, **kwargs)
        if isinstance(response, DelegateToReal):
            with delegating(self):
                return self.target(*args, **kwargs)
        with engine_work():
            return self._produce(response)

    async def dispatch_async(self, *args: Any, **kwargs: Any) -> Any:
        """Entry point of a redirected call to a coroutine function."""
        if is_bypassed(self):
            return await self.target(*args, **kwargs)
        with engine_work():
            response = self._intercept(args, kwargs)
        if response is None:
            return await self.target(*args, **kwargs)
        if isinstance(response, DelegateToReal):
            with delegating(self):
                return await self.target(*args, **kwargs)
        with engine_work():
            return self._produce(response)

    def _intercept(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Response | None:
        """Log the call and pick its response; None means bypass the mock."""
        try:
            arguments = self.signature.bind(args, kwargs)
        except TypeError as exc:
            # Let the real implementation raise its own TypeError.
            LOG.debug("Call to %s does not fit its signature (%s), passing through", self.name, exc)
            return None

        with self._lock:
            if not self._enabled:
                return None
            self._calls.append(Invocation(arguments))
            index, response = self._resolve(arguments)

        if index is None:
            LOG.debug("Call %s of %s matched nothing, using defaults", format_arguments(arguments), self.name)
        else:
            LOG.debug("Call %s of %s matched behavior #%d", format_arguments(arguments), self.name, index + 1)
        return response

    def _resolve(self, arguments: tuple[Any, ...]) -> tuple[int | None, Response]:
        # Caller holds the lock.
        for index, behavior in enumerate(self._behaviors):
            if behavior.matches(arguments):
                return index, behavior.response
        return None, ReturnDefaults()

    def _produce(self, response: Response) -> Any:
        if isinstance(response, MockedValues):
            return self.signature.shape(response.values)
        return self.signature.shape(tuple(copy.copy(v) for v in self._defaults))

    def _build_replacement(self) -> Callable[..., Any]:
        if self.signature.is_coroutine:

            @functools.wraps(self.target)
            async def replacement(*args: Any, **kwargs: Any) -> Any:
                return await self.dispatch_async(*args, **kwargs)

        else:

            @functools.wraps(self.target)
            def replacement(*args: Any, **kwargs: Any) -> Any:
                return self.dispatch(*args, **kwargs)

        replacement.__funcmock__ = self  # type: ignore[attr-defined]
        return replacement

    # -- Lifecycle --

    @engine_operation
    def enable(self) -> None:
        """
        Install the call redirection. No-op when already enabled.

        Raises:
            PatchError: the patcher cannot redirect the target
        """
        with self._lifecycle:
            if self._enabled:
                return
            guard = self._patcher.install(self.target, self.replacement)
            with self._lock:
                self._guard = guard
                self._enabled = True
        LOG.debug("Enabled mock of %s", self.name)

    @engine_operation
    def disable(self) -> None:
        """Restore the original callable; registry and call log are kept."""
        with self._lifecycle:
            with self._lock:
                if not self._enabled:
                    return
                guard, self._guard = self._guard, None
                self._enabled = False
            if guard is not None:
                guard.restore()
        LOG.debug("Disabled mock of %s", self.name)

    # -- Verification --

    @engine_operation
    def verify(self, context: TestContext, *args: Any, **kwargs: Any) -> bool:
        """
        Check that a call with exactly these arguments was logged.

        Comparison is literal: matchers are not applied. A miss is reported to
        *context* together with the calls that were observed.
        """
        limit = self._settings.repr_limit
        try:
            arguments = self.signature.bind(args, kwargs)
        except TypeError as exc:
            report(
                context,
                MockFailure(
                    FailureKind.ARITY_MISMATCH,
                    f"verify{format_arguments(args, limit)} does not fit "
                    f"{self.name}{self.signature.describe()}: {exc}",
                ),
            )
            return False

        calls = self.calls
        if any(call.same_as(arguments) for call in calls):
            return True

        observed = "\n".join(f"  {call.describe(limit)}" for call in calls) or "  (none)"
        report(
            context,
            MockFailure(
                FailureKind.VERIFICATION_MISS,
                f"{self.name} was never called with {format_arguments(arguments, limit)}; "
                f"observed calls:\n{observed}",
            ),
        )
        return False

    def _fail(self, kind: FailureKind, message: str) -> None:
        report(self._context, MockFailure(kind, message))


@engine_operation
def mock_func(
    context: TestContext,
    target: Callable[..., Any],
    *,
    patcher: Patcher | None = None,
    settings: MockSettings | None = None,
) -> FuncMock | None:
    """
    Mock *target* and start intercepting its calls.

    Returns None, after reporting to *context*, when the target cannot be
    mocked. A patcher that fails to install raises PatchError.
    """
    try:
        mock = FuncMock(target, context=context, patcher=patcher, settings=settings)
    except SignatureError as exc:
        report(context, MockFailure(FailureKind.CONSTRUCTION, str(exc)))
        return None
    mock.enable()
    LOG.debug("Mocking %s with %d default output(s)", mock.name, len(mock.defaults))
    return mock
