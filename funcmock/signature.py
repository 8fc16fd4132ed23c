"""
Signature capture for mocked callables.

The signature of a target is read once, when its mock is created, and kept as
an explicit frozen structure. Every registration, response and verification
query is validated against that structure rather than against the live
callable.

Argument vectors are normalized with ``inspect.Signature.bind`` so that a call
made positionally and one made with keywords produce the same tuple: one slot
per declared parameter, defaults applied, ``*args`` collected in a tuple and
``**kwargs`` in a dict.

Result types are derived from the return annotation:
    - ``None``                    -> no results (the call returns None)
    - ``tuple[A, B]`` (fixed)     -> one result per element (returned as a tuple)
    - anything else               -> a single result of that type
    - missing annotation          -> a single result of type Any
"""

from __future__ import annotations

import collections.abc
import inspect
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable

from funcmock.errors import SignatureError

LOG = logging.getLogger("funcmock.signature")

_EMPTY = inspect.Parameter.empty

_ZERO_FACTORIES: dict[Any, Callable[[], Any]] = {
    bool: bool,
    int: int,
    float: float,
    complex: complex,
    str: str,
    bytes: bytes,
    bytearray: bytearray,
    list: list,
    tuple: tuple,
    dict: dict,
    set: set,
    frozenset: frozenset,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}


@dataclass(frozen=True)
class ParameterSpec:
    """One declared parameter of the target."""

    name: str
    kind: inspect._ParameterKind
    annotation: Any = Any
    has_default: bool = False

    @property
    def is_variadic(self) -> bool:
        return self.kind is inspect.Parameter.VAR_POSITIONAL

    @property
    def is_keywords(self) -> bool:
        return self.kind is inspect.Parameter.VAR_KEYWORD


@dataclass(frozen=True)
class Signature:
    """Parameter and result shape of a target, captured once."""

    parameters: tuple[ParameterSpec, ...]
    results: tuple[Any, ...]
    is_coroutine: bool = False
    inspected: inspect.Signature = field(default_factory=inspect.Signature, repr=False, compare=False)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def result_arity(self) -> int:
        return len(self.results)

    def bind(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[Any, ...]:
        """
        Normalize a call's arguments into one value per parameter.

        Raises:
            TypeError: the arguments do not fit the signature
        """
        bound = self.inspected.bind(*args, **kwargs)
        bound.apply_defaults()
        return tuple(bound.arguments[p.name] for p in self.parameters)

    def shape(self, values: tuple[Any, ...]) -> Any:
        """Turn an ordered result sequence into what the target returns."""
        if self.result_arity == 0:
            return None
        if self.result_arity == 1:
            return values[0]
        return tuple(values)

    def describe(self) -> str:
        return str(self.inspected)


def capture_signature(target: Any) -> Signature:
    """
    Read the signature of *target*.

    String annotations are resolved where possible; annotations that cannot be
    resolved stay strings and are treated as Any.

    Raises:
        SignatureError: target is not callable or has no inspectable signature
    """
    if not callable(target):
        raise SignatureError(f"{target!r} is not callable")

    try:
        inspected = inspect.signature(target)
    except (TypeError, ValueError) as exc:
        raise SignatureError(f"cannot inspect signature of {target!r}: {exc}") from exc
    try:
        inspected = inspect.signature(target, eval_str=True)
    except (NameError, AttributeError, TypeError, SyntaxError) as exc:
        LOG.debug("Could not resolve annotations of %r: %s", target, exc)

    parameters = tuple(
        ParameterSpec(
            name=p.name,
            kind=p.kind,
            annotation=Any if p.annotation is _EMPTY else p.annotation,
            has_default=p.default is not _EMPTY,
        )
        for p in inspected.parameters.values()
    )
    return Signature(
        parameters=parameters,
        results=result_types(inspected.return_annotation),
        is_coroutine=inspect.iscoroutinefunction(target),
        inspected=inspected,
    )


def result_types(annotation: Any) -> tuple[Any, ...]:
    """Split a return annotation into ordered result types."""
    if annotation is _EMPTY:
        return (Any,)
    if annotation is None or annotation is types.NoneType:
        return ()
    if typing.get_origin(annotation) is tuple:
        args = typing.get_args(annotation)
        if args and args[-1] is not Ellipsis:
            return tuple(args)
    return (annotation,)


def _unwrap(annotation: Any) -> Any:
    """Strip Annotated[...] and NewType wrappers."""
    while True:
        if typing.get_origin(annotation) is typing.Annotated:
            annotation = typing.get_args(annotation)[0]
        elif isinstance(annotation, typing.NewType):
            annotation = annotation.__supertype__
        else:
            return annotation


def zero_value(annotation: Any) -> Any:
    """
    The zero value of a result type.

    Scalars and containers get their empty value; everything else,
    optionals and unions included, gets None.
    """
    annotation = _unwrap(annotation)
    origin = typing.get_origin(annotation) or annotation
    try:
        factory = _ZERO_FACTORIES.get(origin)
    except TypeError:  # unhashable annotation objects
        return None
    return factory() if factory is not None else None


def is_assignable(value: Any, annotation: Any) -> bool:
    """Whether *value* may be returned where *annotation* is declared."""
    annotation = _unwrap(annotation)

    if annotation is Any or annotation is object or annotation is _EMPTY:
        return True
    if isinstance(annotation, (str, typing.ForwardRef)):
        return True
    if annotation is None or annotation is types.NoneType:
        return value is None

    if isinstance(annotation, typing.TypeVar):
        if annotation.__constraints__:
            return any(is_assignable(value, c) for c in annotation.__constraints__)
        return annotation.__bound__ is None or is_assignable(value, annotation.__bound__)

    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(is_assignable(value, arg) for arg in typing.get_args(annotation))
    if origin is typing.Literal:
        return any(type(value) is type(arg) and value == arg for arg in typing.get_args(annotation))

    target = origin or annotation
    # int is acceptable where float or complex is declared
    if target is float:
        return isinstance(value, (int, float))
    if target is complex:
        return isinstance(value, (int, float, complex))
    if not isinstance(target, type):
        return True
    try:
        return isinstance(value, target)
    except TypeError:
        LOG.debug("Cannot check %r against %r, accepting it", value, annotation)
        return True


def describe_type(annotation: Any) -> str:
    return inspect.formatannotation(annotation)
