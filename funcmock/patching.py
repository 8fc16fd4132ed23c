"""
Call redirection for function mocks.

A patcher swaps a live callable for a replacement and hands back a guard that
puts the original back. FuncMock only talks to the Patcher protocol, so the
engine can be driven without patching anything (see ``FuncMock.dispatch``).

AttributePatcher redirects by rebinding the attribute the target is reachable
under, found from ``__module__`` and ``__qualname__``:

    - module-level functions:      module.func
    - methods of module classes:   module.Class.method
    - static methods:              module.Class.static (rewrapped in staticmethod)

Callers that resolve the attribute at call time see the replacement. Code that
copied the function object elsewhere (``from module import func``) keeps the
original unless that alias is patched explicitly with ``owner=``/``name=``.
"""

from __future__ import annotations

import inspect
import logging
import sys
from typing import Any, Callable, Protocol

from funcmock.errors import PatchError

LOG = logging.getLogger("funcmock.patching")

_MISSING = object()


class Guard(Protocol):
    def restore(self) -> None:
        ...


class Patcher(Protocol):
    def install(self, target: Callable[..., Any], replacement: Callable[..., Any]) -> Guard:
        """Redirect every call of *target* to *replacement*."""
        ...


class AttributeGuard:
    """Restores one rebound attribute. Restoring twice is a no-op."""

    def __init__(self, owner: Any, name: str, original: Any) -> None:
        self.owner = owner
        self.name = name
        self.original = original
        self.restored = False

    def restore(self) -> None:
        if self.restored:
            return
        if self.original is _MISSING:
            delattr(self.owner, self.name)
        else:
            setattr(self.owner, self.name, self.original)
        self.restored = True
        LOG.debug("Restored %s.%s", _owner_name(self.owner), self.name)


class AttributePatcher:
    """
    Patcher that rebinds the attribute holding the target.

    Args:
        owner: Object to patch on; resolved from the target when omitted
        name: Attribute name on *owner*; defaults to the target's __name__
    """

    def __init__(self, owner: Any = None, name: str | None = None) -> None:
        self.owner = owner
        self.name = name

    def install(self, target: Callable[..., Any], replacement: Callable[..., Any]) -> AttributeGuard:
        if self.owner is not None:
            owner, name = self.owner, self.name or getattr(target, "__name__", "")
            if not name:
                raise PatchError(f"cannot tell which attribute of {owner!r} holds {target!r}")
        else:
            owner, name = resolve_owner(target)

        original = vars(owner).get(name, _MISSING) if hasattr(owner, "__dict__") else _MISSING
        if isinstance(original, staticmethod):
            replacement = staticmethod(replacement)
        elif isinstance(original, classmethod):
            raise PatchError(f"cannot patch classmethod {_owner_name(owner)}.{name}")

        try:
            setattr(owner, name, replacement)
        except (AttributeError, TypeError) as exc:
            raise PatchError(f"cannot patch {_owner_name(owner)}.{name}: {exc}") from exc

        LOG.debug("Patched %s.%s", _owner_name(owner), name)
        return AttributeGuard(owner, name, original)


def resolve_owner(target: Callable[..., Any]) -> tuple[Any, str]:
    """
    Find the object and attribute name under which *target* is published.

    Raises:
        PatchError: the target is not reachable from its module
    """
    if inspect.ismethod(target):
        raise PatchError(
            f"{target!r} is a bound method; patch the function on its class instead"
        )

    module_name = getattr(target, "__module__", None)
    qualname = getattr(target, "__qualname__", None)
    if not module_name or not qualname or "<" in qualname:
        raise PatchError(f"{target!r} is not reachable from a module attribute")

    module = sys.modules.get(module_name)
    if module is None:
        raise PatchError(f"module {module_name!r} of {target!r} is not imported")

    *path, name = qualname.split(".")
    owner: Any = module
    for part in path:
        owner = getattr(owner, part, _MISSING)
        if owner is _MISSING:
            raise PatchError(f"cannot resolve {module_name}.{qualname}")

    raw = vars(owner).get(name, _MISSING) if hasattr(owner, "__dict__") else _MISSING
    if isinstance(raw, staticmethod):
        raw = raw.__func__
    if raw is not target:
        raise PatchError(f"{module_name}.{qualname} does not refer to {target!r}")
    return owner, name


def _owner_name(owner: Any) -> str:
    return getattr(owner, "__qualname__", None) or getattr(owner, "__name__", repr(owner))
