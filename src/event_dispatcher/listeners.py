"""Listener call shapes and the handle the registry stores."""

from __future__ import annotations

import inspect
from enum import Enum
from typing import Any, Callable, Dict, Protocol

from .event import Event
from .exceptions import InvalidListener


class EventListener(Protocol):
    """Signature of a ``notify``/``notify_until`` listener."""

    def __call__(self, event: Event) -> Any:  # pragma: no cover - Protocol
        ...


class FilterListener(Protocol):
    """Signature of a ``filter`` listener."""

    def __call__(self, event: Event, value: Any) -> Any:  # pragma: no cover - Protocol
        ...


class DispatchMode(str, Enum):
    """The dispatch protocols and the positional arguments each passes."""

    NOTIFY = "notify"
    NOTIFY_UNTIL = "notify_until"
    FILTER = "filter"

    @property
    def arity(self) -> int:
        return 2 if self is DispatchMode.FILTER else 1


def _signature(callback: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(callback)
    except (TypeError, ValueError):
        # Some builtins and C extensions expose no signature.
        return None


def _same_callable(first: object, second: object) -> bool:
    if first is second:
        return True
    if inspect.ismethod(first) and inspect.ismethod(second):
        return first.__self__ is second.__self__ and first.__func__ is second.__func__
    if inspect.isbuiltin(first) and inspect.isbuiltin(second):
        # Bound builtin methods such as ``items.append``.
        return first.__self__ is second.__self__ and first.__name__ == second.__name__
    return False


class ListenerHandle:
    """Uniform wrapper around a function, bound method, closure or callable object.

    Handles match by reference identity of their callbacks. Bound methods
    match when they bind the same function to the same instance, so two
    lookups of ``obj.method`` are interchangeable for ``disconnect``. Value
    equality (``__eq__``) on callable objects is never consulted.
    """

    __slots__ = ("callback", "_signature", "_shapes")

    def __init__(self, callback: Callable[..., Any]) -> None:
        if isinstance(callback, ListenerHandle):
            callback = callback.callback
        if not callable(callback):
            raise InvalidListener(f"Listener {callback!r} is not callable")
        self.callback = callback
        self._signature = _signature(callback)
        self._shapes: Dict[int, bool] = {}

    def __repr__(self) -> str:
        return f"ListenerHandle({self.callback!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ListenerHandle):
            other = other.callback
        return _same_callable(self.callback, other)

    __hash__ = None  # type: ignore[assignment]

    def _binds(self, count: int) -> bool:
        if count not in self._shapes:
            if self._signature is None:
                self._shapes[count] = True
            else:
                try:
                    self._signature.bind(*([None] * count))
                except TypeError:
                    self._shapes[count] = False
                else:
                    self._shapes[count] = True
        return self._shapes[count]

    def accepts(self, mode: DispatchMode) -> bool:
        """Return True if the callback can be invoked under ``mode``."""

        return self._binds(mode.arity)

    def accepts_any(self) -> bool:
        return any(self.accepts(mode) for mode in DispatchMode)

    def invoke(self, mode: DispatchMode, event: Event, *args: Any) -> Any:
        if not self.accepts(mode):
            raise InvalidListener(
                f"Listener {self.callback!r} cannot be called by {mode.value} "
                f"with {mode.arity} positional argument(s)"
            )
        return self.callback(event, *args)


__all__ = [
    "DispatchMode",
    "EventListener",
    "FilterListener",
    "ListenerHandle",
]
