"""Event object passed along a listener chain."""

from __future__ import annotations

import weakref
from typing import Any, Callable, Dict, Mapping

from .exceptions import InvalidArgument, KeyNotFound


def _reference(subject: object) -> Callable[[], object]:
    if subject is None:
        return lambda: None
    try:
        return weakref.ref(subject)
    except TypeError:
        # str, int, tuple and friends cannot be weakly referenced.
        return lambda: subject


class Event:
    """A named occurrence with a parameter bag and mutable dispatch result.

    The subject is only referenced weakly where Python allows it, so an event
    never keeps the object that raised it alive. Listeners may read and write
    ``parameters`` during dispatch; writes are visible to later listeners.
    """

    __slots__ = ("_name", "_subject", "_parameters", "_processed", "_return_value")

    def __init__(
        self,
        subject: object,
        name: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidArgument("Event name must be a non-empty string")
        self._name = name
        self._subject = _reference(subject)
        self._parameters: Dict[str, Any] = dict(parameters or {})
        self._processed = False
        self._return_value: Any = None

    def __repr__(self) -> str:
        return (
            f"Event(name={self._name!r}, processed={self._processed!r}, "
            f"parameters={self._parameters!r})"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def subject(self) -> object:
        """The object that raised the event, or ``None`` once it was collected."""

        return self._subject()

    @property
    def parameters(self) -> Dict[str, Any]:
        return self._parameters

    # ----- Parameter access ------------------------------------------------
    def get(self, key: str) -> Any:
        try:
            return self._parameters[key]
        except KeyError as exc:
            raise KeyNotFound(f"Event {self._name!r} has no parameter {key!r}") from exc

    def set(self, key: str, value: Any) -> None:
        self._parameters[key] = value

    def has(self, key: str) -> bool:
        return key in self._parameters

    def remove(self, key: str) -> None:
        self._parameters.pop(key, None)

    # ----- Dispatch result -------------------------------------------------
    @property
    def return_value(self) -> Any:
        return self._return_value

    @return_value.setter
    def return_value(self, value: Any) -> None:
        self._return_value = value

    def set_return_value(self, value: Any) -> None:
        self._return_value = value

    def get_return_value(self) -> Any:
        return self._return_value

    @property
    def processed(self) -> bool:
        return self._processed

    def set_processed(self) -> None:
        """Mark the event as handled. Calling it again has no effect."""

        self._processed = True

    def is_processed(self) -> bool:
        return self._processed
