"""Registry mapping event names to ordered listener chains."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Tuple

from .exceptions import InvalidListener
from .listeners import ListenerHandle
from .logging import get_logger

LOGGER = get_logger("registry")


class ListenerRegistry:
    """Thread-safe store of listener chains keyed by event name.

    Readers always get a tuple snapshot, so a dispatch in progress is never
    affected by a concurrent ``connect`` or ``disconnect``.
    """

    def __init__(self, validate_on_connect: bool = True) -> None:
        self._chains: Dict[str, List[ListenerHandle]] = {}
        self._lock = threading.Lock()
        self.validate_on_connect = validate_on_connect

    def connect(self, name: str, listener: Callable[..., Any]) -> ListenerHandle:
        handle = ListenerHandle(listener)
        if self.validate_on_connect and not handle.accepts_any():
            raise InvalidListener(
                f"Listener {handle.callback!r} must accept an event argument"
            )
        with self._lock:
            self._chains.setdefault(name, []).append(handle)
        LOGGER.debug("connected listener=%r event=%s", handle.callback, name)
        return handle

    def disconnect(self, name: str, listener: Callable[..., Any]) -> bool:
        """Remove the first matching listener. Unknown listeners are ignored."""

        with self._lock:
            chain = self._chains.get(name)
            if not chain:
                return False
            for index, handle in enumerate(chain):
                if handle == listener:
                    del chain[index]
                    break
            else:
                return False
            if not chain:
                del self._chains[name]
        LOGGER.debug("disconnected listener=%r event=%s", listener, name)
        return True

    def has_listeners(self, name: str) -> bool:
        with self._lock:
            return bool(self._chains.get(name))

    def listeners_for(self, name: str) -> Tuple[ListenerHandle, ...]:
        with self._lock:
            return tuple(self._chains.get(name, ()))

    def get_listeners(self, name: str) -> Tuple[Callable[..., Any], ...]:
        return tuple(handle.callback for handle in self.listeners_for(name))

    def names(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._chains)

    def clear(self, name: str | None = None) -> None:
        with self._lock:
            if name is None:
                self._chains.clear()
            else:
                self._chains.pop(name, None)
