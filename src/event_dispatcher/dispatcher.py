"""Event dispatcher implementing the broadcast, short-circuit and filter protocols."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Generator, Tuple, TypeVar

from .config import DispatcherSettings
from .event import Event
from .exceptions import InvalidListener
from .listeners import DispatchMode, ListenerHandle
from .logging import get_logger, log_dispatch
from .registry import ListenerRegistry
from .telemetry import MetricsCollector

LOGGER = get_logger("dispatcher")

T = TypeVar("T")


class EventDispatcher:
    """Runs listener chains from a :class:`ListenerRegistry` against events.

    Every protocol snapshots the chain for ``event.name`` when it starts and
    calls listeners synchronously, in connection order, on the caller's
    thread. Exceptions raised by a listener propagate unchanged and stop the
    remaining chain.

    A registry passed in explicitly keeps its own ``validate_on_connect``;
    ``settings.validate_on_connect`` only configures the registry created
    here when none is given.
    """

    def __init__(
        self,
        registry: ListenerRegistry | None = None,
        settings: DispatcherSettings | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.settings = settings or DispatcherSettings()
        self.registry = registry or ListenerRegistry(
            validate_on_connect=self.settings.validate_on_connect
        )
        self.metrics = metrics or MetricsCollector()

    # ----- Registry delegation ---------------------------------------------
    def connect(self, name: str, listener: Callable[..., Any]) -> None:
        self.registry.connect(name, listener)

    def disconnect(self, name: str, listener: Callable[..., Any]) -> bool:
        return self.registry.disconnect(name, listener)

    def has_listeners(self, name: str) -> bool:
        return self.registry.has_listeners(name)

    def get_listeners(self, name: str) -> Tuple[Callable[..., Any], ...]:
        return self.registry.get_listeners(name)

    # ----- Protocols -------------------------------------------------------
    def notify(self, event: Event) -> Event:
        """Call every listener with ``event``, ignoring what they return."""

        chain = self.registry.listeners_for(event.name)
        with self._observe(DispatchMode.NOTIFY, event, chain):
            for handle in chain:
                handle.invoke(DispatchMode.NOTIFY, event)
        return event

    def notify_until(self, event: Event) -> Event:
        """Call listeners until one handles the event.

        A listener handles the event either by returning True or by calling
        ``event.set_processed()`` itself; no later listener is invoked.
        """

        chain = self.registry.listeners_for(event.name)
        strict = self.settings.strict_until_returns
        with self._observe(DispatchMode.NOTIFY_UNTIL, event, chain):
            for handle in chain:
                handled = handle.invoke(DispatchMode.NOTIFY_UNTIL, event)
                if event.is_processed():
                    break
                if strict and not isinstance(handled, bool):
                    raise InvalidListener(
                        f"Listener {handle.callback!r} returned {type(handled).__name__} "
                        f"from notify_until for {event.name!r}; expected bool"
                    )
                if handled:
                    event.set_processed()
                    break
        if self.settings.collect_metrics and event.is_processed():
            self.metrics.increment("dispatch.notify_until.processed")
        return event

    def filter(self, event: Event, value: T) -> T:
        """Thread ``value`` through every listener and return the final value."""

        chain = self.registry.listeners_for(event.name)
        with self._observe(DispatchMode.FILTER, event, chain):
            for handle in chain:
                value = handle.invoke(DispatchMode.FILTER, event, value)
        event.set_return_value(value)
        return value

    @contextmanager
    def _observe(
        self,
        mode: DispatchMode,
        event: Event,
        chain: Tuple[ListenerHandle, ...],
    ) -> Generator[None, None, None]:
        LOGGER.debug(
            "dispatch mode=%s event=%s listeners=%d",
            mode.value,
            event.name,
            len(chain),
            extra={"event_name": event.name, "mode": mode.value, "listeners": len(chain)},
        )
        if self.settings.collect_metrics:
            self.metrics.increment(f"dispatch.{mode.value}")
            self.metrics.increment(f"dispatch.{mode.value}.listeners", len(chain))
            with self.metrics.time(f"dispatch.{mode.value}"):
                yield
        else:
            yield
        if self.settings.log_dispatch:
            log_dispatch(
                LOGGER,
                mode.value,
                event.name,
                len(chain),
                processed=event.is_processed() if mode is DispatchMode.NOTIFY_UNTIL else None,
            )
