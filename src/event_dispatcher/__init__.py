"""Synchronous in-process event dispatcher."""

from .config import DispatcherSettings, build_settings_from_dict, load_settings
from .dispatcher import EventDispatcher
from .event import Event
from .exceptions import (
    ConfigurationError,
    DispatcherError,
    InvalidArgument,
    InvalidListener,
    KeyNotFound,
)
from .listeners import DispatchMode, EventListener, FilterListener, ListenerHandle
from .registry import ListenerRegistry
from .telemetry import MetricsCollector

__all__ = [
    "ConfigurationError",
    "DispatchMode",
    "DispatcherError",
    "DispatcherSettings",
    "Event",
    "EventDispatcher",
    "EventListener",
    "FilterListener",
    "InvalidArgument",
    "InvalidListener",
    "KeyNotFound",
    "ListenerHandle",
    "ListenerRegistry",
    "MetricsCollector",
    "build_settings_from_dict",
    "load_settings",
]
