"""Custom exceptions raised by the event dispatcher."""


class DispatcherError(RuntimeError):
    """Base error for all dispatcher related exceptions."""


class InvalidArgument(DispatcherError, ValueError):
    """Raised when an event is constructed with malformed arguments."""


class KeyNotFound(DispatcherError, KeyError):
    """Raised when reading an event parameter that was never set."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class InvalidListener(DispatcherError, TypeError):
    """Raised when a listener's call shape does not fit the dispatch protocol."""


class ConfigurationError(DispatcherError):
    """Raised when dispatcher settings are invalid or missing."""
