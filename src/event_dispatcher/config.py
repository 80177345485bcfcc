"""Configuration models for event dispatchers."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError


class DispatcherSettings(BaseModel):
    """Behavioural switches for an :class:`~event_dispatcher.EventDispatcher`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    strict_until_returns: bool = Field(
        default=True,
        description="If True a notify_until listener returning a non-bool raises InvalidListener.",
    )
    validate_on_connect: bool = Field(
        default=True,
        description="Reject listeners that cannot take an event argument when they are connected.",
    )
    log_dispatch: bool = Field(
        default=False,
        description="Emit a structured log record for every dispatch.",
    )
    collect_metrics: bool = Field(
        default=True,
        description="Record dispatch counters and timings in the dispatcher's MetricsCollector.",
    )


def build_settings_from_dict(raw: Dict[str, Any]) -> DispatcherSettings:
    """Utility helper to build :class:`DispatcherSettings` from a plain dictionary."""

    try:
        return DispatcherSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid dispatcher settings: {exc}") from exc


def load_settings(path: Path) -> DispatcherSettings:
    """Load settings from a JSON file at ``path``."""

    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Settings file is not valid JSON: {path}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must contain a JSON object")
    return build_settings_from_dict(data)


__all__ = [
    "DispatcherSettings",
    "build_settings_from_dict",
    "load_settings",
]
