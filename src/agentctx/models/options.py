"""Resolved run configuration."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_TIMEOUT_MS = 250


class CollectOptions(BaseModel):
    """Options consumed by the orchestrator and collectors.

    Built by the CLI from flags and the optional config file. An unset,
    non-numeric or non-positive timeout falls back to the default.
    """

    pretty: bool = False
    include_clipboard: bool = False
    include_frontmost_window: bool = False
    include_apps: bool = False
    include_battery: bool = False
    include_network: bool = False
    include_calendar: bool = False
    include_reminders: bool = False
    redact: bool = False
    debug: bool = False
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("timeout_ms", mode="before")
    @classmethod
    def _coerce_timeout(cls, value: Any) -> int:
        return parse_timeout_ms(value)


def parse_timeout_ms(value: Any) -> int:
    """Parse a timeout value leniently, falling back to the default."""
    if value is None or isinstance(value, bool):
        return DEFAULT_TIMEOUT_MS
    if isinstance(value, float):
        value = int(value) if value == value and abs(value) != float("inf") else 0
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return DEFAULT_TIMEOUT_MS
    return parsed if parsed > 0 else DEFAULT_TIMEOUT_MS
