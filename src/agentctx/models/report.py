"""Report and per-category payload models.

The report is a fixed-shape record: one optional field per category, so the
serializer's omission rules can be checked against the schema.
"""

from typing import Literal

from pydantic import BaseModel, Field

from agentctx.models.error import StructuredError

SCHEMA_VERSION = "0.1.0"

PermissionState = Literal["granted", "denied", "not_requested", "unknown"]


class Host(BaseModel):
    """Baseline machine identity."""

    os: Literal["macos", "linux"]
    os_version: str
    machine: str
    locale: str
    timezone: str

    model_config = {"extra": "forbid"}


class Frontmost(BaseModel):
    """Foreground application and, when requested, its window title."""

    app_name: str
    bundle_id: str
    window_title: str | None = None
    window_title_sha256: str | None = None
    window_title_length: int | None = None

    model_config = {"extra": "forbid"}


class AppEntry(BaseModel):
    """A running application or process."""

    name: str
    bundle_id: str
    pid: int = Field(..., gt=0)

    model_config = {"extra": "forbid"}


class Clipboard(BaseModel):
    """Clipboard availability and (optionally redacted) text."""

    available: bool
    types: list[str] = Field(default_factory=list)
    text: str | None = None
    text_sha256: str | None = None
    text_length: int | None = None

    model_config = {"extra": "forbid"}


class Battery(BaseModel):
    """Battery charge, with percentage expressed as a 0..1 fraction."""

    percentage: float = Field(..., ge=0, le=1)
    is_charging: bool
    power_source: Literal["ac", "battery", "unknown"]

    model_config = {"extra": "forbid"}


class Network(BaseModel):
    """Primary interface and local reachability."""

    primary_interface: str
    ssid: str | None = None
    has_internet: bool

    model_config = {"extra": "forbid"}


class CalendarEvent(BaseModel):
    """An upcoming calendar event."""

    start: str
    end: str
    title: str | None = None
    title_sha256: str | None = None
    title_length: int | None = None
    location: str | None = None
    location_sha256: str | None = None
    location_length: int | None = None

    model_config = {"extra": "forbid"}


class Reminder(BaseModel):
    """An incomplete reminder."""

    title: str | None = None
    title_sha256: str | None = None
    title_length: int | None = None
    due: str | None = None
    list_name: str | None = Field(default=None, alias="list")

    model_config = {"extra": "forbid", "populate_by_name": True}


class Permissions(BaseModel):
    """Latest known state of every permission-gated capability."""

    accessibility: PermissionState = "not_requested"
    calendar: PermissionState = "not_requested"
    reminders: PermissionState = "not_requested"

    model_config = {"extra": "forbid"}


class DebugInfo(BaseModel):
    """Diagnostics attached only in debug mode."""

    timings_ms: dict[str, int] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class Report(BaseModel):
    """Aggregate snapshot produced by one run."""

    schema_version: str = SCHEMA_VERSION
    generated_at: str

    host: Host | None = None
    frontmost: Frontmost | None = None
    apps: list[AppEntry] | None = None
    clipboard: Clipboard | None = None
    battery: Battery | None = None
    network: Network | None = None
    calendar: list[CalendarEvent] | None = None
    reminders: list[Reminder] | None = None

    permissions: Permissions = Field(default_factory=Permissions)
    warnings: list[str] | None = None
    errors: list[StructuredError] | None = None
    debug: DebugInfo | None = Field(default=None, alias="_debug")

    model_config = {"extra": "forbid", "populate_by_name": True}
