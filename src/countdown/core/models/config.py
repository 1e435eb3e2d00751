"""Configuration Pydantic models: CountdownConfig, SystemConfig."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from countdown.core.http import validate_fetch_url

DEFAULT_FETCH_URL = "https://diamondgotcat.net/appledate.txt"
DEFAULT_FETCH_SECONDS = 60.0


def validate_interval(value: float, name: str = "fetch interval") -> float:
    """Return *value* as a float if it is a finite positive number.

    Raises:
        ValueError: For zero, negative, NaN or infinite periods.
    """
    seconds = float(value)
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"{name} must be a positive number of seconds, got {value!r}")
    return seconds


def format_seconds(value: float) -> str:
    """Render an interval losslessly: ``"60"`` for whole numbers, else ``repr``."""
    return str(int(value)) if float(value).is_integer() else repr(float(value))


class CountdownConfig(BaseModel):
    """User-facing settings, persisted by the settings store.

    Field aliases are the keys used in the persisted key/value file.
    ``fetchSeconds`` is stored as a string, e.g. ``"60"``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    fetch_url: str = Field(
        default=DEFAULT_FETCH_URL,
        alias="fetchURLString",
        description="Endpoint returning an RFC 3339 date-time",
    )
    fetch_seconds: float = Field(
        default=DEFAULT_FETCH_SECONDS,
        alias="fetchSeconds",
        description="Seconds between scheduled fetches",
    )
    enable_notification: bool = Field(
        default=False,
        alias="enableNotification",
        description="Notify when the countdown reaches zero",
    )
    launch_at_login: bool = Field(
        default=False,
        alias="launchAtLogin",
        description="Register the app as a login item",
    )

    @field_validator("fetch_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return validate_fetch_url(value)

    @field_validator("fetch_seconds")
    @classmethod
    def _check_seconds(cls, value: float) -> float:
        return validate_interval(value)

    @field_serializer("fetch_seconds")
    def _serialize_seconds(self, value: float) -> str:
        return format_seconds(value)


class SystemConfig(BaseModel):
    """Process-level runtime settings (not edited from the settings page)."""

    model_config = ConfigDict(extra="forbid")

    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    event_bus_queue_size: int = Field(default=1000, description="Max queued events")
    webui_port: int = Field(default=8080, description="NiceGUI listen port")
    tick_seconds: float = Field(default=1.0, description="Display refresh period")
    settings_file: str = Field(
        default="~/.config/menubar-countdown/settings.json",
        description="Location of the persisted user settings",
    )
    dev_mode: bool = Field(default=False, description="Use in-memory platform services")

    @field_validator("tick_seconds")
    @classmethod
    def _check_tick(cls, value: float) -> float:
        return validate_interval(value, "tick interval")
