"""Countdown state models, fetch results and enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

# Display strings published while no countdown can be shown.
LOADING_TEXT = "Loading..."
NOT_AVAILABLE_TEXT = "Not Available"
FETCH_FAILED_TEXT = "Failed to Fetch Date"
PARSE_FAILED_TEXT = "Failed to Parse Date"
INVALID_URL_TEXT = "Invalid URL"
INVALID_CONFIG_TEXT = "Invalid Configuration"


class FetchStatus(str, Enum):
    """Outcome of the most recently applied fetch cycle."""

    PENDING = "pending"
    OK = "ok"
    NETWORK_FAILURE = "network_failure"
    PARSE_FAILURE = "parse_failure"
    INVALID_CONFIG = "invalid_config"


class AuthorizationStatus(str, Enum):
    """Notification permission as reported by the platform."""

    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


# ---------------------------------------------------------------------------
# Fetch results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FetchSuccess:
    """The endpoint returned a parseable date-time."""

    target_instant: datetime
    raw_text: str


@dataclass(frozen=True)
class NetworkFailure:
    """Transport error, HTTP error status or undecodable body."""

    reason: str = ""


@dataclass(frozen=True)
class ParseFailure:
    """The normalized body was not an RFC 3339 date-time."""

    raw_text: str


FetchResult = Union[FetchSuccess, NetworkFailure, ParseFailure]


# ---------------------------------------------------------------------------
# Published state
# ---------------------------------------------------------------------------

class CountdownState(BaseModel):
    """Immutable snapshot of the engine's state, emitted after each change."""

    model_config = ConfigDict(frozen=True)

    target_instant: datetime | None = Field(default=None)
    raw_text: str = Field(default="")
    display_text: str = Field(default=LOADING_TEXT)
    fetch_status: FetchStatus = Field(default=FetchStatus.PENDING)
    last_fetched_at: datetime | None = Field(default=None)


class NotificationIntent(BaseModel):
    """A local alert scheduled for a future instant."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    fire_at: datetime
    title: str = Field(default="Countdown")
    body: str = Field(default="")
