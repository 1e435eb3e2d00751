"""Pydantic models for configuration, countdown state and events."""
from countdown.core.models.config import CountdownConfig, SystemConfig
from countdown.core.models.event import Event
from countdown.core.models.state import (
    AuthorizationStatus,
    CountdownState,
    FetchResult,
    FetchStatus,
    FetchSuccess,
    NetworkFailure,
    NotificationIntent,
    ParseFailure,
)

__all__ = [
    "CountdownConfig",
    "SystemConfig",
    "Event",
    "AuthorizationStatus",
    "CountdownState",
    "FetchResult",
    "FetchStatus",
    "FetchSuccess",
    "NetworkFailure",
    "NotificationIntent",
    "ParseFailure",
]
