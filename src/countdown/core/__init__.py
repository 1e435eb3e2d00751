"""Core services: date fetching, scheduling, the countdown engine, event bus."""

from countdown.core.countdown_engine import CountdownEngine
from countdown.core.date_fetcher import DateFetcher
from countdown.core.errors import ConfigurationError
from countdown.core.event_bus import EventBus
from countdown.core.scheduler import RefreshScheduler

__all__ = [
    "ConfigurationError",
    "CountdownEngine",
    "DateFetcher",
    "EventBus",
    "RefreshScheduler",
]
