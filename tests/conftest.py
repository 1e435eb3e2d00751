"""Shared pytest fixtures for countdown tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from countdown.config.settings_store import SettingsStore
from countdown.core.event_bus import EventBus
from countdown.core.models.config import SystemConfig
from countdown.platform.mock.mock_notifications import InMemoryNotificationGateway
from tests.helpers.clock import FakeClock


@pytest.fixture
async def event_bus():
    """Provide a started EventBus that is stopped after the test."""
    bus = EventBus(queue_size=100)
    await bus.start()
    yield bus
    await bus.stop()


@pytest.fixture(scope="session")
def system_config() -> SystemConfig:
    """Session-scoped default config (no file I/O)."""
    return SystemConfig()


@pytest.fixture
def settings(tmp_path) -> SettingsStore:
    """Settings store backed by a file in the test's temp dir."""
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def notifier() -> InMemoryNotificationGateway:
    """Gateway with notification permission already granted."""
    return InMemoryNotificationGateway()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 1, 11, 0, 0, tzinfo=timezone.utc))
