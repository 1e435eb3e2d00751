"""MockPlatformFactory — creates in-memory platform services for dev and test.

The created instances are public attributes so the settings page and
tests can inspect them directly.
"""

from __future__ import annotations

from countdown.core.interfaces.platform import (
    LoginItemInterface,
    NotificationGateway,
    PlatformFactory,
)
from countdown.platform.mock.mock_login_item import MockLoginItem
from countdown.platform.mock.mock_notifications import InMemoryNotificationGateway


class MockPlatformFactory(PlatformFactory):
    """Factory that returns in-memory implementations."""

    def __init__(self) -> None:
        self.notifier = InMemoryNotificationGateway()
        self.login_item = MockLoginItem()

    # -- Factory interface --

    def create_notifier(self) -> NotificationGateway:
        return self.notifier

    def create_login_item(self) -> LoginItemInterface:
        return self.login_item

    def cleanup(self) -> None:
        self.notifier.close()
