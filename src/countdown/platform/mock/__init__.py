"""In-memory platform backend for development and testing."""

from countdown.platform.mock.mock_factory import MockPlatformFactory
from countdown.platform.mock.mock_login_item import MockLoginItem
from countdown.platform.mock.mock_notifications import InMemoryNotificationGateway

__all__ = [
    "InMemoryNotificationGateway",
    "MockLoginItem",
    "MockPlatformFactory",
]
