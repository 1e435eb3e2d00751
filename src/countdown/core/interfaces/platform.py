"""Platform service interfaces (ABCs).

The countdown core reaches OS notifications and login-item registration
only through these classes.  The in-memory backend and the NiceGUI
backend both implement them, keeping tests and the running app on the
same contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from countdown.core.models.state import AuthorizationStatus, NotificationIntent


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NotificationGateway(ABC):
    """Schedules and cancels local alerts at absolute instants."""

    @abstractmethod
    def authorization_status(self) -> AuthorizationStatus:
        """Return the current permission state without prompting."""

    @abstractmethod
    async def request_permission(self) -> AuthorizationStatus:
        """Prompt for permission (if still undetermined) and return the result."""

    @abstractmethod
    def schedule(self, intent: NotificationIntent) -> None:
        """Schedule *intent*, replacing any pending alert with the same identifier."""

    @abstractmethod
    def cancel(self, identifier: str) -> None:
        """Remove the pending alert *identifier*; unknown identifiers are ignored."""

    def close(self) -> None:
        """Release resources held by the gateway (optional)."""


# ---------------------------------------------------------------------------
# Launch at login
# ---------------------------------------------------------------------------

class LoginItemInterface(ABC):
    """Registration of the app as a login item."""

    @abstractmethod
    def set_enabled(self, enabled: bool) -> None:
        """Register (``True``) or unregister (``False``) the login item."""

    @abstractmethod
    def is_enabled(self) -> bool:
        """Return ``True`` if the app is currently registered."""


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class PlatformFactory(ABC):
    """Creates the platform services for the current environment."""

    @abstractmethod
    def create_notifier(self) -> NotificationGateway: ...

    @abstractmethod
    def create_login_item(self) -> LoginItemInterface: ...

    def cleanup(self) -> None:
        """Release platform resources.  No-op by default (mock)."""
