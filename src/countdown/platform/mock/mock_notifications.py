"""In-memory notification gateway for development and testing.

Implements :class:`NotificationGateway` with a dict of pending intents, a
configurable permission state and a ``fire_due()`` helper that moves due
intents into :attr:`delivered`.
"""

from __future__ import annotations

import logging
from datetime import datetime

from countdown.core.interfaces.platform import NotificationGateway
from countdown.core.models.state import AuthorizationStatus, NotificationIntent

_log = logging.getLogger(__name__)


class InMemoryNotificationGateway(NotificationGateway):
    """Records scheduled alerts instead of showing them.

    Args:
        status: Initial permission state.
        grant_on_request: Result of :meth:`request_permission` while the
            state is still undetermined.
    """

    def __init__(
        self,
        status: AuthorizationStatus = AuthorizationStatus.GRANTED,
        grant_on_request: bool = True,
    ) -> None:
        self._status = status
        self._grant_on_request = grant_on_request
        self.pending: dict[str, NotificationIntent] = {}
        self.delivered: list[NotificationIntent] = []
        self.permission_requests = 0
        self.cancelled: list[str] = []

    # -- NotificationGateway --

    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    async def request_permission(self) -> AuthorizationStatus:
        self.permission_requests += 1
        if self._status is AuthorizationStatus.UNDETERMINED:
            self._status = (
                AuthorizationStatus.GRANTED if self._grant_on_request else AuthorizationStatus.DENIED
            )
        return self._status

    def schedule(self, intent: NotificationIntent) -> None:
        self.pending[intent.identifier] = intent
        _log.debug("MockNotifier: scheduled %s at %s", intent.identifier, intent.fire_at)

    def cancel(self, identifier: str) -> None:
        if self.pending.pop(identifier, None) is not None:
            self.cancelled.append(identifier)
            _log.debug("MockNotifier: cancelled %s", identifier)

    def close(self) -> None:
        self.pending.clear()

    # -- Simulation helpers --

    def set_status(self, status: AuthorizationStatus) -> None:
        """Change the permission state (e.g. the user flipped it in the OS)."""
        self._status = status

    def fire_due(self, now: datetime) -> list[NotificationIntent]:
        """Deliver every pending intent whose fire time is at or before *now*."""
        due = [i for i in self.pending.values() if i.fire_at <= now]
        for intent in due:
            del self.pending[intent.identifier]
            self.delivered.append(intent)
        return due
