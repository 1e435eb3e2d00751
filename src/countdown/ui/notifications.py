"""NiceGUINotificationGateway — local alerts shown as page toasts.

Alerts are timed with ``loop.call_later`` on the NiceGUI event loop and
rendered with ``ui.notify`` inside every bound container, so each
connected client sees them.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from nicegui import ui

from countdown.core.interfaces.platform import (
    LoginItemInterface,
    NotificationGateway,
    PlatformFactory,
)
from countdown.core.models.state import AuthorizationStatus, NotificationIntent
from countdown.platform.mock.mock_login_item import MockLoginItem

_log = logging.getLogger(__name__)


class NiceGUINotificationGateway(NotificationGateway):
    """Shows due alerts as ``ui.notify`` toasts.

    Permission starts undetermined and is granted on the first request;
    the browser needs no OS permission to show a toast.
    """

    def __init__(self) -> None:
        self._status = AuthorizationStatus.UNDETERMINED
        self._handles: dict[str, asyncio.TimerHandle] = {}
        self._containers: set[ui.element] = set()

    def bind_container(self, container: ui.element) -> None:
        """Register a page container that should display toasts."""
        self._containers.add(container)

    def unbind_container(self, container: ui.element) -> None:
        self._containers.discard(container)

    # ------------------------------------------------------------------
    # NotificationGateway implementation
    # ------------------------------------------------------------------

    def authorization_status(self) -> AuthorizationStatus:
        return self._status

    async def request_permission(self) -> AuthorizationStatus:
        if self._status is AuthorizationStatus.UNDETERMINED:
            self._status = AuthorizationStatus.GRANTED
            _log.info("Notification permission granted")
        return self._status

    def schedule(self, intent: NotificationIntent) -> None:
        self.cancel(intent.identifier)
        delay = (intent.fire_at - datetime.now(timezone.utc)).total_seconds()
        loop = asyncio.get_running_loop()
        self._handles[intent.identifier] = loop.call_later(max(delay, 0.0), self._fire, intent)

    def cancel(self, identifier: str) -> None:
        handle = self._handles.pop(identifier, None)
        if handle is not None:
            handle.cancel()

    def close(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        self._containers.clear()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fire(self, intent: NotificationIntent) -> None:
        self._handles.pop(intent.identifier, None)
        _log.info("Notification %s fired", intent.identifier)
        for container in list(self._containers):
            try:
                with container:
                    ui.notify(f"{intent.title}: {intent.body}", type="info", position="top-right")
            except RuntimeError:
                self._containers.discard(container)


class NiceGUIPlatformFactory(PlatformFactory):
    """Platform services for the NiceGUI app.

    Login-item registration is kept in memory; the OS registration itself
    is outside this package.
    """

    def __init__(self) -> None:
        self.notifier = NiceGUINotificationGateway()
        self.login_item = MockLoginItem()

    def create_notifier(self) -> NotificationGateway:
        return self.notifier

    def create_login_item(self) -> LoginItemInterface:
        return self.login_item

    def cleanup(self) -> None:
        self.notifier.close()
