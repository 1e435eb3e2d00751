"""In-memory login-item registration."""

from __future__ import annotations

import logging

from countdown.core.interfaces.platform import LoginItemInterface

_log = logging.getLogger(__name__)


class MockLoginItem(LoginItemInterface):
    """Keeps the launch-at-login flag in memory."""

    def __init__(self) -> None:
        self._enabled = False

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)
        _log.debug("MockLoginItem: enabled=%s", self._enabled)

    def is_enabled(self) -> bool:
        return self._enabled
