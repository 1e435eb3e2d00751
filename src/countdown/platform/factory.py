"""Platform factory — picks the notification and login-item backends.

In-memory services in dev mode, NiceGUI toast notifications otherwise.
"""

from __future__ import annotations

import logging

from countdown.core.interfaces.platform import PlatformFactory
from countdown.core.models.config import SystemConfig

_log = logging.getLogger(__name__)


def create_platform_factory(config: SystemConfig) -> PlatformFactory:
    """Return the appropriate :class:`PlatformFactory`.

    * ``dev_mode`` → ``MockPlatformFactory`` (alerts are only recorded).
    * Otherwise → ``NiceGUIPlatformFactory`` (alerts become page toasts).
    """
    if config.dev_mode:
        from countdown.platform.mock.mock_factory import MockPlatformFactory

        _log.info("Using MockPlatformFactory (dev_mode=True)")
        return MockPlatformFactory()

    from countdown.ui.notifications import NiceGUIPlatformFactory

    _log.info("Using NiceGUIPlatformFactory")
    return NiceGUIPlatformFactory()
