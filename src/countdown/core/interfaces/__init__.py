"""Platform service interfaces."""

from countdown.core.interfaces.platform import (
    LoginItemInterface,
    NotificationGateway,
    PlatformFactory,
)

__all__ = [
    "LoginItemInterface",
    "NotificationGateway",
    "PlatformFactory",
]
