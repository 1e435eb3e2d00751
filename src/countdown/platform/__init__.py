"""Platform services: notification delivery and login-item registration."""

from countdown.platform.factory import create_platform_factory

__all__ = ["create_platform_factory"]
