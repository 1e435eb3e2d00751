"""Error types shared by the countdown core."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A user setting (fetch URL, fetch interval) is unusable.

    Raised at the settings boundary so the form can reject the value, and
    caught inside the engine where it becomes a display string.
    """
