"""Display-string derivation — a pure function of (target, now)."""

from __future__ import annotations

import logging
from datetime import datetime

_log = logging.getLogger(__name__)

COUNTING_DOWN = "↓ "
COUNTING_UP = "↑ "
AT_TARGET = "= now"

_UNITS = (("d", 86400), ("h", 3600), ("m", 60), ("s", 1))


def format_duration(seconds: float) -> str:
    """Format *seconds* as ``"1d 2h 3m 4s"``.

    Only non-zero units are shown, so 3600 is ``"1h"`` and 86405 is
    ``"1d 5s"``.  Fractions are truncated; zero becomes ``"0s"``.

    Raises:
        ValueError: For negative or NaN input.
        OverflowError: For infinite input.
    """
    if seconds < 0:
        raise ValueError(f"Duration must be non-negative, got {seconds!r}")
    remaining = int(seconds)

    parts: list[str] = []
    for label, size in _UNITS:
        value, remaining = divmod(remaining, size)
        if value:
            parts.append(f"{value}{label}")
    return " ".join(parts) or "0s"


def derive_display_text(target: datetime, now: datetime) -> str:
    """Return the menu-bar text for *target* as seen at *now*."""
    delta = (target - now).total_seconds()
    if delta == 0:
        return AT_TARGET

    prefix = COUNTING_DOWN if delta > 0 else COUNTING_UP
    try:
        formatted = format_duration(abs(delta))
    except (ValueError, OverflowError):
        _log.exception("Could not format duration %r", delta)
        formatted = "0s"
    return prefix + (formatted or "0s")
