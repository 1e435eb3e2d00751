"""RefreshScheduler — tick and fetch cadences as two asyncio tasks.

The tick task only recomputes the display; the fetch task only asks for a
new fetch.  Neither awaits the other, so a hung fetch never delays a tick.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from countdown.core.errors import ConfigurationError
from countdown.core.models.config import validate_interval

_log = logging.getLogger(__name__)


class RefreshScheduler:
    """Drives ``on_tick`` and ``on_fetch`` on independent periods.

    The fetch callback fires once as soon as :meth:`start` runs, then every
    *fetch_seconds*.  The tick callback fires every *tick_seconds*, first
    after one period.  The fetch period is read once; changing the
    configured interval later has no effect on a running scheduler.

    Args:
        tick_seconds: Display refresh period.
        fetch_seconds: Period between scheduled fetches.
        on_tick: Called on every tick (on the event loop).
        on_fetch: Called on every fetch trigger (on the event loop).

    Raises:
        ConfigurationError: If either period is not a positive number.
    """

    def __init__(
        self,
        tick_seconds: float,
        fetch_seconds: float,
        on_tick: Callable[[], None],
        on_fetch: Callable[[], None],
    ) -> None:
        try:
            self._tick_seconds = validate_interval(tick_seconds, "tick interval")
            self._fetch_seconds = validate_interval(fetch_seconds, "fetch interval")
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from exc
        self._on_tick = on_tick
        self._on_fetch = on_fetch
        self._tasks: list[asyncio.Task[None]] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    @property
    def fetch_seconds(self) -> float:
        return self._fetch_seconds

    def start(self) -> None:
        """Create both tasks on the running loop.  No-op if already running."""
        if self.is_running:
            return
        self._tasks = [
            asyncio.create_task(self._tick_loop(), name="countdown-tick"),
            asyncio.create_task(self._fetch_loop(), name="countdown-fetch"),
        ]
        _log.info(
            "Scheduler started (tick=%.3gs, fetch=%.3gs)",
            self._tick_seconds,
            self._fetch_seconds,
        )

    async def stop(self) -> None:
        """Cancel both tasks and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if tasks:
            _log.info("Scheduler stopped")

    # ------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self._tick_seconds)
            self._invoke(self._on_tick, "tick")

    async def _fetch_loop(self) -> None:
        while True:
            self._invoke(self._on_fetch, "fetch")
            await asyncio.sleep(self._fetch_seconds)

    @staticmethod
    def _invoke(callback: Callable[[], None], label: str) -> None:
        try:
            callback()
        except Exception:
            _log.exception("Scheduler %s callback %s raised", label, callback)
