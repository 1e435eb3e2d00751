"""CountdownEngine — single owner of the countdown state.

Every method here runs on the asyncio event loop.  Fetches run in worker
threads via :func:`asyncio.to_thread` and their results re-enter the loop
before :meth:`CountdownEngine.on_fetch_completed` touches state, so ticks
and completions never interleave.

Each issued fetch gets a sequence number.  A completion older than the
newest one already applied is dropped, which keeps a slow early request
from overwriting a faster later one.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Callable, Protocol

from countdown.core import events
from countdown.core.date_fetcher import DateFetcher
from countdown.core.display import derive_display_text
from countdown.core.errors import ConfigurationError
from countdown.core.interfaces.platform import NotificationGateway
from countdown.core.models.config import CountdownConfig
from countdown.core.models.state import (
    FETCH_FAILED_TEXT,
    INVALID_CONFIG_TEXT,
    INVALID_URL_TEXT,
    LOADING_TEXT,
    NOT_AVAILABLE_TEXT,
    PARSE_FAILED_TEXT,
    AuthorizationStatus,
    CountdownState,
    FetchResult,
    FetchStatus,
    FetchSuccess,
    NetworkFailure,
    NotificationIntent,
    ParseFailure,
)
from countdown.core.scheduler import RefreshScheduler

if TYPE_CHECKING:
    from countdown.config.settings_store import SettingsStore
    from countdown.core.event_bus import EventBus

_log = logging.getLogger(__name__)

FINISH_NOTIFICATION_ID = "countdown.finished"
TEST_NOTIFICATION_ID = "countdown.test"

# Minimum delay between "now" and a scheduled alert.
_MIN_FIRE_DELAY = timedelta(seconds=1)

_URL_KEY = CountdownConfig.model_fields["fetch_url"].alias


class _Fetcher(Protocol):
    def fetch(self) -> FetchResult: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CountdownEngine:
    """Owns the target instant and display text; applies fetch results.

    Args:
        settings: Store holding the user settings; re-read on every fetch
            cycle and written by the settings commands.
        notifier: Gateway used to schedule and cancel local alerts.
        event_bus: Optional bus receiving a ``countdown.state.changed``
            event after every state change.
        tick_seconds: Display refresh period.
        fetcher_factory: Builds a fetcher for a URL.  Must raise
            :class:`ConfigurationError` for malformed URLs.
        clock: Returns the current aware UTC time.
    """

    def __init__(
        self,
        settings: SettingsStore,
        notifier: NotificationGateway,
        event_bus: EventBus | None = None,
        tick_seconds: float = 1.0,
        fetcher_factory: Callable[[str], _Fetcher] = DateFetcher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._settings = settings
        self._notifier = notifier
        self._bus = event_bus
        self._tick_seconds = tick_seconds
        self._fetcher_factory = fetcher_factory
        self._clock = clock

        self._config = CountdownConfig()
        # Persisted key -> error for stored values replaced by defaults.
        self._config_problems: dict[str, str] = {}
        self._state = CountdownState()
        self._scheduler: RefreshScheduler | None = None

        self._issued_seq = 0
        self._applied_seq = 0
        self._inflight: set[asyncio.Task[None]] = set()
        self._permission_tasks: set[asyncio.Task[None]] = set()
        self._intent: NotificationIntent | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def config(self) -> CountdownConfig:
        return self._config

    @property
    def pending_intent(self) -> NotificationIntent | None:
        """The scheduled countdown-finished alert, if any."""
        return self._intent

    @property
    def scheduler(self) -> RefreshScheduler | None:
        return self._scheduler

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, config: CountdownConfig | None = None) -> None:
        """Load configuration and start the tick and fetch cadences.

        A *config* passed in is committed to the settings store first, so
        it is what every fetch (including the startup one) uses.  The fetch
        cadence fires immediately, which is the startup fetch.  Unusable
        stored values never raise: they fall back to defaults and the
        display shows the problem until the settings are fixed.
        """
        self._update(display_text=LOADING_TEXT)
        if config is not None:
            self._config = self._settings.commit(**config.model_dump())
            self._config_problems = {}
        else:
            self._reload_config()
        if self._config_problems:
            _log.error("Invalid settings: %s", ", ".join(sorted(self._config_problems)))
            self._update(
                display_text=self._display(LOADING_TEXT),
                fetch_status=FetchStatus.INVALID_CONFIG,
            )
        try:
            self._scheduler = RefreshScheduler(
                tick_seconds=self._tick_seconds,
                fetch_seconds=self._config.fetch_seconds,
                on_tick=self.on_tick,
                on_fetch=self.refresh_now,
            )
        except ConfigurationError as exc:
            _log.error("Cannot start scheduler: %s", exc)
            self._update(display_text=INVALID_CONFIG_TEXT, fetch_status=FetchStatus.INVALID_CONFIG)
            return
        self._scheduler.start()
        _log.info("Countdown engine initialized (url=%s)", self._config.fetch_url)

    async def shutdown(self) -> None:
        """Stop both cadences and drop in-flight fetches."""
        self._closed = True
        if self._scheduler is not None:
            await self._scheduler.stop()
        pending = list(self._inflight) + list(self._permission_tasks)
        for task in pending:
            task.cancel()
        for task in pending:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._inflight.clear()
        self._permission_tasks.clear()
        _log.info("Countdown engine stopped")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def refresh_now(self) -> int | None:
        """Issue a fetch outside the normal cadence.

        Returns:
            The sequence number of the issued fetch, or ``None`` if nothing
            was issued (engine closed or URL unusable).
        """
        if self._closed:
            return None
        self._reload_config()
        if _URL_KEY in self._config_problems:
            _log.error("Not fetching: %s", self._config_problems[_URL_KEY])
            self._update(display_text=INVALID_URL_TEXT, fetch_status=FetchStatus.INVALID_CONFIG)
            return None
        try:
            fetcher = self._fetcher_factory(self._config.fetch_url)
        except ConfigurationError as exc:
            _log.error("Not fetching: %s", exc)
            self._update(display_text=INVALID_URL_TEXT, fetch_status=FetchStatus.INVALID_CONFIG)
            return None

        self._issued_seq += 1
        seq = self._issued_seq
        task = asyncio.get_running_loop().create_task(self._run_fetch(fetcher, seq), name=f"fetch-{seq}")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        self._publish(events.FETCH_ISSUED, {"sequence": seq, "url": self._config.fetch_url})
        return seq

    def on_fetch_url_changed(self, url: str) -> int | None:
        """Persist *url* and refetch immediately (even if unchanged).

        Raises:
            ConfigurationError: If *url* is malformed; nothing is changed.
        """
        self._config = self._settings.commit(fetch_url=url)
        self._config_problems = {}
        self._publish(events.SETTINGS_COMMITTED, {"keys": ["fetch_url"]})
        return self.refresh_now()

    def reload_settings(self) -> None:
        """Re-read the settings file and refresh the display.

        Used after settings were committed outside the engine.
        """
        self._settings.reload()
        self._reload_config()
        self.on_tick()

    def on_tick(self, now: datetime | None = None) -> None:
        """Recompute the display text from the target and *now*."""
        now = now or self._clock()
        target = self._state.target_instant
        if target is None:
            self._update(display_text=self._display(NOT_AVAILABLE_TEXT))
            return
        self._update(display_text=self._display(derive_display_text(target, now)))
        if self._intent is not None and self._intent.fire_at <= now:
            fired, self._intent = self._intent, None
            _log.debug("Notification %s has fired", fired.identifier)
            self._publish(
                events.NOTIFICATION_FIRED,
                {"identifier": fired.identifier, "fire_at": fired.fire_at},
            )

    def on_fetch_completed(self, result: FetchResult, sequence: int) -> None:
        """Apply *result* unless a newer fetch has already been applied."""
        if self._closed:
            return
        if sequence < self._applied_seq:
            _log.debug("Discarding stale fetch #%d (applied #%d)", sequence, self._applied_seq)
            return
        self._applied_seq = sequence
        now = self._clock()

        if isinstance(result, FetchSuccess):
            self._update(
                target_instant=result.target_instant,
                raw_text=result.raw_text,
                display_text=self._display(derive_display_text(result.target_instant, now)),
                fetch_status=FetchStatus.OK,
                last_fetched_at=now,
            )
            if self._config.enable_notification:
                self._schedule_finish(result.target_instant)
            else:
                self._cancel_finish()
        elif isinstance(result, ParseFailure):
            self._update(
                raw_text=result.raw_text,
                display_text=self._display(PARSE_FAILED_TEXT),
                fetch_status=FetchStatus.PARSE_FAILURE,
                last_fetched_at=now,
            )
        elif isinstance(result, NetworkFailure):
            self._update(
                display_text=self._display(FETCH_FAILED_TEXT),
                fetch_status=FetchStatus.NETWORK_FAILURE,
                last_fetched_at=now,
            )
        else:
            raise TypeError(f"Unknown fetch result {result!r}")

        self._publish(
            events.FETCH_COMPLETED,
            {"sequence": sequence, "status": self._state.fetch_status.value},
        )

    def set_notifications_enabled(self, enabled: bool) -> None:
        """Persist the toggle and schedule or cancel the finish alert.

        Enabling also sends a one-shot test notification.

        Raises:
            ConfigurationError: If the stored settings cannot be committed.
        """
        self._config = self._settings.commit(enable_notification=enabled)
        self._config_problems = {}
        self._publish(events.SETTINGS_COMMITTED, {"keys": ["enable_notification"]})
        if enabled:
            target = self._state.target_instant
            if target is not None:
                self._schedule_finish(target)
            self.send_test_notification()
        else:
            self._cancel_finish()

    def send_test_notification(self) -> None:
        """Schedule a test alert about one second from now."""
        intent = NotificationIntent(
            identifier=TEST_NOTIFICATION_ID,
            fire_at=self._clock() + _MIN_FIRE_DELAY,
            title="Countdown",
            body="Notifications are enabled.",
        )
        self._submit(intent)

    # ------------------------------------------------------------------
    # Notification orchestration
    # ------------------------------------------------------------------

    def _schedule_finish(self, target: datetime) -> None:
        now = self._clock()
        fire_at = max(target, now + _MIN_FIRE_DELAY)
        intent = NotificationIntent(
            identifier=FINISH_NOTIFICATION_ID,
            fire_at=fire_at,
            title="Countdown",
            body="The countdown has finished.",
        )
        if self._intent == intent:
            return
        self._intent = intent
        self._submit(intent)

    def _cancel_finish(self) -> None:
        if self._intent is None:
            return
        self._intent = None
        self._notifier.cancel(FINISH_NOTIFICATION_ID)
        self._publish(events.NOTIFICATION_CANCELLED, {"identifier": FINISH_NOTIFICATION_ID})

    def _submit(self, intent: NotificationIntent) -> None:
        status = self._notifier.authorization_status()
        if status is AuthorizationStatus.GRANTED:
            self._deliver(intent)
        elif status is AuthorizationStatus.DENIED:
            _log.debug("Notifications denied — not scheduling %s", intent.identifier)
            if self._intent == intent:
                self._intent = None
        else:
            task = asyncio.get_running_loop().create_task(
                self._request_and_deliver(intent), name=f"permission-{intent.identifier}"
            )
            self._permission_tasks.add(task)
            task.add_done_callback(self._permission_tasks.discard)

    async def _request_and_deliver(self, intent: NotificationIntent) -> None:
        status = await self._notifier.request_permission()
        if status is not AuthorizationStatus.GRANTED:
            _log.debug("Notification permission %s — dropping %s", status.value, intent.identifier)
            if self._intent == intent:
                self._intent = None
            return
        if self._closed:
            return
        # A newer target or a disable may have superseded this intent.
        if intent.identifier == FINISH_NOTIFICATION_ID and self._intent != intent:
            return
        self._deliver(intent)

    def _deliver(self, intent: NotificationIntent) -> None:
        self._notifier.cancel(intent.identifier)
        self._notifier.schedule(intent)
        _log.info("Scheduled %s at %s", intent.identifier, intent.fire_at.isoformat())
        self._publish(
            events.NOTIFICATION_SCHEDULED,
            {"identifier": intent.identifier, "fire_at": intent.fire_at},
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _run_fetch(self, fetcher: _Fetcher, seq: int) -> None:
        result = await asyncio.to_thread(fetcher.fetch)
        if self._closed:
            return
        self.on_fetch_completed(result, seq)

    def _reload_config(self) -> None:
        self._config, self._config_problems = self._settings.resolve()

    def _display(self, text: str) -> str:
        """Return *text*, or the settings error while stored settings are unusable."""
        if _URL_KEY in self._config_problems:
            return INVALID_URL_TEXT
        if self._config_problems:
            return INVALID_CONFIG_TEXT
        return text

    def _update(self, **changes: Any) -> None:
        new_state = self._state.model_copy(update=changes)
        if new_state == self._state:
            return
        self._state = new_state
        self._publish(events.STATE_CHANGED, {"state": new_state})

    def _publish(self, event_type: str, payload: dict[str, Any]) -> None:
        if self._bus is not None:
            self._bus.publish_nowait(event_type, payload)
