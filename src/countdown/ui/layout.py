"""Main page layout — the "menu bar" label and its dropdown menu.

Provides the ``@ui.page('/')`` route with:
* A compact bar whose label is the engine's display text
* A dropdown menu showing the raw ``ISO8601: …`` value and fetch status
* Menu actions: refresh, settings, quit
"""

from __future__ import annotations

import logging as _logging
from dataclasses import dataclass

from nicegui import app, ui

from countdown.core import events
from countdown.core.countdown_engine import CountdownEngine
from countdown.core.event_bus import EventBus
from countdown.core.models.event import Event
from countdown.core.models.state import CountdownState, FetchStatus
from countdown.ui.notifications import NiceGUINotificationGateway

_log = _logging.getLogger(__name__)

_STATUS_TEXT = {
    FetchStatus.PENDING: "Waiting for first fetch",
    FetchStatus.OK: "Last fetch succeeded",
    FetchStatus.NETWORK_FAILURE: "Failed to Fetch Date",
    FetchStatus.PARSE_FAILURE: "Failed to Parse Date",
    FetchStatus.INVALID_CONFIG: "Invalid configuration",
}


@dataclass
class _ClientLabels:
    display: ui.button
    raw: ui.label
    status: ui.label


class CountdownLayout:
    """Renders the engine's published state for every connected client.

    Args:
        engine: The countdown engine (commands + current state).
        event_bus: Bus carrying ``countdown.state.changed`` events.
        notifier: Optional toast gateway to bind into each page.
    """

    def __init__(
        self,
        engine: CountdownEngine,
        event_bus: EventBus,
        notifier: NiceGUINotificationGateway | None = None,
    ) -> None:
        self._engine = engine
        self._bus = event_bus
        self._notifier = notifier
        self._clients: list[_ClientLabels] = []
        self._sub_id: str | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def setup_page(self) -> None:
        """Register the ``@ui.page('/')`` route."""

        @ui.page("/")
        def index():
            self._build_page()

    def subscribe(self) -> None:
        """Start following state changes (call once the bus is running)."""
        if self._sub_id is None:
            self._sub_id = self._bus.subscribe(events.STATE_CHANGED, self._on_state_changed)

    # ------------------------------------------------------------------
    # Page construction
    # ------------------------------------------------------------------

    def _build_page(self) -> None:
        ui.dark_mode().enable()
        ui.query("body").style("background: #1a1a1a; margin: 0; padding: 0;")
        state = self._engine.state

        with ui.row().classes("w-full items-center justify-end").style(
            "background: #333333; height: 28px; padding: 0 12px; color: #ffffff;"
        ) as bar:
            with ui.button(state.display_text).props("flat dense no-caps color=white") as menu_button:
                with ui.menu().style("min-width: 220px;"):
                    raw = ui.label(self._format_raw(state)).classes("q-px-md q-pt-sm").style(
                        "font-family: 'Courier New', monospace; font-size: 12px;"
                    )
                    status = ui.label(_STATUS_TEXT[state.fetch_status]).classes("q-px-md").style(
                        "font-size: 12px; color: #888888;"
                    )
                    ui.separator()
                    ui.label("MenuBarCountdown").classes("q-px-md").style("font-weight: bold;")
                    ui.menu_item("Refresh Date Information", on_click=self._on_refresh)
                    ui.menu_item("Settings...", on_click=lambda: ui.navigate.to("/settings"))
                    ui.menu_item("Quit", on_click=self._on_quit)

        labels = _ClientLabels(display=menu_button, raw=raw, status=status)
        self._clients.append(labels)

        if self._notifier is not None:
            self._notifier.bind_container(bar)
        ui.context.client.on_disconnect(lambda: self._on_disconnect(labels, bar))

    # ------------------------------------------------------------------
    # Menu actions
    # ------------------------------------------------------------------

    def _on_refresh(self) -> None:
        self._engine.refresh_now()

    def _on_quit(self) -> None:
        _log.info("Quit requested from menu")
        app.shutdown()

    # ------------------------------------------------------------------
    # State updates
    # ------------------------------------------------------------------

    @staticmethod
    def _format_raw(state: CountdownState) -> str:
        return f"ISO8601: {state.raw_text}"

    def _forget(self, labels: _ClientLabels) -> None:
        if labels in self._clients:
            self._clients.remove(labels)

    def _on_disconnect(self, labels: _ClientLabels, bar: ui.element) -> None:
        self._forget(labels)
        if self._notifier is not None:
            self._notifier.unbind_container(bar)

    async def _on_state_changed(self, event: Event) -> None:
        state: CountdownState = event.payload["state"]
        for labels in list(self._clients):
            try:
                labels.display.text = state.display_text
                labels.raw.text = self._format_raw(state)
                labels.status.text = _STATUS_TEXT[state.fetch_status]
            except RuntimeError:
                self._forget(labels)
