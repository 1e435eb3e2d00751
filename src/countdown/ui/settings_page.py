"""Settings page — NiceGUI ``/settings`` route.

Provides:
* Fetch URL field with an explicit Update button
* Fetch interval (applies after restart)
* Notification toggle and a test-notification button
* Launch-at-login toggle

Invalid values are rejected with an error toast and never persisted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import ui

from countdown.core.errors import ConfigurationError
from countdown.core.models.config import format_seconds

if TYPE_CHECKING:
    from countdown.config.settings_store import SettingsStore
    from countdown.core.countdown_engine import CountdownEngine
    from countdown.core.interfaces.platform import LoginItemInterface

_log = logging.getLogger(__name__)


class SettingsPage:
    """Constructs the ``/settings`` route.

    Args:
        engine: Countdown engine; URL and notification changes go through it.
        settings: Settings store for values the engine does not own.
        login_item: Login-item registration backend.
    """

    def __init__(
        self,
        engine: "CountdownEngine",
        settings: "SettingsStore",
        login_item: "LoginItemInterface",
    ) -> None:
        self._engine = engine
        self._settings = settings
        self._login_item = login_item

    def setup_page(self) -> None:
        """Register the ``/settings`` route."""

        @ui.page("/settings")
        def settings_index():
            self._build_page()

    # ------------------------------------------------------------------
    # Page construction
    # ------------------------------------------------------------------

    def _build_page(self) -> None:
        ui.dark_mode().enable()
        ui.query("body").style("background: #1a1a1a; margin: 0; padding: 0;")
        config = self._engine.config

        with ui.column().classes("w-full").style(
            "padding: 16px; gap: 16px; max-width: 560px; margin: auto;"
        ):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Settings").style("font-size: 32px; color: #ffffff;")
                ui.link("← Back", "/").style("color: #00aaff;")
            ui.separator()

            with ui.card().classes("w-full").style("background: #2a2a2a;"):
                ui.label("URL to fetch").style("font-size: 16px; color: #ffffff;")
                ui.label(
                    "Please enter an endpoint that returns ISO 8601 formatted date data when accessed."
                ).style("font-size: 12px; color: #888888;")
                with ui.row().classes("w-full items-center no-wrap"):
                    url_input = ui.input("URL...", value=config.fetch_url).classes("w-full")
                    ui.button("Update", on_click=lambda: self._commit_url(url_input.value))

            with ui.card().classes("w-full").style("background: #2a2a2a;"):
                ui.label("Fetch interval (seconds)").style("font-size: 16px; color: #ffffff;")
                ui.label("Takes effect after a restart.").style("font-size: 12px; color: #888888;")
                with ui.row().classes("w-full items-center no-wrap"):
                    interval_input = ui.input(value=format_seconds(config.fetch_seconds)).classes("w-full")
                    ui.button("Save", on_click=lambda: self._commit_interval(interval_input.value))

            with ui.card().classes("w-full").style("background: #2a2a2a;"):
                ui.switch(
                    "Notify when the countdown finishes",
                    value=config.enable_notification,
                    on_change=lambda e: self._commit_notifications(e.value),
                ).style("color: #ffffff;")
                ui.button(
                    "Send test notification",
                    on_click=self._engine.send_test_notification,
                    icon="notifications",
                ).props("flat color=primary")

            with ui.card().classes("w-full").style("background: #2a2a2a;"):
                ui.switch(
                    "Launch at login",
                    value=config.launch_at_login,
                    on_change=lambda e: self._commit_launch_at_login(e.value),
                ).style("color: #ffffff;")

    # ------------------------------------------------------------------
    # Commit handlers
    # ------------------------------------------------------------------

    def _commit_url(self, url: str) -> None:
        try:
            self._engine.on_fetch_url_changed(url)
        except ConfigurationError as exc:
            ui.notify(str(exc), type="negative")
            return
        ui.notify("URL updated", type="positive")

    def _commit_interval(self, value: str) -> None:
        try:
            self._settings.commit(fetch_seconds=value)
        except ConfigurationError as exc:
            ui.notify(str(exc), type="negative")
            return
        self._engine.reload_settings()
        ui.notify("Interval saved — restart to apply", type="info")

    def _commit_notifications(self, enabled: bool) -> None:
        try:
            self._engine.set_notifications_enabled(enabled)
        except ConfigurationError as exc:
            ui.notify(str(exc), type="negative")

    def _commit_launch_at_login(self, enabled: bool) -> None:
        try:
            self._settings.commit(launch_at_login=enabled)
        except ConfigurationError as exc:
            ui.notify(str(exc), type="negative")
            return
        self._engine.reload_settings()
        self._login_item.set_enabled(enabled)
        _log.info("Launch at login set to %s", enabled)
