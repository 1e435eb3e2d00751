"""Tests for the SettingsPage commit handlers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from countdown.core.errors import ConfigurationError
from countdown.platform.mock.mock_login_item import MockLoginItem
from countdown.ui.settings_page import SettingsPage


@pytest.fixture
def page(settings):
    return SettingsPage(engine=MagicMock(), settings=settings, login_item=MockLoginItem())


@pytest.fixture
def notify():
    with patch("countdown.ui.settings_page.ui.notify") as mock_notify:
        yield mock_notify


class TestUrl:
    def test_valid_url_goes_through_engine(self, page, notify):
        page._commit_url("https://example.com/date.txt")
        page._engine.on_fetch_url_changed.assert_called_once_with("https://example.com/date.txt")
        assert notify.call_args.kwargs["type"] == "positive"

    def test_rejected_url_shows_error(self, page, notify):
        page._engine.on_fetch_url_changed.side_effect = ConfigurationError("Malformed fetch URL")
        page._commit_url("nope")
        notify.assert_called_once_with("Malformed fetch URL", type="negative")


class TestInterval:
    def test_valid_interval_is_stored(self, page, settings, notify):
        page._commit_interval("120")
        assert settings.get("fetchSeconds") == "120"
        page._engine.reload_settings.assert_called_once_with()
        assert notify.call_args.kwargs["type"] == "info"

    @pytest.mark.parametrize("value", ["0", "-1", "later", ""])
    def test_invalid_interval_is_rejected(self, page, settings, notify, value):
        page._commit_interval(value)
        assert settings.get("fetchSeconds") is None
        page._engine.reload_settings.assert_not_called()
        assert notify.call_args.kwargs["type"] == "negative"


class TestToggles:
    def test_notifications_go_through_engine(self, page, notify):
        page._commit_notifications(True)
        page._engine.set_notifications_enabled.assert_called_once_with(True)
        notify.assert_not_called()

    def test_launch_at_login(self, page, settings, notify):
        page._commit_launch_at_login(True)
        assert settings.get("launchAtLogin") is True
        assert page._login_item.is_enabled() is True
        page._engine.reload_settings.assert_called_once_with()
