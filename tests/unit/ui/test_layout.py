"""Tests for CountdownLayout — state rendering and menu actions."""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from countdown.core import events
from countdown.core.models.event import Event
from countdown.core.models.state import CountdownState, FetchStatus
from countdown.ui.layout import CountdownLayout, _ClientLabels


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _StubBus:
    def __init__(self) -> None:
        self.subscriptions: list[tuple[str, object]] = []

    def subscribe(self, event_type: str, handler: object) -> str:
        self.subscriptions.append((event_type, handler))
        return f"sub-{len(self.subscriptions)}"


class _GoneLabel:
    """Label whose client has disconnected."""

    @property
    def text(self) -> str:
        return ""

    @text.setter
    def text(self, value: str) -> None:
        raise RuntimeError("client deleted")


def _labels() -> _ClientLabels:
    return _ClientLabels(
        display=SimpleNamespace(text=""),
        raw=SimpleNamespace(text=""),
        status=SimpleNamespace(text=""),
    )


def _state_event(**fields) -> Event:
    return Event(event_type=events.STATE_CHANGED, payload={"state": CountdownState(**fields)})


# ---------------------------------------------------------------------------
# Unit tests (no NiceGUI client — logic only)
# ---------------------------------------------------------------------------


def test_format_raw():
    state = CountdownState(raw_text="2025-06-01T12:00:00Z")
    assert CountdownLayout._format_raw(state) == "ISO8601: 2025-06-01T12:00:00Z"


def test_subscribe_only_once():
    bus = _StubBus()
    layout = CountdownLayout(engine=MagicMock(), event_bus=bus)
    layout.subscribe()
    layout.subscribe()
    assert [t for t, _ in bus.subscriptions] == [events.STATE_CHANGED]


async def test_state_change_updates_every_client():
    layout = CountdownLayout(engine=MagicMock(), event_bus=_StubBus())
    first, second = _labels(), _labels()
    layout._clients.extend([first, second])

    await layout._on_state_changed(
        _state_event(
            target_instant=datetime(2025, 6, 1, 12, tzinfo=timezone.utc),
            raw_text="2025-06-01T12:00:00Z",
            display_text="↓ 5m",
            fetch_status=FetchStatus.OK,
        )
    )

    for labels in (first, second):
        assert labels.display.text == "↓ 5m"
        assert labels.raw.text == "ISO8601: 2025-06-01T12:00:00Z"
        assert labels.status.text == "Last fetch succeeded"


async def test_disconnected_client_is_dropped():
    layout = CountdownLayout(engine=MagicMock(), event_bus=_StubBus())
    live = _labels()
    gone = _ClientLabels(display=_GoneLabel(), raw=_GoneLabel(), status=_GoneLabel())
    layout._clients.extend([gone, live])

    await layout._on_state_changed(_state_event(display_text="Failed to Fetch Date"))

    assert layout._clients == [live]
    assert live.display.text == "Failed to Fetch Date"


def test_disconnect_unbinds_toast_container():
    notifier = MagicMock()
    layout = CountdownLayout(engine=MagicMock(), event_bus=_StubBus(), notifier=notifier)
    labels = _labels()
    layout._clients.append(labels)
    bar = object()

    layout._on_disconnect(labels, bar)

    assert layout._clients == []
    notifier.unbind_container.assert_called_once_with(bar)


def test_refresh_menu_item_issues_fetch():
    engine = MagicMock()
    layout = CountdownLayout(engine=engine, event_bus=_StubBus())
    layout._on_refresh()
    engine.refresh_now.assert_called_once_with()


def test_quit_menu_item_shuts_down():
    layout = CountdownLayout(engine=MagicMock(), event_bus=_StubBus())
    with patch("countdown.ui.layout.app") as mock_app:
        layout._on_quit()
    mock_app.shutdown.assert_called_once_with()
