"""Menu-bar countdown — application entry point (NiceGUI composition root).

Wires together: Config → SettingsStore → EventBus → PlatformFactory →
CountdownEngine → UI.  NiceGUI owns the event loop; ``app.on_startup`` /
``app.on_shutdown`` handle lifecycle.
"""

from __future__ import annotations

import logging as _logging

from nicegui import app, ui

from countdown.config.config_manager import load_config
from countdown.config.settings_store import SettingsStore
from countdown.core import events
from countdown.core.countdown_engine import CountdownEngine
from countdown.core.event_bus import EventBus
from countdown.logging.logger import setup_logging
from countdown.platform.factory import create_platform_factory

_log = _logging.getLogger(__name__)


def main() -> None:
    """Synchronous entry point — bootstraps and starts NiceGUI."""

    # 1. Load configuration
    config = load_config()
    setup_logging(log_level=config.log_level, log_dir=config.log_dir)
    _log.info("Starting menu-bar countdown")

    settings = SettingsStore(config.settings_file)

    # 2. Create event bus
    bus = EventBus(queue_size=config.event_bus_queue_size)

    # 3. Platform services (in-memory on dev, toasts otherwise)
    factory = create_platform_factory(config)
    notifier = factory.create_notifier()
    login_item = factory.create_login_item()

    # 4. Engine
    engine = CountdownEngine(
        settings=settings,
        notifier=notifier,
        event_bus=bus,
        tick_seconds=config.tick_seconds,
    )

    # 5. UI (imported here so dev tooling can import main without a page)
    from countdown.ui.layout import CountdownLayout
    from countdown.ui.notifications import NiceGUINotificationGateway
    from countdown.ui.settings_page import SettingsPage

    layout = CountdownLayout(
        engine=engine,
        event_bus=bus,
        notifier=notifier if isinstance(notifier, NiceGUINotificationGateway) else None,
    )
    layout.setup_page()
    SettingsPage(engine=engine, settings=settings, login_item=login_item).setup_page()

    # 6. Wire lifecycle hooks
    async def on_startup() -> None:
        await bus.start()
        layout.subscribe()
        engine.initialize()
        login_item.set_enabled(engine.config.launch_at_login)
        await bus.publish(events.SYSTEM_STARTED, {"url": engine.config.fetch_url})
        _log.info("Countdown running on http://localhost:%d", config.webui_port)

    async def on_shutdown() -> None:
        await bus.publish(events.SHUTDOWN_INITIATED, {"reason": "nicegui shutdown"})
        await engine.shutdown()
        await bus.stop()
        factory.cleanup()
        _log.info("Countdown stopped")

    app.on_startup(on_startup)
    app.on_shutdown(on_shutdown)

    # 7. Launch NiceGUI (blocks until shutdown)
    ui.run(
        port=config.webui_port,
        title="MenuBarCountdown",
        reload=False,
        show=False,
    )


if __name__ == "__main__":
    main()
