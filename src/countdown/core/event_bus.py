"""Event bus carrying engine snapshots to the presentation layer.

The engine publishes synchronously from the event loop (every state change
produces a ``countdown.state.changed`` event holding the new
:class:`~countdown.core.models.state.CountdownState`).  A single consumer
task delivers events in publish order, so subscribers always see snapshots
oldest first.  When the queue is full the oldest pending event is dropped;
a later snapshot supersedes it anyway.

A handler that raises is removed and the failure logged.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Awaitable, Callable, Union

from countdown.core.models.event import Event

_log = logging.getLogger(__name__)

Handler = Callable[[Event], Union[None, Awaitable[None]]]


class EventBus:
    """Ordered, bounded pub/sub on the running asyncio loop.

    Args:
        queue_size: Pending events kept before the oldest is dropped.
    """

    def __init__(self, queue_size: int = 1000) -> None:
        self._queue_size = queue_size
        self._queue: asyncio.Queue[Event] | None = None
        self._consumer: asyncio.Task[None] | None = None
        # event type -> {subscription id -> handler}, in subscription order
        self._handlers: dict[str, dict[str, Handler]] = {}
        self._ids = itertools.count(1)

    @property
    def is_running(self) -> bool:
        return self._consumer is not None

    async def start(self) -> None:
        """Create the queue and consumer task on the running loop."""
        if self._consumer is not None:
            return
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._consumer = asyncio.create_task(self._drain(), name="event-bus-consumer")
        _log.info("Event bus started (queue_size=%d)", self._queue_size)

    async def stop(self) -> None:
        """Cancel the consumer; pending events and subscriptions are dropped."""
        consumer, self._consumer = self._consumer, None
        if consumer is not None:
            consumer.cancel()
            try:
                await consumer
            except asyncio.CancelledError:
                pass
        self._queue = None
        self._handlers.clear()
        _log.info("Event bus stopped")

    def subscribe(self, event_type: str, handler: Handler) -> str:
        """Call *handler* (sync or async) for every *event_type* event."""
        sub_id = f"{event_type}#{next(self._ids)}"
        self._handlers.setdefault(event_type, {})[sub_id] = handler
        return sub_id

    def unsubscribe(self, sub_id: str) -> None:
        """Remove a subscription; unknown ids are ignored."""
        event_type = sub_id.rpartition("#")[0]
        handlers = self._handlers.get(event_type)
        if handlers is not None:
            handlers.pop(sub_id, None)

    def publish_nowait(self, event_type: str, payload: dict[str, Any] | None = None) -> None:
        """Queue an event from code running on the loop.

        Events published before :meth:`start` are dropped.
        """
        if self._queue is None:
            _log.debug("Event bus not started, dropping %s", event_type)
            return
        if self._queue.full():
            self._queue.get_nowait()
            _log.warning("Event bus queue full, dropped oldest event")
        self._queue.put_nowait(Event(event_type=event_type, payload=payload or {}))

    async def publish(self, event_type: str, payload: dict[str, Any] | None = None) -> None:
        """Queue an event from a coroutine."""
        self.publish_nowait(event_type, payload)

    async def _drain(self) -> None:
        assert self._queue is not None
        queue = self._queue
        while True:
            event = await queue.get()
            handlers = self._handlers.get(event.event_type, {})
            for sub_id, handler in list(handlers.items()):
                if sub_id not in handlers:
                    continue
                try:
                    result = handler(event)
                    if asyncio.iscoroutine(result):
                        await result
                except Exception:
                    _log.exception("Handler %s for %s raised, unsubscribing", handler, event.event_type)
                    self.unsubscribe(sub_id)
