"""Realtime subscription feeding remote changes into the restaurant book."""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field

from restaurant_tracker.domain.changes import ChangeEvent, SyncStatus
from restaurant_tracker.services.restaurants import RestaurantBook, RestaurantRepository

logger = logging.getLogger(__name__)

SUBSCRIBED = "SUBSCRIBED"
FAILED_STATES = frozenset({"CLOSED", "CHANNEL_ERROR", "TIMED_OUT"})


@dataclass
class RealtimeSync:
    """Owns the change subscription and its advisory status.

    The store's callback only enqueues events; a single consumer task applies
    them to the book in arrival order.
    """

    repository: RestaurantRepository
    book: RestaurantBook
    status: SyncStatus = field(default=SyncStatus.DISCONNECTED, init=False)
    _queue: "asyncio.Queue[ChangeEvent] | None" = field(default=None, init=False)
    _consumer: "asyncio.Task[None] | None" = field(default=None, init=False)
    _handle: object | None = field(default=None, init=False)

    async def start(self) -> None:
        """Subscribe to row changes; failures flip the status to error."""
        if self._consumer is not None:
            return
        self.status = SyncStatus.CONNECTING
        queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self._queue = queue
        self._consumer = asyncio.create_task(self._consume(queue))
        try:
            self._handle = await self.repository.subscribe(
                self._enqueue, self._on_status
            )
        except Exception:
            logger.exception("Failed to subscribe to restaurant changes")
            self.status = SyncStatus.ERROR
            await self._stop_consumer()

    async def stop(self) -> None:
        """Unsubscribe, apply already-queued events and stop the consumer."""
        self.status = SyncStatus.DISCONNECTED
        handle, self._handle = self._handle, None
        if handle is not None:
            try:
                await self.repository.unsubscribe(handle)
            except Exception:
                logger.exception("Failed to unsubscribe from restaurant changes")
        if self._queue is not None and self._consumer is not None:
            await self._queue.join()
        await self._stop_consumer()

    def _enqueue(self, event: ChangeEvent) -> None:
        if self._queue is None:
            return
        self._queue.put_nowait(event)

    def _on_status(self, state: str) -> None:
        if self.status is SyncStatus.DISCONNECTED:
            return
        if state == SUBSCRIBED:
            self.status = SyncStatus.LIVE
            logger.info("Realtime sync is live")
        elif state in FAILED_STATES:
            self.status = SyncStatus.ERROR
            logger.warning("Realtime sync stopped", extra={"state": state})

    async def _consume(self, queue: "asyncio.Queue[ChangeEvent]") -> None:
        while True:
            event = await queue.get()
            try:
                self.book.on_remote_change(event)
            except Exception:
                logger.exception(
                    "Failed to apply restaurant change", extra={"key": event.key}
                )
            finally:
                queue.task_done()

    async def _stop_consumer(self) -> None:
        consumer, self._consumer = self._consumer, None
        self._queue = None
        if consumer is None:
            return
        consumer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await consumer
