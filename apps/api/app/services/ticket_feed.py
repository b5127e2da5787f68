from __future__ import annotations

from contextlib import contextmanager
import anyio
import anyio.from_thread
from anyio.streams.memory import MemoryObjectSendStream


class TicketFeed:
    """
    Change signal for the ticket collection.

    Each subscriber owns a one-slot stream. A signal carries no data: the
    subscriber reloads the whole collection when it wakes, so a signal that
    is already pending covers any later change.
    """

    def __init__(self) -> None:
        self._subscribers: set[MemoryObjectSendStream] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @contextmanager
    def subscribe(self):
        send, receive = anyio.create_memory_object_stream(1)
        self._subscribers.add(send)
        try:
            yield receive
        finally:
            self._subscribers.discard(send)
            send.close()
            receive.close()

    def notify(self) -> None:
        """Signal every subscriber. Must run on the event loop thread."""
        for send in list(self._subscribers):
            try:
                send.send_nowait(None)
            except anyio.WouldBlock:
                continue
            except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                self._subscribers.discard(send)

    def publish_from_thread(self) -> None:
        """Signal subscribers from a sync route running in the worker pool."""
        if not self._subscribers:
            return
        anyio.from_thread.run_sync(self.notify)


ticket_feed = TicketFeed()
