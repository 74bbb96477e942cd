"""Async signal channel feeding the lifecycle bridge.

Embedders that run their bundler integration on an event loop can push
``SignalEvent`` objects into a ``SignalChannel`` instead of calling the
bridge's callbacks directly.  ``LifecycleBridge.consume`` drains the
channel one signal at a time; closing the channel ends consumption.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from buildrelay.core.errors import ChannelClosedError
from buildrelay.models.signals import SignalEvent

_CLOSED = object()


class SignalChannel:
    """Unbounded FIFO of lifecycle signals with an explicit close."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: SignalEvent) -> None:
        """Enqueue *event*.  Raises ``ChannelClosedError`` after ``close()``."""
        if self._closed:
            raise ChannelClosedError("Cannot send on a closed signal channel.")
        self._queue.put_nowait(event)

    def close(self) -> None:
        """Stop the channel.  Signals already queued are still delivered."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def receive(self) -> SignalEvent | None:
        """Wait for the next signal; ``None`` once the channel is drained."""
        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the marker for any other waiting receiver.
            self._queue.put_nowait(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    async def __aiter__(self) -> AsyncIterator[SignalEvent]:
        while True:
            event = await self.receive()
            if event is None:
                return
            yield event

    def __repr__(self) -> str:
        return f"SignalChannel(pending={self._queue.qsize()}, closed={self._closed})"
