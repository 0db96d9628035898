"""In-memory publish/subscribe broadcaster for GraphQL subscriptions.

Each subscriber owns an unbounded queue. Publishing fans a message out to the
subscribers registered at that moment; nothing is kept for later subscribers.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)


class Subscriber:
    """Handle for one active subscription."""

    def __init__(self, channel: str) -> None:
        self.channel = channel
        self._queue: asyncio.Queue[Any] = asyncio.Queue()

    def deliver(self, message: Any) -> None:
        self._queue.put_nowait(message)

    async def get(self) -> Any:
        return await self._queue.get()

    def pending(self) -> int:
        """Number of messages delivered but not consumed yet."""
        return self._queue.qsize()

    def __aiter__(self) -> AsyncIterator[Any]:
        return self

    async def __anext__(self) -> Any:
        return await self.get()


class Broadcast:
    """Registry of active subscribers keyed by channel name."""

    def __init__(self) -> None:
        self._subscribers: dict[str, set[Subscriber]] = defaultdict(set)

    @asynccontextmanager
    async def subscribe(self, channel: str) -> AsyncIterator[Subscriber]:
        """Register a subscriber for the duration of the block."""
        subscriber = Subscriber(channel)
        self._subscribers[channel].add(subscriber)
        logger.debug(
            "Subscriber registered",
            channel=channel,
            subscribers=len(self._subscribers[channel]),
        )
        try:
            yield subscriber
        finally:
            self._subscribers[channel].discard(subscriber)
            if not self._subscribers[channel]:
                del self._subscribers[channel]
            logger.debug("Subscriber removed", channel=channel)

    async def publish(self, channel: str, message: Any) -> int:
        """Deliver a message to every current subscriber of a channel.

        Returns:
            The number of subscribers that received the message
        """
        subscribers = list(self._subscribers.get(channel, ()))
        for subscriber in subscribers:
            subscriber.deliver(message)

        logger.info("Event published", channel=channel, receivers=len(subscribers))
        return len(subscribers)

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))


_broadcast: Broadcast | None = None


def get_broadcast() -> Broadcast:
    """Return the process-wide broadcaster, creating it on first use."""
    global _broadcast
    if _broadcast is None:
        _broadcast = Broadcast()
    return _broadcast


def reset_broadcast() -> None:
    """Drop the process-wide broadcaster (for tests)."""
    global _broadcast
    _broadcast = None
