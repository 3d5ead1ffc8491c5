"""
Event-driven SSE hub using asyncio pub/sub.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

from framerr.core.logging import get_logger

logger = get_logger("sse_hub")


class Channel:
    """SSE channel names. Each user listens on a channel of their own."""

    @staticmethod
    def user_notifications(user_id: str) -> str:
        """Channel carrying one user's notifications."""
        return f"user:{user_id}:notifications"


class SSEHub:
    """
    Pub/sub hub for SSE events.

    Manages subscriptions and dispatches payloads to connected clients.
    """

    def __init__(self):
        self._subscribers: dict[str, set[asyncio.Queue]] = {}
        self._lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    @asynccontextmanager
    async def subscribe(self, channel: str):
        """
        Subscribe to a channel.

        Args:
            channel: The channel name to subscribe to.

        Yields:
            An asyncio.Queue that receives published payloads.

        Example:
            async with hub.subscribe(Channel.user_notifications(user_id)) as queue:
                while True:
                    payload = await queue.get()
                    # Forward payload to the client
        """
        # Publishers schedule onto the loop the latest subscriber runs on
        self._loop = asyncio.get_running_loop()

        queue: asyncio.Queue = asyncio.Queue(maxsize=100)
        async with self._lock:
            self._subscribers.setdefault(channel, set()).add(queue)
        try:
            yield queue
        finally:
            async with self._lock:
                if channel in self._subscribers:
                    self._subscribers[channel].discard(queue)
                    if not self._subscribers[channel]:
                        del self._subscribers[channel]

    def has_subscribers(self, channel: str) -> bool:
        """Whether at least one client is listening on ``channel``."""
        return bool(self._subscribers.get(channel))

    def connection_count(self) -> int:
        """Total number of live subscriptions across all channels."""
        return sum(len(queues) for queues in list(self._subscribers.values()))

    def publish(self, channel: str, payload: Any) -> bool:
        """
        Publish a payload to every subscriber of a channel.

        This method is thread-safe and can be called from any thread.

        Args:
            channel: Channel name.
            payload: Object handed to each subscriber queue.

        Returns:
            True if the payload was scheduled for delivery.
        """
        if self._loop is None or not self.has_subscribers(channel):
            return False

        try:
            self._loop.call_soon_threadsafe(self._dispatch, channel, payload)
        except RuntimeError:
            # Loop is closed or not running
            return False
        return True

    def _dispatch(self, channel: str, payload: Any) -> None:
        """Dispatch a payload to all subscribers on a channel."""
        for queue in list(self._subscribers.get(channel, set())):
            try:
                queue.put_nowait(payload)
            except asyncio.QueueFull:
                logger.warning("SSE queue full on %s, dropping event", channel)


# Global instance
hub = SSEHub()
