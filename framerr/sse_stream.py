"""
Per-user SSE notification stream.

The stream announces itself with a ``connected`` message, then forwards
every payload published on the user's channel. While idle, a heartbeat
comment is sent so proxies keep the connection open.
"""

import asyncio
import json

from fastapi import Request
from sse_starlette.sse import EventSourceResponse

from framerr.core.constants import SSE_HEARTBEAT_SECONDS
from framerr.core.logging import get_logger
from framerr.sse_hub import Channel, hub

logger = get_logger("sse_stream")


def sse_cors_headers(request: Request) -> dict:
    """
    Generate CORS headers for SSE responses.

    Args:
        request: The incoming FastAPI request.

    Returns:
        Dictionary of CORS headers.
    """
    origin = request.headers.get("origin", "*")
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "X-Accel-Buffering": "no",
    }


async def create_notification_stream(
    user_id: str,
    heartbeat_interval: float = SSE_HEARTBEAT_SECONDS,
):
    """
    Stream notifications published for a user.

    Args:
        user_id: Owner of the stream.
        heartbeat_interval: Seconds between heartbeat comments.

    Yields:
        SSE event dicts with 'data' or 'comment' keys.
    """
    async with hub.subscribe(Channel.user_notifications(user_id)) as queue:
        logger.debug("SSE connection opened for user %s", user_id)
        yield {"data": json.dumps({"type": "connected", "userId": user_id})}

        try:
            while True:
                try:
                    payload = await asyncio.wait_for(
                        queue.get(), timeout=heartbeat_interval
                    )
                    yield {"data": json.dumps(payload, default=str)}
                except TimeoutError:
                    # No event within heartbeat interval - send heartbeat
                    yield {"comment": "heartbeat"}
        finally:
            logger.debug("SSE connection closed for user %s", user_id)


def notification_stream_response(request: Request, user_id: str) -> EventSourceResponse:
    """
    Create an SSE response streaming a user's notifications.

    Args:
        request: FastAPI request object (used for CORS origin).
        user_id: Owner of the stream.

    Returns:
        EventSourceResponse configured for SSE streaming.
    """
    return EventSourceResponse(
        create_notification_stream(user_id),
        headers=sse_cors_headers(request),
    )
