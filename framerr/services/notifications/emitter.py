"""
Live delivery of stored notifications.

A user with an open SSE stream gets the notification on their channel only
(the tab is open, a push would be a duplicate). Users without a stream get
a Web Push on each subscribed device instead.
"""

from __future__ import annotations

from typing import Any

from framerr.core.logging import get_logger
from framerr.services.notifications.push import WebPushService
from framerr.sse_hub import Channel, SSEHub, hub

logger = get_logger("notifications.emitter")


class NotificationEmitter:
    """Routes a serialised notification to SSE or Web Push."""

    def __init__(self, sse_hub: SSEHub):
        self.hub = sse_hub

    def has_connection(self, user_id: str) -> bool:
        return self.hub.has_subscribers(Channel.user_notifications(user_id))

    def emit(
        self,
        db,
        user_id: str,
        notification: dict[str, Any],
        force_push: bool = False,
    ) -> str:
        """
        Deliver a notification to a user.

        Args:
            db: Database session (used for push subscriptions).
            user_id: Recipient.
            notification: Serialised notification.
            force_push: Skip SSE and always send a Web Push.

        Returns:
            ``"sse"``, ``"push"`` or ``"none"`` depending on the path taken.
        """
        try:
            if not force_push and self.has_connection(user_id):
                self.hub.publish(Channel.user_notifications(user_id), notification)
                logger.debug("Notification %s sent over SSE", notification.get("id"))
                return "sse"

            if WebPushService.send(db, user_id, notification):
                return "push"
        except Exception as e:
            db.rollback()
            logger.error(
                "Live delivery of notification %s to user %s failed: %s",
                notification.get("id"),
                user_id,
                e,
            )
        return "none"


# Global instance
notification_emitter = NotificationEmitter(hub)
