"""
Stores notifications and hands them to the emitter.

NotificationService is the single sink every producer goes through: the
webhook router, the REST API and the push test endpoint. ``create`` writes
the row inside a SAVEPOINT, commits, then delivers the notification live.
A failed insert only rolls back its own SAVEPOINT, so callers fanning out
to several users can keep going with the rest.

Uses @classmethod throughout because there's no instance state - it just
reads from the DB and dispatches.
"""

from __future__ import annotations

from typing import Any

from framerr.core.exceptions import NotFoundError
from framerr.core.logging import get_logger
from framerr.core.validators import validate_notification_type
from framerr.models import Notification
from framerr.services.notifications.emitter import notification_emitter

logger = get_logger("notifications")


class NotificationService:
    """Persistence and delivery of per-user notifications."""

    @classmethod
    def create(
        cls,
        db,
        user_id: str,
        type: str,
        title: str,
        message: str,
        icon_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        """
        Store a notification and deliver it live.

        Args:
            db: Database session.
            user_id: Owner of the notification.
            type: Severity (success, error, warning, info).
            title: Short headline.
            message: Body text.
            icon_id: Optional icon identifier.
            metadata: Optional structured data (e.g. actionable request info).

        Returns:
            The stored Notification.
        """
        validate_notification_type(type)

        with db.begin_nested():
            notification = Notification(
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                icon_id=icon_id,
                meta=metadata,
            )
            db.add(notification)
        db.commit()

        logger.info("Notification %s created for user %s", notification.id, user_id)
        notification_emitter.emit(db, user_id, notification.to_dict())
        return notification

    @classmethod
    def get(cls, db, user_id: str, notification_id: str) -> Notification:
        """Fetch a notification owned by ``user_id``."""
        notification = (
            db.query(Notification)
            .filter_by(id=notification_id, user_id=user_id)
            .first()
        )
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        return notification

    @classmethod
    def get_all(
        cls,
        db,
        user_id: str,
        unread: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> dict[str, Any]:
        """
        Page through a user's notifications, newest first.

        Returns:
            Dict with ``notifications``, ``unreadCount`` and ``total``.
        """
        query = db.query(Notification).filter_by(user_id=user_id)
        if unread:
            query = query.filter_by(read=False)

        total = query.count()
        notifications = (
            query.order_by(Notification.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        unread_count = (
            db.query(Notification).filter_by(user_id=user_id, read=False).count()
        )
        return {
            "notifications": [n.to_dict() for n in notifications],
            "unreadCount": unread_count,
            "total": total,
        }

    @classmethod
    def mark_read(cls, db, user_id: str, notification_id: str) -> Notification:
        notification = cls.get(db, user_id, notification_id)
        notification.read = True
        db.commit()
        return notification

    @classmethod
    def mark_all_read(cls, db, user_id: str) -> int:
        count = (
            db.query(Notification)
            .filter_by(user_id=user_id, read=False)
            .update({"read": True}, synchronize_session=False)
        )
        db.commit()
        logger.info("Marked %d notifications read for user %s", count, user_id)
        return count

    @classmethod
    def delete(cls, db, user_id: str, notification_id: str) -> None:
        notification = cls.get(db, user_id, notification_id)
        db.delete(notification)
        db.commit()

    @classmethod
    def clear_all(cls, db, user_id: str) -> int:
        count = (
            db.query(Notification)
            .filter_by(user_id=user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        logger.info("Cleared %d notifications for user %s", count, user_id)
        return count
