"""
Scheduled maintenance jobs.
"""

from datetime import timedelta

from framerr.core.helpers import utcnow
from framerr.core.logging import get_logger
from framerr.extensions import SessionLocal

logger = get_logger("tasks")


def prune_old_notifications() -> dict:
    """
    Delete read notifications older than the retention setting.

    Called by the scheduler daily. Unread notifications are never pruned.

    Returns:
        Dictionary with deleted_notifications and retention_days.
    """
    from framerr.models import Notification
    from framerr.models.settings import (
        DEFAULT_NOTIFICATION_RETENTION_DAYS,
        SETTING_NOTIFICATION_RETENTION_DAYS,
        Settings,
    )

    with SessionLocal() as db:
        retention_days = Settings.get_int(
            db, SETTING_NOTIFICATION_RETENTION_DAYS, DEFAULT_NOTIFICATION_RETENTION_DAYS
        )

        if retention_days <= 0:
            logger.info(
                "Notification retention disabled (set to %d days), skipping prune",
                retention_days,
            )
            return {"deleted_notifications": 0, "retention_days": retention_days}

        cutoff_date = utcnow() - timedelta(days=retention_days)
        deleted = (
            db.query(Notification)
            .filter(Notification.read.is_(True))
            .filter(Notification.created_at < cutoff_date)
            .delete(synchronize_session=False)
        )
        db.commit()

    logger.info(
        "Pruned %d read notifications older than %d days", deleted, retention_days
    )
    return {"deleted_notifications": deleted, "retention_days": retention_days}
