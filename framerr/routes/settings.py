"""Settings routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from framerr.auth import require_admin
from framerr.core.logging import get_logger
from framerr.extensions import get_db
from framerr.models.settings import (
    DEFAULT_NOTIFICATION_RETENTION_DAYS,
    SETTING_NOTIFICATION_RETENTION_DAYS,
    Settings,
)
from framerr.schemas.settings import (
    NotificationRetentionResponse,
    NotificationRetentionUpdate,
)

logger = get_logger("routes.settings")
router = APIRouter(
    prefix="/api/settings", tags=["Settings"], dependencies=[Depends(require_admin)]
)


@router.get("/notification-retention", response_model=NotificationRetentionResponse)
def get_notification_retention(db: Session = Depends(get_db)):
    """Get notification retention settings."""
    retention_days = Settings.get_int(
        db, SETTING_NOTIFICATION_RETENTION_DAYS, DEFAULT_NOTIFICATION_RETENTION_DAYS
    )
    return {"retention_days": retention_days}


@router.put("/notification-retention", response_model=NotificationRetentionResponse)
def update_notification_retention(
    payload: NotificationRetentionUpdate, db: Session = Depends(get_db)
):
    """Update notification retention settings."""
    Settings.set_int(db, SETTING_NOTIFICATION_RETENTION_DAYS, payload.retention_days)
    logger.info("Updated notification retention to %d days", payload.retention_days)
    return {"retention_days": payload.retention_days}
