"""Approve or decline Overseerr requests from a notification."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from framerr.auth import require_admin
from framerr.extensions import get_db
from framerr.models import User
from framerr.services.overseerr import perform_request_action

router = APIRouter(prefix="/api/request-actions", tags=["Request Actions"])


@router.post("/overseerr/{action}/{notification_id}")
def overseerr_request_action(
    action: str,
    notification_id: str,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Approve or decline the request behind an actionable notification."""
    return perform_request_action(db, user.id, action, notification_id)
