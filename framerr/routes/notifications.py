"""Notification routes."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from framerr.auth import get_current_user
from framerr.core.exceptions import PermissionDeniedError, ValidationError
from framerr.core.logging import get_logger
from framerr.extensions import get_db
from framerr.models import User
from framerr.schemas.notifications import (
    NotificationCreate,
    NotificationListQuery,
    PushSubscribeRequest,
)
from framerr.services.notifications import (
    NotificationService,
    WebPushService,
    notification_emitter,
)
from framerr.sse_stream import notification_stream_response

logger = get_logger("routes.notifications")
router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("")
def list_notifications(
    query: NotificationListQuery = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's notifications, newest first."""
    return NotificationService.get_all(
        db, user.id, unread=query.unread, limit=query.limit, offset=query.offset
    )


@router.post("", status_code=201)
def create_notification(
    payload: NotificationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a notification.

    Admins may target another user with ``userId``; everyone else can only
    notify themselves.
    """
    target_id = payload.user_id or user.id
    if target_id != user.id:
        if not user.is_admin:
            raise PermissionDeniedError("Only admins can notify other users")
        if db.get(User, target_id) is None:
            raise ValidationError(f"Unknown user: {target_id}")

    notification = NotificationService.create(
        db,
        user_id=target_id,
        type=payload.type,
        title=payload.title,
        message=payload.message,
        icon_id=payload.icon_id,
        metadata=payload.metadata,
    )
    return notification.to_dict()


@router.post("/mark-all-read")
def mark_all_read(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"updatedCount": NotificationService.mark_all_read(db, user.id)}


@router.delete("/clear-all")
def clear_all(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"deletedCount": NotificationService.clear_all(db, user.id)}


@router.get("/stream")
async def stream_notifications(
    request: Request, user: User = Depends(get_current_user)
):
    """
    Server-Sent Events stream of the caller's new notifications.

    Sends a ``connected`` message first, then one message per notification
    and a heartbeat comment every 30 seconds.
    """
    return notification_stream_response(request, user.id)


@router.get("/push/vapid-key")
def get_vapid_key(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"publicKey": WebPushService.get_public_key(db)}


@router.post("/push/subscribe", status_code=201)
def subscribe_push(
    payload: PushSubscribeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Register this browser for Web Push."""
    subscription = payload.subscription.model_dump() if payload.subscription else {}
    record = WebPushService.subscribe(db, user.id, subscription, payload.device_name)
    return {
        "success": True,
        "subscription": {
            "id": record.id,
            "deviceName": record.device_name,
            "createdAt": record.created_at.isoformat() if record.created_at else None,
        },
    }


@router.get("/push/subscriptions")
def list_push_subscriptions(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    subscriptions = WebPushService.list_subscriptions(db, user.id)
    return {"subscriptions": [s.to_dict() for s in subscriptions]}


@router.delete("/push/subscriptions/{subscription_id}", status_code=204)
def delete_push_subscription(
    subscription_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    WebPushService.delete_subscription(db, user.id, subscription_id)
    return Response(status_code=204)


@router.post("/push/test")
def send_test_push(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Send a Web Push to the caller's devices, even with a tab open."""
    if not WebPushService.list_subscriptions(db, user.id):
        raise ValidationError(
            "No push subscriptions found. Enable push notifications first."
        )

    notification_emitter.emit(
        db,
        user.id,
        {
            "id": "test-push",
            "title": "Test Push Notification",
            "message": "Web Push is working!",
            "type": "info",
        },
        force_push=True,
    )
    logger.info("Test push sent to user %s", user.id)
    return {"success": True, "message": "Test notification sent"}


@router.patch("/{notification_id}/read")
def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return NotificationService.mark_read(db, user.id, notification_id).to_dict()


@router.delete("/{notification_id}", status_code=204)
def delete_notification(
    notification_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    NotificationService.delete(db, user.id, notification_id)
    return Response(status_code=204)
