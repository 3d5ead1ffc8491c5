"""
Web Push delivery.

VAPID keys are generated on first use and persisted in the system
configuration (``vapidKeys``) so every worker signs with the same key pair.
Subscriptions the push service reports as gone (HTTP 404/410) are deleted.
"""

from __future__ import annotations

import json
import os
import time
from typing import Any

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid
from py_vapid.utils import b64urlencode
from pywebpush import WebPushException, webpush

from framerr.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from framerr.core.helpers import utcnow
from framerr.core.logging import get_logger
from framerr.metrics import notification_push_total
from framerr.models import PushSubscription
from framerr.services.system_config import get_system_config, update_system_config

logger = get_logger("notifications.push")

VAPID_SUBJECT = os.environ.get("FRAMERR_VAPID_SUBJECT", "mailto:admin@framerr.local")
EXPIRED_STATUS_CODES = (404, 410)
PUSH_TTL_SECONDS = 86400


def _public_key(vapid: Vapid) -> str:
    raw = vapid.public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )
    return b64urlencode(raw)


class WebPushService:
    """Sends notifications to a user's registered browsers."""

    @classmethod
    def get_vapid(cls, db) -> Vapid:
        """Load the VAPID key pair, generating and storing one if missing."""
        keys = get_system_config(db).get("vapidKeys") or {}
        if keys.get("privateKey"):
            return Vapid.from_pem(keys["privateKey"].encode("utf-8"))

        vapid = Vapid()
        vapid.generate_keys()
        update_system_config(
            db,
            {
                "vapidKeys": {
                    "publicKey": _public_key(vapid),
                    "privateKey": vapid.private_pem().decode("utf-8"),
                }
            },
        )
        logger.info("Generated new VAPID keys")
        return vapid

    @classmethod
    def get_public_key(cls, db) -> str:
        """Application server key handed to browsers when subscribing."""
        keys = get_system_config(db).get("vapidKeys") or {}
        if keys.get("publicKey") and keys.get("privateKey"):
            return keys["publicKey"]
        return _public_key(cls.get_vapid(db))

    @classmethod
    def subscribe(
        cls,
        db,
        user_id: str,
        subscription: dict[str, Any],
        device_name: str | None = None,
    ) -> PushSubscription:
        """
        Register (or re-register) a browser subscription.

        The endpoint is unique, so subscribing an endpoint again moves it to
        the current user and refreshes its keys.
        """
        if not get_system_config(db).get("webPushEnabled", True):
            raise PermissionDeniedError(
                "Web Push notifications are disabled by the administrator"
            )

        endpoint = subscription.get("endpoint")
        keys = subscription.get("keys") or {}
        if not endpoint or not keys:
            raise ValidationError("Invalid subscription. Required: endpoint and keys")
        if not keys.get("p256dh") or not keys.get("auth"):
            raise ValidationError("Invalid subscription keys. Required: p256dh and auth")

        record = db.query(PushSubscription).filter_by(endpoint=endpoint).first()
        if record is None:
            record = PushSubscription(endpoint=endpoint)
            db.add(record)
        record.user_id = user_id
        record.p256dh = keys["p256dh"]
        record.auth = keys["auth"]
        record.device_name = device_name
        db.commit()

        logger.info("Push subscription %s registered for user %s", record.id, user_id)
        return record

    @classmethod
    def list_subscriptions(cls, db, user_id: str) -> list[PushSubscription]:
        return (
            db.query(PushSubscription)
            .filter_by(user_id=user_id)
            .order_by(PushSubscription.created_at)
            .all()
        )

    @classmethod
    def delete_subscription(cls, db, user_id: str, subscription_id: int) -> None:
        record = (
            db.query(PushSubscription)
            .filter_by(id=subscription_id, user_id=user_id)
            .first()
        )
        if record is None:
            raise NotFoundError("Subscription", subscription_id)
        db.delete(record)
        db.commit()
        logger.info("Push subscription %s deleted for user %s", subscription_id, user_id)

    @classmethod
    def send(cls, db, user_id: str, notification: dict[str, Any]) -> int:
        """
        Push a notification to every subscription of a user.

        Args:
            db: Database session.
            user_id: Recipient.
            notification: Serialised notification (``to_dict()`` shape).

        Returns:
            Number of subscriptions the push was accepted for.
        """
        subscriptions = cls.list_subscriptions(db, user_id)
        if not subscriptions:
            logger.debug("No push subscriptions for user %s", user_id)
            return 0

        vapid = cls.get_vapid(db)
        payload = json.dumps(
            {
                "title": notification.get("title"),
                "body": notification.get("message"),
                "type": notification.get("type"),
                "id": notification.get("id"),
                "timestamp": int(time.time() * 1000),
            }
        )

        sent = 0
        for subscription in subscriptions:
            try:
                webpush(
                    subscription_info=subscription.subscription_info(),
                    data=payload,
                    vapid_private_key=vapid,
                    vapid_claims={"sub": VAPID_SUBJECT},
                    ttl=PUSH_TTL_SECONDS,
                )
            except WebPushException as e:
                status = e.response.status_code if e.response is not None else None
                if status in EXPIRED_STATUS_CODES:
                    logger.info(
                        "Push subscription %s expired, removing", subscription.id
                    )
                    db.delete(subscription)
                    notification_push_total.labels(outcome="expired").inc()
                else:
                    logger.error(
                        "Push to subscription %s failed (%s): %s",
                        subscription.id,
                        status,
                        e,
                    )
                    notification_push_total.labels(outcome="failed").inc()
                continue

            subscription.last_used = utcnow()
            notification_push_total.labels(outcome="sent").inc()
            sent += 1

        db.commit()
        return sent
