"""
Recipient routing for webhook notifications.

Decision order:

1. ``test`` events go to every admin, unconditionally.
2. Admin-only producers (Sonarr, Radarr) go to admins who want the event.
3. Admin events (new requests, issues) go to admins who want the event.
4. User events go to the requesting user. If the username can't be
   resolved, admins with "receive unmatched" get an ``[Unmatched]`` copy.
5. ``requestFailed`` goes to the requesting user and to the admins.
6. Anything else falls back to the admins.

Each recipient is delivered independently: a failing recipient is logged
and counted in ``failed`` while the others still get their notification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from framerr.core.constants import get_system_icon_id
from framerr.core.logging import get_logger
from framerr.models import User
from framerr.services.notifications import NotificationService
from framerr.services.webhooks.events import (
    ADMIN_EVENTS,
    BOTH_EVENTS,
    USER_EVENTS,
    EventKey,
)
from framerr.services.webhooks.resolver import (
    admins_with_receive_unmatched,
    resolve_user_by_username,
    user_wants_event,
)

logger = get_logger("webhooks.routing")

TEST_PREFIX = "[Test] "
UNMATCHED_PREFIX = "[Unmatched] "


class RoutingDecision(str, Enum):
    TEST = "test"
    ADMIN_ONLY_FALLBACK = "admin_only_fallback"
    ADMIN_ONLY = "admin_only"
    USER_ONLY = "user_only"
    BOTH = "both"
    UNROUTED = "unrouted"


@dataclass
class WebhookNotification:
    """A normalised webhook event ready to be routed."""

    service: str
    event_key: EventKey
    title: str
    message: str
    webhook_config: dict[str, Any]
    username: str | None = None
    metadata: dict[str, Any] | None = None
    admin_only: bool = False


@dataclass
class RoutingResult:
    decision: RoutingDecision
    sent: int = 0
    failed: int = 0
    recipients: list[str] = field(default_factory=list)


def classify(notification: WebhookNotification) -> RoutingDecision:
    """Pick the routing decision for an event (first match wins)."""
    key = notification.event_key
    if key == EventKey.TEST:
        return RoutingDecision.TEST
    if notification.admin_only:
        return RoutingDecision.ADMIN_ONLY_FALLBACK
    if key in ADMIN_EVENTS:
        return RoutingDecision.ADMIN_ONLY
    if key in USER_EVENTS and notification.username:
        return RoutingDecision.USER_ONLY
    if key in BOTH_EVENTS and notification.username:
        return RoutingDecision.BOTH
    return RoutingDecision.UNROUTED


class _Delivery:
    """Creates notifications for one webhook call and tallies the outcome."""

    def __init__(self, db, notification: WebhookNotification, result: RoutingResult):
        self.db = db
        self.notification = notification
        self.result = result
        self.icon_id = get_system_icon_id(notification.service)

    def send(
        self,
        user: User,
        type: str = "info",
        title: str | None = None,
        message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        try:
            NotificationService.create(
                self.db,
                user_id=user.id,
                type=type,
                title=title or self.notification.title,
                message=message or self.notification.message,
                icon_id=self.icon_id,
                metadata=metadata,
            )
        except Exception:
            self.db.rollback()
            logger.exception(
                "Failed to deliver %s %s notification to user %s",
                self.notification.service,
                self.notification.event_key.value,
                user.id,
            )
            self.result.failed += 1
            return False

        self.result.sent += 1
        self.result.recipients.append(user.id)
        return True

    def to_admins(self) -> None:
        """Every admin whose adminEvents include the event."""
        n = self.notification
        for admin in User.admins(self.db):
            if user_wants_event(self.db, admin, n.service, n.event_key, n.webhook_config):
                self.send(admin, metadata=n.metadata)

    def to_test_admins(self) -> None:
        for admin in User.admins(self.db):
            self.send(
                admin,
                type="success",
                title=f"{TEST_PREFIX}{self.notification.title}",
                message=self.notification.message or "Test notification received",
            )

    def to_user(self, user: User) -> None:
        n = self.notification
        if user_wants_event(self.db, user, n.service, n.event_key, n.webhook_config):
            self.send(user, metadata=n.metadata)
        else:
            logger.debug("User %s has %s disabled", user.id, n.event_key.value)

    def to_unmatched_admins(self) -> None:
        n = self.notification
        for admin in admins_with_receive_unmatched(self.db):
            if user_wants_event(self.db, admin, n.service, n.event_key, n.webhook_config):
                self.send(
                    admin,
                    title=f"{UNMATCHED_PREFIX}{n.title}",
                    message=f"From: {n.username}\n{n.message}",
                )


def route_notification(db, notification: WebhookNotification) -> RoutingResult:
    """
    Deliver a webhook notification to its recipients.

    Args:
        db: Database session.
        notification: The normalised event and its content.

    Returns:
        RoutingResult with the decision taken and sent/failed counts.
    """
    decision = classify(notification)
    result = RoutingResult(decision=decision)
    delivery = _Delivery(db, notification, result)

    if decision == RoutingDecision.TEST:
        delivery.to_test_admins()

    elif decision in (RoutingDecision.ADMIN_ONLY_FALLBACK, RoutingDecision.ADMIN_ONLY):
        delivery.to_admins()

    elif decision == RoutingDecision.USER_ONLY:
        user = resolve_user_by_username(db, notification.username)
        if user is not None:
            delivery.to_user(user)
        else:
            logger.info(
                "No Framerr user for %s, notifying admins with receiveUnmatched",
                notification.username,
            )
            delivery.to_unmatched_admins()

    elif decision == RoutingDecision.BOTH:
        user = resolve_user_by_username(db, notification.username)
        if user is not None:
            delivery.to_user(user)
        delivery.to_admins()

    else:
        logger.warning(
            "No routing rule for %s %s, sending to admins",
            notification.service,
            notification.event_key.value,
        )
        delivery.to_admins()

    logger.info(
        "Routed %s %s (%s): %d sent, %d failed",
        notification.service,
        notification.event_key.value,
        decision.value,
        result.sent,
        result.failed,
    )
    return result
