"""
Webhook receiver: token check, normalisation, content and routing.

``handle_webhook`` is the whole pipeline for one call and never raises; it
returns the HTTP status and JSON body the producer should get. Producers
disable webhooks that keep failing, so an unknown event is answered with
200 ``ignored`` rather than an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from framerr.core.helpers import token_hint, tokens_match
from framerr.core.logging import get_logger
from framerr.metrics import webhook_notifications_total, webhook_requests_total
from framerr.services.system_config import get_webhook_config
from framerr.services.webhooks.content import build_content, extract_fields
from framerr.services.webhooks.events import EventKey, normalize_event, raw_event_name
from framerr.services.webhooks.routing import WebhookNotification, route_notification

logger = get_logger("webhooks")

# Producers without a per-user requester; their events go to admins only
ADMIN_ONLY_SERVICES = ("sonarr", "radarr")


@dataclass
class TokenValidation:
    valid: bool
    reason: str | None = None
    webhook_config: dict[str, Any] = field(default_factory=dict)


def validate_token(db, service: str, token: str | None) -> TokenValidation:
    """
    Check a path-carried webhook token against the integration config.

    Args:
        db: Database session.
        service: Producer id.
        token: Token from the URL.

    Returns:
        TokenValidation; ``reason`` is set when the call is not allowed.
    """
    try:
        webhook_config = get_webhook_config(db, service)
        enabled = bool(webhook_config.get("webhookEnabled"))
        matched = tokens_match(token, webhook_config.get("webhookToken"))
    except Exception:
        logger.exception("Failed to validate %s webhook token", service)
        return TokenValidation(valid=False, reason="Validation error")

    if not enabled:
        return TokenValidation(valid=False, reason="Webhook not enabled")

    if not matched:
        return TokenValidation(valid=False, reason="Invalid token")

    return TokenValidation(valid=True, webhook_config=webhook_config)


def build_notification(
    service: str,
    event_key: EventKey,
    payload: dict[str, Any],
    webhook_config: dict[str, Any],
) -> WebhookNotification:
    """Extract fields, build content and attach routing data for an event."""
    fields = extract_fields(service, payload)
    content = build_content(service, event_key, fields)

    metadata = None
    if event_key == EventKey.REQUEST_PENDING and fields.request_id:
        metadata = {
            "requestId": fields.request_id,
            "service": service,
            "actionable": True,
            "mediaTitle": fields.media_title,
        }

    return WebhookNotification(
        service=service,
        event_key=event_key,
        title=content.title,
        message=content.message,
        webhook_config=webhook_config,
        username=fields.username,
        metadata=metadata,
        admin_only=service in ADMIN_ONLY_SERVICES,
    )


def handle_webhook(
    db, service: str, token: str | None, payload: Any
) -> tuple[int, dict[str, Any]]:
    """
    Process one webhook call.

    Args:
        db: Database session.
        service: Producer id (overseerr, sonarr or radarr).
        token: Token from the URL path.
        payload: Decoded JSON body.

    Returns:
        Tuple of (HTTP status code, response body).
    """
    logger.debug("Received %s webhook (token %s)", service, token_hint(token))

    validation = validate_token(db, service, token)
    if not validation.valid:
        logger.warning("Rejected %s webhook: %s", service, validation.reason)
        webhook_requests_total.labels(service=service, outcome="unauthorized").inc()
        return 401, {"error": validation.reason}

    try:
        if not isinstance(payload, dict):
            payload = {}

        event_key = normalize_event(service, payload)
        if event_key is None:
            logger.debug(
                "Ignoring unknown %s event: %s",
                service,
                raw_event_name(service, payload),
            )
            webhook_requests_total.labels(service=service, outcome="ignored").inc()
            return 200, {"status": "ignored", "reason": "Unknown event type"}

        notification = build_notification(
            service, event_key, payload, validation.webhook_config
        )
        result = route_notification(db, notification)
    except Exception:
        db.rollback()
        logger.exception("%s webhook processing failed", service)
        webhook_requests_total.labels(service=service, outcome="error").inc()
        return 500, {"error": "Processing failed"}

    webhook_requests_total.labels(service=service, outcome="ok").inc()
    webhook_notifications_total.labels(service=service, outcome="sent").inc(result.sent)
    body: dict[str, Any] = {"status": "ok", "notificationsSent": result.sent}
    if result.failed:
        webhook_notifications_total.labels(service=service, outcome="failed").inc(
            result.failed
        )
        body["notificationsFailed"] = result.failed
    return 200, body
