"""
Admin management of per-integration webhook settings.

Tokens are never returned by the read endpoint; only ``hasToken`` and a
short hint are exposed. A full token is shown once, when it is generated.
"""

from __future__ import annotations

from typing import Any

from framerr.core.helpers import generate_token, token_hint
from framerr.core.logging import get_logger
from framerr.core.validators import validate_event_keys, validate_webhook_service
from framerr.schemas.webhooks import (
    INTEGRATION_EVENTS,
    default_admin_events,
    default_user_events,
)
from framerr.services.system_config import (
    get_system_config,
    get_webhook_config,
    update_webhook_config,
)

logger = get_logger("services.integrations")


def event_catalogue() -> dict[str, list[dict[str, Any]]]:
    """Configurable events per webhook service."""
    return {
        service: [config.to_dict() for config in configs]
        for service, configs in INTEGRATION_EVENTS.items()
    }


def webhook_url(db, service: str, token: str, base_url: str | None = None) -> str:
    """
    Build the URL a producer should call.

    The configured ``webhookBaseUrl`` wins over the request's own base URL.
    """
    configured = get_system_config(db).get("webhookBaseUrl") or ""
    base = (configured or base_url or "").rstrip("/")
    return f"{base}/api/webhooks/{service}/{token}"


def _with_defaults(
    service: str, current: dict[str, Any], updates: dict[str, Any]
) -> dict[str, Any]:
    """Seed event lists with their defaults when neither stored nor sent."""
    seeded = dict(updates)
    if "adminEvents" not in current and "adminEvents" not in updates:
        seeded["adminEvents"] = default_admin_events(service)
    if "userEvents" not in current and "userEvents" not in updates:
        seeded["userEvents"] = default_user_events(service)
    return seeded


def masked_webhook_config(db, service: str) -> dict[str, Any]:
    """Webhook settings for display, without the token."""
    validate_webhook_service(service)
    config = get_webhook_config(db, service)
    token = config.get("webhookToken")
    return {
        "service": service,
        "webhookEnabled": bool(config.get("webhookEnabled")),
        "hasToken": bool(token),
        "tokenHint": token_hint(token) if token else None,
        "adminEvents": config.get("adminEvents") or [],
        "userEvents": config.get("userEvents") or [],
    }


def update_webhook_settings(db, service: str, updates: dict[str, Any]) -> dict[str, Any]:
    """
    Apply an admin's changes to enabled flag and event lists.

    Raises:
        NotFoundError: Unknown webhook service.
        ValidationError: Unknown event keys.
    """
    validate_webhook_service(service)
    validate_event_keys(service, updates.get("adminEvents"), "adminEvents")
    validate_event_keys(service, updates.get("userEvents"), "userEvents")

    current = get_webhook_config(db, service)
    if updates.get("webhookEnabled") and not current.get("webhookToken"):
        updates = _with_defaults(service, current, updates)
        updates["webhookToken"] = generate_token()
        logger.info("Generated initial %s webhook token", service)

    update_webhook_config(db, service, updates)
    logger.info("Updated %s webhook settings: %s", service, ", ".join(sorted(updates)))
    return masked_webhook_config(db, service)


def regenerate_webhook_token(db, service: str, base_url: str | None = None) -> dict[str, Any]:
    """
    Issue a new token, invalidating the previous one.

    Event lists are seeded with their defaults the first time.
    """
    validate_webhook_service(service)
    current = get_webhook_config(db, service)

    token = generate_token()
    updates = _with_defaults(service, current, {"webhookToken": token})

    update_webhook_config(db, service, updates)
    logger.info("Regenerated %s webhook token", service)
    return {
        "service": service,
        "webhookToken": token,
        "webhookUrl": webhook_url(db, service, token, base_url),
    }
