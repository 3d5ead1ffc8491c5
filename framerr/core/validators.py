"""Validation functions."""

from framerr.core.constants import NOTIFICATION_TYPES, WEBHOOK_SERVICES
from framerr.core.exceptions import NotFoundError, ValidationError


def validate_notification_type(notification_type: str) -> None:
    """
    Validate a notification severity.

    Args:
        notification_type: One of success, error, warning or info.

    Raises:
        ValidationError: If the type is not recognised.
    """
    if notification_type not in NOTIFICATION_TYPES:
        raise ValidationError(
            f"Invalid notification type: {notification_type}. "
            f"Valid options: {list(NOTIFICATION_TYPES)}"
        )


def validate_webhook_service(service: str) -> None:
    """
    Check that a service accepts webhooks.

    Raises:
        NotFoundError: If the service is not a webhook producer.
    """
    if service not in WEBHOOK_SERVICES:
        raise NotFoundError("Webhook service", service)


def validate_event_keys(service: str, events: list[str] | None, field: str) -> None:
    """
    Validate a list of event keys against what a service can produce.

    Args:
        service: Webhook producer id.
        events: Event keys to check.
        field: Name of the field being validated (used in the message).

    Raises:
        ValidationError: If any key is unknown for the service.
    """
    from framerr.schemas.webhooks import configurable_events

    if not events:
        return

    valid = configurable_events(service)
    invalid = [event for event in events if event not in valid]
    if invalid:
        raise ValidationError(
            f"Invalid {field} for {service}: {invalid}. Valid events: {valid}"
        )


def validate_retention_days(days: int) -> None:
    """
    Validate the notification retention window.

    Raises:
        ValidationError: If days is outside 0-365.
    """
    if days < 0 or days > 365:
        raise ValidationError("retention_days must be between 0 and 365")
