"""
Recipient resolution for webhook events.

External usernames are matched to Framerr users using a cascade:

1. Manual Overseerr link (preferences ``linkedAccounts.overseerr.username``)
2. Plex SSO link (``linked_accounts`` row for service ``plex``)
3. Framerr username

Every comparison is case-insensitive and ignores surrounding whitespace.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func

from framerr.core.helpers import get_path
from framerr.core.logging import get_logger
from framerr.models import LinkedAccount, User, UserConfig

logger = get_logger("webhooks.resolver")


def _normalise(value: Any) -> str:
    return str(value).strip().lower() if value else ""


def _find_by_manual_link(db, username: str) -> User | None:
    for config in db.query(UserConfig).all():
        linked = get_path(config.preferences, "linkedAccounts", "overseerr", "username")
        if _normalise(linked) == username:
            return db.get(User, config.user_id)
    return None


def _find_by_plex_link(db, username: str) -> User | None:
    account = (
        db.query(LinkedAccount)
        .filter(
            LinkedAccount.service == "plex",
            func.lower(LinkedAccount.external_username) == username,
        )
        .first()
    )
    return db.get(User, account.user_id) if account else None


def resolve_user_by_username(db, external_username: str | None) -> User | None:
    """
    Find the Framerr user behind an external (Overseerr) username.

    Args:
        db: Database session.
        external_username: Username as sent by the producer.

    Returns:
        The matched User, or None when no strategy matches.
    """
    username = _normalise(external_username)
    if not username:
        return None

    strategies = (
        ("manual Overseerr link", _find_by_manual_link),
        ("Plex SSO link", _find_by_plex_link),
        ("Framerr username", User.find_by_username),
    )
    for label, strategy in strategies:
        user = strategy(db, username)
        if user is not None:
            logger.info("Matched %s to user %s via %s", external_username, user.id, label)
            return user

    logger.debug("No user match for %s", external_username)
    return None


def admins_with_receive_unmatched(db) -> list[User]:
    """Admins whose ``notifications.receiveUnmatched`` is not switched off."""
    admins = []
    for admin in User.admins(db):
        preferences = UserConfig.get_preferences(db, admin.id)
        if get_path(preferences, "notifications", "receiveUnmatched", default=True):
            admins.append(admin)
    return admins


def user_wants_event(
    db,
    user: User,
    service: str,
    event_key: str,
    webhook_config: dict[str, Any] | None,
) -> bool:
    """
    Check whether a user should receive an event.

    Admins receive the keys listed in the integration's ``adminEvents``.
    Other users need the key in ``userEvents``, the integration not disabled
    in their preferences, and, when they picked specific events, the key in
    that list.
    """
    webhook_config = webhook_config or {}
    key = str(getattr(event_key, "value", event_key))

    if user.is_admin:
        return key in (webhook_config.get("adminEvents") or [])

    if key not in (webhook_config.get("userEvents") or []):
        return False

    preferences = UserConfig.get_preferences(db, user.id)
    settings = get_path(preferences, "notifications", "integrations", service, default={})
    if not isinstance(settings, dict):
        return True
    if settings.get("enabled") is False:
        return False

    events = settings.get("events")
    if not events:
        return True
    return key in events
