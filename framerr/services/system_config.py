"""
System configuration service.

The configuration is a nested document assembled from the ``system_config``
table: each top-level section is stored as a JSON row and deep-merged over
``DEFAULT_CONFIG`` when read. Updates are deep-merged into the stored
sections, so a partial update such as

    {"integrations": {"sonarr": {"webhookConfig": {"webhookEnabled": True}}}}

keeps every sibling key (``webhookToken``, ``adminEvents`` ...) intact.
"""

from __future__ import annotations

import copy
from typing import Any

from framerr.core.exceptions import ValidationError
from framerr.core.helpers import deep_merge, get_path
from framerr.core.logging import get_logger
from framerr.models.settings import Settings

logger = get_logger("services.system_config")

DEFAULT_CONFIG: dict[str, Any] = {
    "server": {"name": "Framerr"},
    "auth": {
        "local": {"enabled": True},
        "proxy": {
            "enabled": False,
            "headerName": "",
            "emailHeaderName": "",
            "whitelist": [],
            "overrideLogout": False,
            "logoutUrl": "",
        },
        "session": {"timeout": 86_400_000},
    },
    "integrations": {
        "plex": {"enabled": False},
        "sonarr": {"enabled": False},
        "radarr": {"enabled": False},
        "overseerr": {"enabled": False},
        "qbittorrent": {"enabled": False},
    },
    "groups": [
        {
            "id": "admin",
            "name": "Administrators",
            "description": "Full system access",
            "permissions": ["*"],
            "locked": True,
        },
        {
            "id": "user",
            "name": "Users",
            "description": "Personal customization",
            "permissions": ["view_dashboard", "manage_widgets"],
            "locked": True,
        },
        {
            "id": "guest",
            "name": "Guests",
            "description": "View only",
            "permissions": ["view_dashboard"],
            "locked": True,
        },
    ],
    "defaultGroup": "user",
    "webhookBaseUrl": "",
    "vapidKeys": {},
    "webPushEnabled": True,
}

# Sections that cannot be changed through update_system_config()
IMMUTABLE_SECTIONS = ("groups",)


def get_system_config(db) -> dict[str, Any]:
    """Return the full configuration (defaults deep-merged with stored rows)."""
    stored = Settings.all_json(db)
    sections = {key: value for key, value in stored.items() if key in DEFAULT_CONFIG}
    return deep_merge(DEFAULT_CONFIG, sections)


def update_system_config(db, updates: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge ``updates`` into the stored configuration.

    Args:
        db: Database session.
        updates: Partial configuration keyed by top-level section.

    Returns:
        The full configuration after the update.

    Raises:
        ValidationError: For unknown or immutable sections.
    """
    for section in updates:
        if section in IMMUTABLE_SECTIONS:
            raise ValidationError(
                "Permission groups cannot be modified. "
                "Groups are locked to: admin, user, guest"
            )
        if section not in DEFAULT_CONFIG:
            raise ValidationError(f"Unknown configuration section: {section}")

    for section, value in updates.items():
        current = Settings.get_json(db, section)
        if isinstance(value, dict) and isinstance(current, dict):
            value = deep_merge(current, value)
        Settings.set_json(db, section, value, commit=False)

    db.commit()
    logger.info("System config updated: %s", ", ".join(sorted(updates)))
    return get_system_config(db)


def get_integration_config(db, service: str) -> dict[str, Any]:
    """Configuration for one integration (empty dict when unknown)."""
    config = get_system_config(db)
    return copy.deepcopy(get_path(config, "integrations", service, default={}))


def get_webhook_config(db, service: str) -> dict[str, Any]:
    """The ``webhookConfig`` block of an integration (empty dict when unset)."""
    return get_integration_config(db, service).get("webhookConfig") or {}


def update_webhook_config(db, service: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``updates`` into an integration's ``webhookConfig``."""
    update_system_config(
        db, {"integrations": {service: {"webhookConfig": updates}}}
    )
    return get_webhook_config(db, service)
