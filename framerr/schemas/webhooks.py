"""
Webhook schemas and the configurable event catalogue.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from framerr.services.webhooks.events import EventKey


class WebhookEventConfig(BaseModel):
    """Definition for an event admins can switch on per integration."""

    event: EventKey
    label: str
    default_admin: bool = False
    default_user: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.event.value,
            "label": self.label,
            "defaultAdmin": self.default_admin,
            "defaultUser": self.default_user,
        }


def _event(event, label, admin=False, user=False) -> WebhookEventConfig:
    return WebhookEventConfig(
        event=event, label=label, default_admin=admin, default_user=user
    )


OVERSEERR_EVENT_CONFIGS = [
    _event(EventKey.REQUEST_PENDING, "Request Pending Approval", admin=True),
    _event(EventKey.REQUEST_AUTO_APPROVED, "Request Auto-Approved", admin=True, user=True),
    _event(EventKey.REQUEST_APPROVED, "Request Approved", admin=True, user=True),
    _event(EventKey.REQUEST_DECLINED, "Request Declined", admin=True, user=True),
    _event(EventKey.REQUEST_AVAILABLE, "Media Available", admin=True, user=True),
    _event(EventKey.REQUEST_FAILED, "Processing Failed", admin=True),
    _event(EventKey.ISSUE_REPORTED, "Issue Reported", admin=True),
    _event(EventKey.ISSUE_COMMENT, "Issue Comment"),
    _event(EventKey.ISSUE_RESOLVED, "Issue Resolved", admin=True),
    _event(EventKey.ISSUE_REOPENED, "Issue Reopened"),
]

_ARR_COMMON = [
    _event(EventKey.HEALTH_ISSUE, "Health Issue", admin=True),
    _event(EventKey.HEALTH_RESTORED, "Health Restored", admin=True),
    _event(EventKey.APPLICATION_UPDATE, "Application Update", admin=True),
    _event(EventKey.MANUAL_INTERACTION_REQUIRED, "Manual Interaction Required", admin=True),
]

SONARR_EVENT_CONFIGS = [
    _event(EventKey.GRAB, "Episode Grabbed"),
    _event(EventKey.DOWNLOAD, "Episode Downloaded", admin=True),
    _event(EventKey.UPGRADE, "Episode Upgraded"),
    _event(EventKey.IMPORT_COMPLETE, "Import Complete"),
    _event(EventKey.RENAME, "Series Renamed"),
    _event(EventKey.SERIES_ADD, "Series Added", admin=True),
    _event(EventKey.SERIES_DELETE, "Series Deleted", admin=True),
    _event(EventKey.EPISODE_FILE_DELETE, "Episode File Deleted"),
    _event(EventKey.EPISODE_FILE_DELETE_FOR_UPGRADE, "Episode Deleted for Upgrade"),
    *_ARR_COMMON,
]

RADARR_EVENT_CONFIGS = [
    _event(EventKey.GRAB, "Movie Grabbed"),
    _event(EventKey.DOWNLOAD, "Movie Downloaded", admin=True),
    _event(EventKey.UPGRADE, "Movie Upgraded"),
    _event(EventKey.IMPORT_COMPLETE, "Import Complete"),
    _event(EventKey.RENAME, "Movie Renamed"),
    _event(EventKey.MOVIE_ADD, "Movie Added", admin=True),
    _event(EventKey.MOVIE_DELETE, "Movie Deleted", admin=True),
    _event(EventKey.MOVIE_FILE_DELETE, "Movie File Deleted"),
    _event(EventKey.MOVIE_FILE_DELETE_FOR_UPGRADE, "Movie File Deleted for Upgrade"),
    *_ARR_COMMON,
]

INTEGRATION_EVENTS: dict[str, list[WebhookEventConfig]] = {
    "overseerr": OVERSEERR_EVENT_CONFIGS,
    "sonarr": SONARR_EVENT_CONFIGS,
    "radarr": RADARR_EVENT_CONFIGS,
}


def configurable_events(service: str) -> list[str]:
    """Event keys an admin can enable for a service."""
    return [config.event.value for config in INTEGRATION_EVENTS.get(service, [])]


def default_admin_events(service: str) -> list[str]:
    return [c.event.value for c in INTEGRATION_EVENTS.get(service, []) if c.default_admin]


def default_user_events(service: str) -> list[str]:
    return [c.event.value for c in INTEGRATION_EVENTS.get(service, []) if c.default_user]


class WebhookConfigUpdate(BaseModel):
    """Request body for updating an integration's webhook settings."""

    webhook_enabled: bool | None = Field(None, alias="webhookEnabled")
    admin_events: list[str] | None = Field(None, alias="adminEvents")
    user_events: list[str] | None = Field(None, alias="userEvents")

    model_config = {"populate_by_name": True}

    def to_config(self) -> dict[str, Any]:
        """Only the fields that were sent, keyed the way they are stored."""
        return self.model_dump(by_alias=True, exclude_none=True)
