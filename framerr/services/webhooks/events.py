"""
Event normalisation.

Each producer speaks its own vocabulary. Overseerr says ``media.pending``,
Jellyseerr/Seerr say ``New Movie Request`` and Sonarr says ``Grab``. The
tables below map every known producer string onto one ``EventKey``;
anything not in a table is unknown and the webhook is ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from framerr.core.logging import get_logger

logger = get_logger("webhooks.events")


class EventKey(str, Enum):
    """Internal event vocabulary shared by every producer."""

    # Overseerr / Jellyseerr / Seerr
    REQUEST_PENDING = "requestPending"
    REQUEST_APPROVED = "requestApproved"
    REQUEST_AUTO_APPROVED = "requestAutoApproved"
    REQUEST_AVAILABLE = "requestAvailable"
    REQUEST_DECLINED = "requestDeclined"
    REQUEST_FAILED = "requestFailed"
    ISSUE_REPORTED = "issueReported"
    ISSUE_COMMENT = "issueComment"
    ISSUE_RESOLVED = "issueResolved"
    ISSUE_REOPENED = "issueReopened"
    TEST = "test"

    # Sonarr / Radarr
    GRAB = "grab"
    DOWNLOAD = "download"
    UPGRADE = "upgrade"
    IMPORT_COMPLETE = "importComplete"
    RENAME = "rename"
    SERIES_ADD = "seriesAdd"
    MOVIE_ADD = "movieAdd"
    SERIES_DELETE = "seriesDelete"
    MOVIE_DELETE = "movieDelete"
    EPISODE_FILE_DELETE = "episodeFileDelete"
    EPISODE_FILE_DELETE_FOR_UPGRADE = "episodeFileDeleteForUpgrade"
    MOVIE_FILE_DELETE = "movieFileDelete"
    MOVIE_FILE_DELETE_FOR_UPGRADE = "movieFileDeleteForUpgrade"
    HEALTH_ISSUE = "healthIssue"
    HEALTH_RESTORED = "healthRestored"
    APPLICATION_UPDATE = "applicationUpdate"
    MANUAL_INTERACTION_REQUIRED = "manualInteractionRequired"


OVERSEERR_EVENTS: dict[str, EventKey] = {
    # Overseerr
    "media.pending": EventKey.REQUEST_PENDING,
    "media.approved": EventKey.REQUEST_APPROVED,
    "media.auto_approved": EventKey.REQUEST_AUTO_APPROVED,
    "media.available": EventKey.REQUEST_AVAILABLE,
    "media.declined": EventKey.REQUEST_DECLINED,
    "media.failed": EventKey.REQUEST_FAILED,
    "issue.created": EventKey.ISSUE_REPORTED,
    "issue.comment": EventKey.ISSUE_COMMENT,
    "issue.resolved": EventKey.ISSUE_RESOLVED,
    "issue.reopened": EventKey.ISSUE_REOPENED,
    # Jellyseerr / Seerr
    "New Movie Request": EventKey.REQUEST_PENDING,
    "New Series Request": EventKey.REQUEST_PENDING,
    "New Request": EventKey.REQUEST_PENDING,
    "Movie Request Approved": EventKey.REQUEST_APPROVED,
    "Series Request Approved": EventKey.REQUEST_APPROVED,
    "Request Approved": EventKey.REQUEST_APPROVED,
    "Movie Request Automatically Approved": EventKey.REQUEST_AUTO_APPROVED,
    "Series Request Automatically Approved": EventKey.REQUEST_AUTO_APPROVED,
    "Request Automatically Approved": EventKey.REQUEST_AUTO_APPROVED,
    "Movie Now Available": EventKey.REQUEST_AVAILABLE,
    "Series Now Available": EventKey.REQUEST_AVAILABLE,
    "Now Available": EventKey.REQUEST_AVAILABLE,
    "Movie Available": EventKey.REQUEST_AVAILABLE,
    "Series Available": EventKey.REQUEST_AVAILABLE,
    "Movie Request Declined": EventKey.REQUEST_DECLINED,
    "Series Request Declined": EventKey.REQUEST_DECLINED,
    "Request Declined": EventKey.REQUEST_DECLINED,
    "Movie Request Failed": EventKey.REQUEST_FAILED,
    "Series Request Failed": EventKey.REQUEST_FAILED,
    "Request Failed": EventKey.REQUEST_FAILED,
    "New Issue": EventKey.ISSUE_REPORTED,
    "Issue Created": EventKey.ISSUE_REPORTED,
    "Issue Comment": EventKey.ISSUE_COMMENT,
    "New Issue Comment": EventKey.ISSUE_COMMENT,
    "Issue Resolved": EventKey.ISSUE_RESOLVED,
    "Issue Reopened": EventKey.ISSUE_REOPENED,
    # Test aliases
    "test": EventKey.TEST,
    "Test Notification": EventKey.TEST,
    "TEST_NOTIFICATION": EventKey.TEST,
}

SONARR_EVENTS: dict[str, EventKey] = {
    "Grab": EventKey.GRAB,
    "Download": EventKey.DOWNLOAD,
    "Upgrade": EventKey.UPGRADE,
    "ImportComplete": EventKey.IMPORT_COMPLETE,
    "Rename": EventKey.RENAME,
    "SeriesAdd": EventKey.SERIES_ADD,
    "SeriesDelete": EventKey.SERIES_DELETE,
    "EpisodeFileDelete": EventKey.EPISODE_FILE_DELETE,
    "EpisodeFileDeleteForUpgrade": EventKey.EPISODE_FILE_DELETE_FOR_UPGRADE,
    "Health": EventKey.HEALTH_ISSUE,
    "HealthRestored": EventKey.HEALTH_RESTORED,
    "ApplicationUpdate": EventKey.APPLICATION_UPDATE,
    "ManualInteractionRequired": EventKey.MANUAL_INTERACTION_REQUIRED,
    "Test": EventKey.TEST,
}

RADARR_EVENTS: dict[str, EventKey] = {
    "Grab": EventKey.GRAB,
    "Download": EventKey.DOWNLOAD,
    "Upgrade": EventKey.UPGRADE,
    "ImportComplete": EventKey.IMPORT_COMPLETE,
    "Rename": EventKey.RENAME,
    "MovieAdded": EventKey.MOVIE_ADD,
    "MovieDelete": EventKey.MOVIE_DELETE,
    "MovieFileDelete": EventKey.MOVIE_FILE_DELETE,
    "MovieFileDeleteForUpgrade": EventKey.MOVIE_FILE_DELETE_FOR_UPGRADE,
    "Health": EventKey.HEALTH_ISSUE,
    "HealthRestored": EventKey.HEALTH_RESTORED,
    "ApplicationUpdate": EventKey.APPLICATION_UPDATE,
    "ManualInteractionRequired": EventKey.MANUAL_INTERACTION_REQUIRED,
    "Test": EventKey.TEST,
}

# Fields an Overseerr-family payload may carry the event name in, in order
OVERSEERR_EVENT_FIELDS = ("event", "notification_type", "notificationType", "type")

# Keys delivered to admins, to the requesting user, or to both
ADMIN_EVENTS = frozenset(
    {EventKey.REQUEST_PENDING, EventKey.ISSUE_REPORTED, EventKey.ISSUE_REOPENED}
)
USER_EVENTS = frozenset(
    {
        EventKey.REQUEST_APPROVED,
        EventKey.REQUEST_AUTO_APPROVED,
        EventKey.REQUEST_AVAILABLE,
        EventKey.REQUEST_DECLINED,
        EventKey.ISSUE_RESOLVED,
        EventKey.ISSUE_COMMENT,
    }
)
BOTH_EVENTS = frozenset({EventKey.REQUEST_FAILED})


def _event_table(service: str) -> dict[str, EventKey] | None:
    return {
        "overseerr": OVERSEERR_EVENTS,
        "sonarr": SONARR_EVENTS,
        "radarr": RADARR_EVENTS,
    }.get(service)


def raw_event_name(service: str, payload: dict[str, Any]) -> str | None:
    """The producer's own event string, before normalisation."""
    if service == "overseerr":
        for field in OVERSEERR_EVENT_FIELDS:
            value = payload.get(field)
            if value:
                return str(value)
        return None
    value = payload.get("eventType")
    return str(value) if value else None


def normalize_event(service: str, payload: dict[str, Any]) -> EventKey | None:
    """
    Map a producer payload onto an internal event key.

    Args:
        service: Producer id (``overseerr``, ``sonarr`` or ``radarr``).
        payload: Decoded webhook body.

    Returns:
        The matching EventKey, or None when the service or event is unknown.
    """
    table = _event_table(service)
    if table is None or not isinstance(payload, dict):
        return None

    raw = raw_event_name(service, payload)
    if raw is None:
        return None

    key = table.get(raw)
    if key is None:
        logger.debug("Unknown %s event: %s", service, raw)
        return None

    if key == EventKey.HEALTH_ISSUE and payload.get("isHealthRestored"):
        return EventKey.HEALTH_RESTORED
    return key
