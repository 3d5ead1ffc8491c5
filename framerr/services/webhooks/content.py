"""
Notification content for webhook events.

``extract_fields`` pulls the handful of values each producer payload is
known to carry; ``build_content`` turns an event key plus those fields into
a title and message. Both are pure functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from framerr.core.constants import SERVICE_DISPLAY_NAMES
from framerr.core.helpers import get_path
from framerr.services.webhooks.events import EventKey

CONNECTED_MESSAGE = "Successfully connected to Framerr"
HEALTH_ISSUE_MESSAGE = "A health issue was detected"
HEALTH_RESTORED_MESSAGE = "All health issues have been resolved"

OVERSEERR_LABELS = {
    EventKey.REQUEST_PENDING: "Request Pending",
    EventKey.REQUEST_APPROVED: "Request Approved",
    EventKey.REQUEST_AUTO_APPROVED: "Request Auto-Approved",
    EventKey.REQUEST_AVAILABLE: "Now Available",
    EventKey.REQUEST_DECLINED: "Request Declined",
    EventKey.REQUEST_FAILED: "Request Failed",
    EventKey.ISSUE_REPORTED: "Issue Reported",
    EventKey.ISSUE_COMMENT: "New Comment",
    EventKey.ISSUE_RESOLVED: "Issue Resolved",
    EventKey.ISSUE_REOPENED: "Issue Reopened",
    EventKey.TEST: "Test Notification",
}

SONARR_LABELS = {
    EventKey.GRAB: "Episode Grabbed",
    EventKey.DOWNLOAD: "Episode Downloaded",
    EventKey.UPGRADE: "Episode Upgraded",
    EventKey.IMPORT_COMPLETE: "Import Complete",
    EventKey.RENAME: "Episode Renamed",
    EventKey.SERIES_ADD: "Series Added",
    EventKey.SERIES_DELETE: "Series Removed",
    EventKey.EPISODE_FILE_DELETE: "Episode Deleted",
    EventKey.EPISODE_FILE_DELETE_FOR_UPGRADE: "Episode Deleted for Upgrade",
    EventKey.HEALTH_ISSUE: "Health Warning",
    EventKey.HEALTH_RESTORED: "Health Restored",
    EventKey.APPLICATION_UPDATE: "Update Available",
    EventKey.MANUAL_INTERACTION_REQUIRED: "Action Required",
    EventKey.TEST: "Test Notification",
}

RADARR_LABELS = {
    EventKey.GRAB: "Movie Grabbed",
    EventKey.DOWNLOAD: "Movie Downloaded",
    EventKey.UPGRADE: "Movie Upgraded",
    EventKey.IMPORT_COMPLETE: "Import Complete",
    EventKey.RENAME: "Movie Renamed",
    EventKey.MOVIE_ADD: "Movie Added",
    EventKey.MOVIE_DELETE: "Movie Removed",
    EventKey.MOVIE_FILE_DELETE: "Movie Deleted",
    EventKey.MOVIE_FILE_DELETE_FOR_UPGRADE: "Movie Deleted for Upgrade",
    EventKey.HEALTH_ISSUE: "Health Warning",
    EventKey.HEALTH_RESTORED: "Health Restored",
    EventKey.APPLICATION_UPDATE: "Update Available",
    EventKey.MANUAL_INTERACTION_REQUIRED: "Action Required",
    EventKey.TEST: "Test Notification",
}

LABELS = {
    "overseerr": OVERSEERR_LABELS,
    "sonarr": SONARR_LABELS,
    "radarr": RADARR_LABELS,
}


@dataclass(frozen=True)
class NotificationContent:
    title: str
    message: str


@dataclass
class WebhookFields:
    """Values extracted from a producer payload."""

    media_title: str
    username: str | None = None
    request_id: Any = None
    episode_info: str = ""
    year: Any = None
    quality: str | None = None
    message: str | None = None


def extract_fields(service: str, payload: dict[str, Any]) -> WebhookFields:
    """
    Pull the fields used by content building and routing out of a payload.

    Args:
        service: Producer id.
        payload: Decoded webhook body.

    Returns:
        A WebhookFields instance. Missing values fall back to placeholders
        (``Unknown``, ``Unknown Series``, ``Unknown Movie``) or None.
    """
    message = payload.get("message") or None

    if service == "overseerr":
        username = get_path(payload, "request", "requestedBy_username") or get_path(
            payload, "issue", "reportedBy_username"
        )
        request_id = (
            get_path(payload, "request", "id")
            or get_path(payload, "request", "request_id")
            or get_path(payload, "request", "requestId")
        )
        return WebhookFields(
            media_title=payload.get("subject")
            or get_path(payload, "media", "title")
            or "Unknown",
            username=username or None,
            request_id=request_id or None,
            message=message,
        )

    if service == "sonarr":
        episode_info = ""
        episodes = payload.get("episodes") or []
        if isinstance(episodes, list) and episodes and isinstance(episodes[0], dict):
            season = episodes[0].get("seasonNumber")
            episode = episodes[0].get("episodeNumber")
            if season is not None and episode is not None:
                episode_info = f"Season {season} Episode {episode}"
        return WebhookFields(
            media_title=get_path(payload, "series", "title") or "Unknown Series",
            episode_info=episode_info,
            quality=get_path(payload, "release", "quality") or None,
            message=message,
        )

    return WebhookFields(
        media_title=get_path(payload, "movie", "title") or "Unknown Movie",
        year=get_path(payload, "movie", "year") or None,
        quality=get_path(payload, "release", "quality") or None,
        message=message,
    )


def _overseerr_message(key: EventKey | None, fields: WebhookFields) -> str:
    title = fields.media_title
    if key == EventKey.REQUEST_PENDING:
        if fields.username:
            return f'"{title}" requested by {fields.username} is awaiting approval'
        return f'"{title}" is awaiting approval'

    templates = {
        EventKey.REQUEST_APPROVED: 'Your request for "{t}" has been approved',
        EventKey.REQUEST_AUTO_APPROVED: '"{t}" was automatically approved',
        EventKey.REQUEST_AVAILABLE: '"{t}" is now available to watch',
        EventKey.REQUEST_DECLINED: 'Your request for "{t}" was declined',
        EventKey.REQUEST_FAILED: 'Failed to process request for "{t}"',
        EventKey.ISSUE_REPORTED: 'A new issue was reported for "{t}"',
        EventKey.ISSUE_COMMENT: 'New comment on issue for "{t}"',
        EventKey.ISSUE_RESOLVED: 'The issue for "{t}" has been resolved',
        EventKey.ISSUE_REOPENED: 'An issue for "{t}" has been reopened',
    }
    if key in templates:
        return templates[key].format(t=title)
    if key == EventKey.TEST:
        return CONNECTED_MESSAGE
    return fields.message or f'Event received for "{title}"'


def _sonarr_message(key: EventKey | None, fields: WebhookFields) -> str:
    series = fields.media_title
    subject = f"{series} {fields.episode_info}" if fields.episode_info else series

    if key == EventKey.GRAB:
        quality = f" in {fields.quality}" if fields.quality else ""
        return f"{subject} has been grabbed{quality}"
    if key == EventKey.DOWNLOAD:
        return f"{subject} has been downloaded"
    if key == EventKey.UPGRADE:
        return f"{subject} upgraded to {fields.quality or 'higher quality'}"
    if key == EventKey.IMPORT_COMPLETE:
        return f"{subject} import is complete"
    if key == EventKey.SERIES_ADD:
        return f"{series} has been added to the library"
    if key == EventKey.SERIES_DELETE:
        return f"{series} has been removed from the library"
    if key in (EventKey.EPISODE_FILE_DELETE, EventKey.EPISODE_FILE_DELETE_FOR_UPGRADE):
        if fields.episode_info:
            return f"{subject} file has been deleted"
        return f"{series} episode file has been deleted"
    if key == EventKey.HEALTH_ISSUE:
        return fields.message or HEALTH_ISSUE_MESSAGE
    if key == EventKey.HEALTH_RESTORED:
        return HEALTH_RESTORED_MESSAGE
    if key == EventKey.APPLICATION_UPDATE:
        return "A new version of Sonarr is available"
    if key == EventKey.MANUAL_INTERACTION_REQUIRED:
        return f"{series} requires manual intervention"
    if key == EventKey.TEST:
        return CONNECTED_MESSAGE
    return f"Event received for {series}"


def _radarr_message(key: EventKey | None, fields: WebhookFields) -> str:
    movie = fields.media_title
    with_year = f"{movie} ({fields.year})" if fields.year else movie

    if key == EventKey.GRAB:
        quality = f" in {fields.quality}" if fields.quality else ""
        return f"{with_year} has been grabbed{quality}"
    if key == EventKey.DOWNLOAD:
        return f"{with_year} has been downloaded"
    if key == EventKey.UPGRADE:
        return f"{with_year} upgraded to {fields.quality or 'higher quality'}"
    if key == EventKey.IMPORT_COMPLETE:
        return f"{with_year} import is complete"
    if key == EventKey.MOVIE_ADD:
        return f"{with_year} has been added to the library"
    if key == EventKey.MOVIE_DELETE:
        return f"{movie} has been removed from the library"
    if key in (EventKey.MOVIE_FILE_DELETE, EventKey.MOVIE_FILE_DELETE_FOR_UPGRADE):
        return f"{movie} file has been deleted"
    if key == EventKey.HEALTH_ISSUE:
        return fields.message or HEALTH_ISSUE_MESSAGE
    if key == EventKey.HEALTH_RESTORED:
        return HEALTH_RESTORED_MESSAGE
    if key == EventKey.APPLICATION_UPDATE:
        return "A new version of Radarr is available"
    if key == EventKey.MANUAL_INTERACTION_REQUIRED:
        return f"{movie} requires manual intervention"
    if key == EventKey.TEST:
        return CONNECTED_MESSAGE
    return f"Event received for {movie}"


_MESSAGE_BUILDERS = {
    "overseerr": _overseerr_message,
    "sonarr": _sonarr_message,
    "radarr": _radarr_message,
}


def build_content(
    service: str, event_key: EventKey | None, fields: WebhookFields
) -> NotificationContent:
    """
    Build the notification title and message for an event.

    The title is ``"<Service>: <Label>"`` with ``Notification`` as the label
    for keys the service has no label for.
    """
    display = SERVICE_DISPLAY_NAMES.get(service, service.title())
    label = LABELS.get(service, {}).get(event_key, "Notification")
    builder = _MESSAGE_BUILDERS.get(service, _radarr_message)
    return NotificationContent(
        title=f"{display}: {label}", message=builder(event_key, fields)
    )
