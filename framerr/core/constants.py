"""
Shared constants for the application.
"""

# Services that can push webhooks to Framerr
WEBHOOK_SERVICES = ("overseerr", "sonarr", "radarr")

# Service id -> display name used in notification titles
SERVICE_DISPLAY_NAMES = {
    "overseerr": "Overseerr",
    "sonarr": "Sonarr",
    "radarr": "Radarr",
}

# Service id -> seeded system icon id
SYSTEM_ICONS = {
    "overseerr": "system-overseerr",
    "radarr": "system-radarr",
    "sonarr": "system-sonarr",
    "lidarr": "system-lidarr",
    "prowlarr": "system-prowlarr",
    "plex": "system-plex",
    "tautulli": "system-tautulli",
    "qbittorrent": "system-qbittorrent",
    "homeassistant": "system-homeassistant",
    "home-assistant": "system-homeassistant",
}

# Notification severities
NOTIFICATION_TYPES = ("success", "error", "warning", "info")

# User groups
GROUP_ADMIN = "admin"
GROUP_USER = "user"
GROUP_GUEST = "guest"
USER_GROUPS = (GROUP_ADMIN, GROUP_USER, GROUP_GUEST)

# Session cookie
SESSION_COOKIE_NAME = "framerr_session"

# SSE heartbeat interval in seconds
SSE_HEARTBEAT_SECONDS = 30


def get_system_icon_id(service: str) -> str | None:
    """Return the seeded icon id for a service, or None when there isn't one."""
    return SYSTEM_ICONS.get(service.lower())
