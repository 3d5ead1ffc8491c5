"""
Overseerr API client and request approve/decline actions.

Pending-request notifications carry ``{requestId, service, actionable}``
metadata. An admin can act on them from Framerr, which calls Overseerr's
``/api/v1/request/{id}/{approve|decline}`` endpoint and then removes the
notification. Overseerr answering 400/404/409 means someone already handled
the request, so the stale notification is removed as well.
"""

from __future__ import annotations

from typing import Any

import requests

from framerr.core.exceptions import UpstreamError, ValidationError
from framerr.core.logging import get_logger
from framerr.services.notifications import NotificationService
from framerr.services.system_config import get_integration_config

logger = get_logger("overseerr")

REQUEST_ACTIONS = ("approve", "decline")
ALREADY_HANDLED_STATUS_CODES = (400, 404, 409)


class OverseerrClient:
    """Minimal Overseerr API client authenticated with an API key."""

    timeout: int = 10

    def __init__(self, url: str, api_key: str):
        self.url = url.rstrip("/")
        self.api_key = api_key

    def _post(self, path: str, **kwargs: Any) -> requests.Response:
        """Make a POST request with default timeout and auth header."""
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.pop("headers", {})
        headers.setdefault("X-Api-Key", self.api_key)
        headers.setdefault("Content-Type", "application/json")
        return requests.post(f"{self.url}{path}", headers=headers, **kwargs)

    def update_request(self, request_id: Any, action: str) -> requests.Response:
        """
        Approve or decline a media request.

        Raises:
            requests.RequestException: On connection problems or non-2xx.
        """
        resp = self._post(f"/api/v1/request/{request_id}/{action}", json={})
        resp.raise_for_status()
        return resp

    @staticmethod
    def error_message(e: requests.RequestException) -> str:
        """Prefer Overseerr's own error message over the exception text."""
        response = getattr(e, "response", None)
        if response is not None:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                return str(body["message"])
        if isinstance(e, requests.Timeout):
            return "Connection timed out"
        if isinstance(e, requests.ConnectionError):
            return "Could not connect to server"
        return str(e)


def perform_request_action(db, user_id: str, action: str, notification_id: str) -> dict:
    """
    Approve or decline the Overseerr request behind a notification.

    Args:
        db: Database session.
        user_id: Admin acting on their own notification.
        action: ``approve`` or ``decline``.
        notification_id: Notification carrying the request metadata.

    Returns:
        Response body for the API.

    Raises:
        ValidationError: Bad action, notification not actionable, or
            Overseerr not configured.
        NotFoundError: Notification missing or owned by someone else.
        UpstreamError: Overseerr failed with anything but 400/404/409.
    """
    if action not in REQUEST_ACTIONS:
        raise ValidationError('Invalid action. Must be "approve" or "decline"')

    notification = NotificationService.get(db, user_id, notification_id)
    metadata = notification.meta or {}
    if not metadata.get("actionable") or metadata.get("service") != "overseerr":
        raise ValidationError("Notification is not actionable")

    request_id = metadata.get("requestId")
    if not request_id:
        raise ValidationError("No request ID found in notification")

    config = get_integration_config(db, "overseerr")
    if not config.get("enabled") or not config.get("url") or not config.get("apiKey"):
        raise ValidationError("Overseerr integration not configured")

    client = OverseerrClient(config["url"], config["apiKey"])
    logger.info("Calling Overseerr to %s request %s", action, request_id)

    try:
        client.update_request(request_id, action)
    except requests.RequestException as e:
        response = getattr(e, "response", None)
        status = response.status_code if response is not None else None
        message = OverseerrClient.error_message(e)
        logger.warning(
            "Overseerr %s of request %s failed (%s): %s",
            action,
            request_id,
            status,
            message,
        )
        if status in ALREADY_HANDLED_STATUS_CODES:
            NotificationService.delete(db, user_id, notification_id)
            return {
                "success": True,
                "alreadyHandled": True,
                "action": action,
                "requestId": request_id,
                "message": "Request was already handled",
            }
        raise UpstreamError("Overseerr", message) from e

    NotificationService.delete(db, user_id, notification_id)
    logger.info("Request %s %sd via notification %s", request_id, action, notification_id)
    return {
        "success": True,
        "action": action,
        "requestId": request_id,
        "message": f"Request {action}d successfully",
    }
