"""Tests for Overseerr request actions."""

from unittest.mock import MagicMock, patch

import requests

from framerr.models import Notification
from framerr.services.notifications import NotificationService
from framerr.services.overseerr import OverseerrClient
from framerr.services.system_config import update_system_config

PENDING_METADATA = {
    "requestId": 42,
    "service": "overseerr",
    "actionable": True,
    "mediaTitle": "Dune",
}


def _configure_overseerr(db):
    update_system_config(
        db,
        {
            "integrations": {
                "overseerr": {
                    "enabled": True,
                    "url": "http://overseerr:5055/",
                    "apiKey": "api-key",
                }
            }
        },
    )


def _pending(db, user, metadata=PENDING_METADATA):
    return NotificationService.create(
        db,
        user_id=user.id,
        type="info",
        title="Overseerr: Request Pending",
        message='"Dune" is awaiting approval',
        metadata=metadata,
    )


def _http_error(status_code, body=None):
    response = MagicMock(status_code=status_code)
    response.json.return_value = body or {}
    return requests.HTTPError(f"{status_code} error", response=response)


def _gone(db, notification_id):
    db.expire_all()
    return db.get(Notification, notification_id) is None


class TestOverseerrClient:
    """Tests for OverseerrClient."""

    def test_update_request(self):
        client = OverseerrClient("http://overseerr:5055/", "key")
        with patch("framerr.services.overseerr.requests.post") as post:
            post.return_value.raise_for_status.return_value = None
            client.update_request(7, "approve")

        url = post.call_args.args[0]
        assert url == "http://overseerr:5055/api/v1/request/7/approve"
        assert post.call_args.kwargs["headers"]["X-Api-Key"] == "key"
        assert post.call_args.kwargs["timeout"] == 10

    def test_error_message_prefers_body(self):
        error = _http_error(500, {"message": "Request not found"})
        assert OverseerrClient.error_message(error) == "Request not found"

    def test_error_message_timeout(self):
        assert OverseerrClient.error_message(requests.Timeout()) == "Connection timed out"


class TestRequestActionsApi:
    """Tests for /api/request-actions/overseerr."""

    def test_approve(self, admin_client, db_session, admin_user):
        _configure_overseerr(db_session)
        n = _pending(db_session, admin_user)

        with patch("framerr.services.overseerr.requests.post") as post:
            post.return_value.raise_for_status.return_value = None
            resp = admin_client.post(f"/api/request-actions/overseerr/approve/{n.id}")

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "action": "approve",
            "requestId": 42,
            "message": "Request approved successfully",
        }
        assert _gone(db_session, n.id)

    def test_already_handled(self, admin_client, db_session, admin_user):
        _configure_overseerr(db_session)
        n = _pending(db_session, admin_user)

        with patch("framerr.services.overseerr.requests.post") as post:
            post.return_value.raise_for_status.side_effect = _http_error(409)
            resp = admin_client.post(f"/api/request-actions/overseerr/decline/{n.id}")

        assert resp.status_code == 200
        assert resp.json()["alreadyHandled"] is True
        assert _gone(db_session, n.id)

    def test_upstream_failure(self, admin_client, db_session, admin_user):
        _configure_overseerr(db_session)
        n = _pending(db_session, admin_user)

        with patch("framerr.services.overseerr.requests.post") as post:
            post.return_value.raise_for_status.side_effect = _http_error(
                500, {"message": "Internal Server Error"}
            )
            resp = admin_client.post(f"/api/request-actions/overseerr/approve/{n.id}")

        assert resp.status_code == 502
        assert resp.json()["error"] == "Overseerr error: Internal Server Error"
        assert not _gone(db_session, n.id)

    def test_connection_error(self, admin_client, db_session, admin_user):
        _configure_overseerr(db_session)
        n = _pending(db_session, admin_user)

        with patch(
            "framerr.services.overseerr.requests.post",
            side_effect=requests.ConnectionError("refused"),
        ):
            resp = admin_client.post(f"/api/request-actions/overseerr/approve/{n.id}")

        assert resp.status_code == 502
        assert resp.json()["error"] == "Overseerr error: Could not connect to server"

    def test_invalid_action(self, admin_client, db_session, admin_user):
        n = _pending(db_session, admin_user)
        resp = admin_client.post(f"/api/request-actions/overseerr/delete/{n.id}")
        assert resp.status_code == 400

    def test_not_actionable(self, admin_client, db_session, admin_user):
        _configure_overseerr(db_session)
        n = _pending(db_session, admin_user, metadata=None)
        resp = admin_client.post(f"/api/request-actions/overseerr/approve/{n.id}")
        assert resp.status_code == 400
        assert resp.json()["error"] == "Notification is not actionable"

    def test_not_configured(self, admin_client, db_session, admin_user):
        n = _pending(db_session, admin_user)
        resp = admin_client.post(f"/api/request-actions/overseerr/approve/{n.id}")
        assert resp.status_code == 400
        assert resp.json()["error"] == "Overseerr integration not configured"

    def test_other_admins_notification(self, admin_client, db_session, make_user):
        other = make_user("admin2", admin=True)
        n = _pending(db_session, other)
        resp = admin_client.post(f"/api/request-actions/overseerr/approve/{n.id}")
        assert resp.status_code == 404

    def test_requires_admin(self, user_client, db_session, regular_user):
        n = _pending(db_session, regular_user)
        resp = user_client.post(f"/api/request-actions/overseerr/approve/{n.id}")
        assert resp.status_code == 403
