"""Tests for the webhook receiver endpoints."""

from unittest.mock import patch

from framerr.models import Notification
from framerr.services.system_config import update_webhook_config
from framerr.services.webhooks import handle_webhook, validate_token
from tests.conftest import WEBHOOK_TOKEN

PENDING_PAYLOAD = {
    "notification_type": "MEDIA_PENDING",
    "event": "New Movie Request",
    "subject": "Dune (2021)",
    "request": {"request_id": "42", "requestedBy_username": "alice"},
}


def _url(service, token=WEBHOOK_TOKEN):
    return f"/api/webhooks/{service}/{token}"


def _all_notifications(db):
    db.expire_all()
    return db.query(Notification).all()


class TestWebhookAuth:
    """Tests for token validation."""

    def test_disabled_webhook_is_rejected(self, client, db_session, admin_user):
        resp = client.post(_url("overseerr"), json={"event": "test"})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Webhook not enabled"}

    def test_disabled_webhook_rejects_correct_token(
        self, client, db_session, enable_webhook, admin_user
    ):
        enable_webhook("sonarr", admin_events=["test"])
        update_webhook_config(db_session, "sonarr", {"webhookEnabled": False})

        resp = client.post(_url("sonarr"), json={"eventType": "Test"})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Webhook not enabled"}
        assert _all_notifications(db_session) == []

    def test_non_string_stored_token_is_rejected(self, client, db_session, admin_user):
        update_webhook_config(
            db_session, "radarr", {"webhookEnabled": True, "webhookToken": 12345}
        )
        resp = client.post(_url("radarr", "12345"), json={"eventType": "Test"})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid token"}

    def test_wrong_token_is_rejected(self, client, enable_webhook, admin_user):
        enable_webhook("overseerr")
        resp = client.post(_url("overseerr", "nope"), json={"event": "test"})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid token"}

    def test_empty_token_is_rejected(self, client, enable_webhook):
        enable_webhook("sonarr")
        resp = client.post("/api/webhooks/sonarr/", json={"eventType": "Test"})
        assert resp.status_code == 401

    def test_token_for_other_service_is_rejected(self, client, enable_webhook):
        enable_webhook("sonarr", token="sonarr-token")
        enable_webhook("radarr", token="radarr-token")
        resp = client.post(_url("radarr", "sonarr-token"), json={"eventType": "Test"})
        assert resp.status_code == 401

    def test_validate_token_returns_config(self, db_session, enable_webhook):
        enable_webhook("overseerr", admin_events=["test"])
        validation = validate_token(db_session, "overseerr", WEBHOOK_TOKEN)
        assert validation.valid
        assert validation.webhook_config["adminEvents"] == ["test"]


class TestWebhookRequests:
    """Tests for request handling."""

    def test_unknown_service_is_404(self, client):
        resp = client.post("/api/webhooks/lidarr/abc", json={"eventType": "Test"})
        assert resp.status_code == 404

    def test_malformed_json_is_400(self, client, enable_webhook):
        enable_webhook("overseerr")
        resp = client.post(
            _url("overseerr"),
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Validation error"

    def test_unknown_event_is_ignored(self, client, db_session, enable_webhook, admin_user):
        enable_webhook("overseerr", admin_events=["requestPending"])
        resp = client.post(_url("overseerr"), json={"event": "media.exploded"})
        assert resp.status_code == 200
        assert resp.json() == {"status": "ignored", "reason": "Unknown event type"}
        assert _all_notifications(db_session) == []

    def test_test_event_notifies_admins(self, client, db_session, enable_webhook, admin_user):
        enable_webhook("radarr", admin_events=[])
        resp = client.post(_url("radarr"), json={"eventType": "Test"})
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "notificationsSent": 1}
        (n,) = _all_notifications(db_session)
        assert n.title == "[Test] Radarr: Test Notification"
        assert n.message == "Successfully connected to Framerr"

    def test_pending_request_end_to_end(
        self, client, db_session, enable_webhook, admin_user, regular_user
    ):
        enable_webhook("overseerr", admin_events=["requestPending"], user_events=[])
        resp = client.post(_url("overseerr"), json=PENDING_PAYLOAD)

        assert resp.status_code == 200
        assert resp.json()["notificationsSent"] == 1
        (n,) = _all_notifications(db_session)
        assert n.user_id == admin_user.id
        assert n.title == "Overseerr: Request Pending"
        assert n.message == '"Dune (2021)" requested by alice is awaiting approval'
        assert n.meta == {
            "requestId": "42",
            "service": "overseerr",
            "actionable": True,
            "mediaTitle": "Dune (2021)",
        }

    def test_pending_request_with_numeric_id(
        self, client, db_session, enable_webhook, make_user, regular_user
    ):
        first = make_user("admin1", admin=True)
        second = make_user("admin2", admin=True)
        enable_webhook("overseerr", admin_events=["requestPending"], user_events=[])
        payload = {
            "event": "media.pending",
            "subject": "Dune Part Two",
            "request": {"requestedBy_username": "alice", "id": 42},
        }

        resp = client.post(_url("overseerr"), json=payload)

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "notificationsSent": 2}
        notifications = _all_notifications(db_session)
        assert sorted(n.user_id for n in notifications) == sorted([first.id, second.id])
        for n in notifications:
            assert n.title == "Overseerr: Request Pending"
            assert n.message == '"Dune Part Two" requested by alice is awaiting approval'
            assert n.meta == {
                "requestId": 42,
                "service": "overseerr",
                "actionable": True,
                "mediaTitle": "Dune Part Two",
            }

    def test_failed_request_by_admin_notifies_as_user_and_admin(
        self, client, db_session, enable_webhook, make_user
    ):
        requester = make_user("admin", admin=True)
        other = make_user("admin2", admin=True)
        enable_webhook(
            "overseerr", admin_events=["requestFailed"], user_events=["requestFailed"]
        )
        payload = {
            "event": "media.failed",
            "subject": "Dune Part Two",
            "request": {"requestedBy_username": "admin", "id": 7},
        }

        resp = client.post(_url("overseerr"), json=payload)

        assert resp.json() == {"status": "ok", "notificationsSent": 3}
        user_ids = [n.user_id for n in _all_notifications(db_session)]
        assert user_ids.count(requester.id) == 2
        assert user_ids.count(other.id) == 1

    def test_available_goes_to_requester(
        self, client, db_session, enable_webhook, admin_user, regular_user
    ):
        enable_webhook(
            "overseerr", admin_events=["requestAvailable"], user_events=["requestAvailable"]
        )
        payload = {
            "event": "Movie Now Available",
            "subject": "Dune (2021)",
            "request": {"requestedBy_username": "alice"},
        }
        resp = client.post(_url("overseerr"), json=payload)

        assert resp.json()["notificationsSent"] == 1
        (n,) = _all_notifications(db_session)
        assert n.user_id == regular_user.id
        assert n.meta is None

    def test_sonarr_is_admin_only(
        self, client, db_session, enable_webhook, admin_user, regular_user
    ):
        enable_webhook("sonarr", admin_events=["download"], user_events=["download"])
        payload = {
            "eventType": "Download",
            "series": {"title": "Severance"},
            "episodes": [{"seasonNumber": 2, "episodeNumber": 1}],
        }
        resp = client.post(_url("sonarr"), json=payload)

        assert resp.json()["notificationsSent"] == 1
        (n,) = _all_notifications(db_session)
        assert n.user_id == admin_user.id
        assert n.icon_id == "system-sonarr"

    def test_duplicate_delivery_creates_duplicates(
        self, client, db_session, enable_webhook, admin_user
    ):
        enable_webhook("overseerr", admin_events=["requestPending"])
        client.post(_url("overseerr"), json=PENDING_PAYLOAD)
        client.post(_url("overseerr"), json=PENDING_PAYLOAD)
        assert len(_all_notifications(db_session)) == 2

    def test_processing_failure_is_500(self, client, enable_webhook, admin_user):
        enable_webhook("overseerr", admin_events=["requestPending"])
        with patch(
            "framerr.services.webhooks.receiver.route_notification",
            side_effect=RuntimeError("boom"),
        ):
            resp = client.post(_url("overseerr"), json=PENDING_PAYLOAD)
        assert resp.status_code == 500
        assert resp.json() == {"error": "Processing failed"}


class TestHandleWebhook:
    """Tests for handle_webhook without HTTP."""

    def test_reports_failed_recipients(self, db_session, enable_webhook, make_user):
        make_user("admin1", admin=True)
        make_user("admin2", admin=True)
        enable_webhook("overseerr", admin_events=["requestPending"])

        with patch(
            "framerr.services.webhooks.routing.NotificationService.create",
            side_effect=RuntimeError("insert failed"),
        ):
            status, body = handle_webhook(
                db_session, "overseerr", WEBHOOK_TOKEN, PENDING_PAYLOAD
            )

        assert status == 200
        assert body == {"status": "ok", "notificationsSent": 0, "notificationsFailed": 2}

    def test_non_dict_payload_is_ignored(self, db_session, enable_webhook):
        enable_webhook("sonarr")
        status, body = handle_webhook(db_session, "sonarr", WEBHOOK_TOKEN, ["Download"])
        assert status == 200
        assert body["status"] == "ignored"
