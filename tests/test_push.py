"""Tests for Web Push subscriptions and delivery."""

from unittest.mock import MagicMock, patch

import pytest
from pywebpush import WebPushException

from framerr.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from framerr.models import PushSubscription
from framerr.services.notifications import WebPushService
from framerr.services.system_config import get_system_config, update_system_config

SUBSCRIPTION = {
    "endpoint": "https://push.example.com/send/abc",
    "keys": {"p256dh": "BPublicKey", "auth": "authsecret"},
}


def _push_error(status_code):
    response = MagicMock(status_code=status_code)
    return WebPushException("push failed", response=response)


class TestVapidKeys:
    """Tests for VAPID key management."""

    def test_keys_are_generated_once(self, db_session):
        first = WebPushService.get_public_key(db_session)
        second = WebPushService.get_public_key(db_session)
        assert first == second
        keys = get_system_config(db_session)["vapidKeys"]
        assert keys["publicKey"] == first
        assert "PRIVATE KEY" in keys["privateKey"]

    def test_stored_key_is_reloaded(self, db_session):
        WebPushService.get_public_key(db_session)
        vapid = WebPushService.get_vapid(db_session)
        assert vapid.private_key is not None


class TestSubscriptions:
    """Tests for subscribe/list/delete."""

    def test_subscribe(self, db_session, regular_user):
        record = WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION, "Phone")
        assert record.id is not None
        assert record.device_name == "Phone"
        assert WebPushService.list_subscriptions(db_session, regular_user.id) == [record]

    def test_resubscribe_same_endpoint_updates(self, db_session, regular_user, admin_user):
        WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION)
        WebPushService.subscribe(db_session, admin_user.id, SUBSCRIPTION, "Laptop")
        assert db_session.query(PushSubscription).count() == 1
        assert WebPushService.list_subscriptions(db_session, regular_user.id) == []

    def test_missing_keys(self, db_session, regular_user):
        with pytest.raises(ValidationError):
            WebPushService.subscribe(
                db_session, regular_user.id, {"endpoint": SUBSCRIPTION["endpoint"]}
            )

    def test_missing_auth_key(self, db_session, regular_user):
        subscription = {"endpoint": "https://x", "keys": {"p256dh": "abc"}}
        with pytest.raises(ValidationError):
            WebPushService.subscribe(db_session, regular_user.id, subscription)

    def test_disabled_by_admin(self, db_session, regular_user):
        update_system_config(db_session, {"webPushEnabled": False})
        with pytest.raises(PermissionDeniedError):
            WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION)

    def test_delete_other_users_subscription(self, db_session, regular_user, admin_user):
        record = WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION)
        with pytest.raises(NotFoundError):
            WebPushService.delete_subscription(db_session, admin_user.id, record.id)


class TestSend:
    """Tests for WebPushService.send."""

    def test_no_subscriptions(self, db_session, regular_user):
        with patch("framerr.services.notifications.push.webpush") as webpush:
            assert WebPushService.send(db_session, regular_user.id, {"title": "x"}) == 0
        webpush.assert_not_called()

    def test_sends_payload(self, db_session, regular_user):
        WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION)
        notification = {"id": "n1", "title": "Hi", "message": "There", "type": "info"}

        with patch("framerr.services.notifications.push.webpush") as webpush:
            sent = WebPushService.send(db_session, regular_user.id, notification)

        assert sent == 1
        kwargs = webpush.call_args.kwargs
        assert kwargs["subscription_info"] == SUBSCRIPTION
        assert '"body": "There"' in kwargs["data"]
        assert kwargs["vapid_claims"]["sub"].startswith("mailto:")

    def test_expired_subscription_is_removed(self, db_session, regular_user):
        WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION)

        with patch(
            "framerr.services.notifications.push.webpush",
            side_effect=_push_error(410),
        ):
            sent = WebPushService.send(db_session, regular_user.id, {"title": "x"})

        assert sent == 0
        assert db_session.query(PushSubscription).count() == 0

    def test_other_failures_keep_subscription(self, db_session, regular_user):
        WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION)

        with patch(
            "framerr.services.notifications.push.webpush",
            side_effect=_push_error(500),
        ):
            sent = WebPushService.send(db_session, regular_user.id, {"title": "x"})

        assert sent == 0
        assert db_session.query(PushSubscription).count() == 1


class TestPushApi:
    """Tests for /api/notifications/push."""

    def test_vapid_key(self, user_client):
        resp = user_client.get("/api/notifications/push/vapid-key")
        assert resp.status_code == 200
        assert resp.json()["publicKey"]

    def test_subscribe_list_delete(self, user_client):
        resp = user_client.post(
            "/api/notifications/push/subscribe",
            json={"subscription": SUBSCRIPTION, "deviceName": "Phone"},
        )
        assert resp.status_code == 201
        subscription_id = resp.json()["subscription"]["id"]

        listed = user_client.get("/api/notifications/push/subscriptions").json()
        assert [s["id"] for s in listed["subscriptions"]] == [subscription_id]

        resp = user_client.delete(f"/api/notifications/push/subscriptions/{subscription_id}")
        assert resp.status_code == 204

    def test_subscribe_malformed(self, user_client):
        resp = user_client.post("/api/notifications/push/subscribe", json={})
        assert resp.status_code == 400

    def test_test_push_without_subscriptions(self, user_client):
        resp = user_client.post("/api/notifications/push/test")
        assert resp.status_code == 400

    def test_test_push_forces_push(self, user_client, db_session, regular_user):
        WebPushService.subscribe(db_session, regular_user.id, SUBSCRIPTION)
        with patch("framerr.services.notifications.push.webpush") as webpush:
            resp = user_client.post("/api/notifications/push/test")
        assert resp.json() == {"success": True, "message": "Test notification sent"}
        webpush.assert_called_once()
