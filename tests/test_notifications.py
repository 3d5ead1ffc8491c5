"""Tests for the notification service and API."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from framerr.core.exceptions import NotFoundError, ValidationError
from framerr.core.helpers import utcnow
from framerr.models import Notification
from framerr.services.notifications import NotificationService


def _create(db, user, title="Hello", **kwargs):
    kwargs.setdefault("type", "info")
    kwargs.setdefault("message", "World")
    return NotificationService.create(db, user_id=user.id, title=title, **kwargs)


class TestNotificationService:
    """Tests for NotificationService."""

    def test_create_stores_notification(self, db_session, regular_user):
        n = _create(db_session, regular_user, icon_id="system-plex", metadata={"a": 1})
        stored = db_session.get(Notification, n.id)
        assert stored.title == "Hello"
        assert stored.icon_id == "system-plex"
        assert stored.meta == {"a": 1}
        assert stored.read is False

    def test_create_rejects_unknown_type(self, db_session, regular_user):
        with pytest.raises(ValidationError):
            _create(db_session, regular_user, type="critical")

    def test_create_emits(self, db_session, regular_user):
        with patch(
            "framerr.services.notifications.service.notification_emitter"
        ) as emitter:
            n = _create(db_session, regular_user)
        emitter.emit.assert_called_once()
        args = emitter.emit.call_args.args
        assert args[1] == regular_user.id
        assert args[2]["id"] == n.id

    def test_get_all_newest_first_with_counts(self, db_session, regular_user):
        old = _create(db_session, regular_user, title="old")
        old.created_at = utcnow() - timedelta(hours=1)
        old.read = True
        db_session.commit()
        _create(db_session, regular_user, title="new")

        result = NotificationService.get_all(db_session, regular_user.id)
        assert [n["title"] for n in result["notifications"]] == ["new", "old"]
        assert result["total"] == 2
        assert result["unreadCount"] == 1

    def test_get_all_unread_only_and_paging(self, db_session, regular_user):
        for i in range(3):
            _create(db_session, regular_user, title=f"n{i}")

        result = NotificationService.get_all(
            db_session, regular_user.id, unread=True, limit=2, offset=0
        )
        assert len(result["notifications"]) == 2
        assert result["total"] == 3

    def test_get_other_users_notification(self, db_session, regular_user, admin_user):
        n = _create(db_session, regular_user)
        with pytest.raises(NotFoundError):
            NotificationService.get(db_session, admin_user.id, n.id)

    def test_mark_all_read(self, db_session, regular_user, admin_user):
        _create(db_session, regular_user)
        _create(db_session, regular_user)
        _create(db_session, admin_user)

        assert NotificationService.mark_all_read(db_session, regular_user.id) == 2
        assert NotificationService.get_all(db_session, admin_user.id)["unreadCount"] == 1

    def test_clear_all(self, db_session, regular_user):
        _create(db_session, regular_user)
        assert NotificationService.clear_all(db_session, regular_user.id) == 1
        assert NotificationService.get_all(db_session, regular_user.id)["total"] == 0


class TestNotificationsApi:
    """Tests for /api/notifications."""

    def test_requires_auth(self, client):
        resp = client.get("/api/notifications")
        assert resp.status_code == 401
        assert resp.json()["error"] == "Authentication required"

    def test_create_and_list(self, user_client):
        resp = user_client.post(
            "/api/notifications",
            json={"type": "success", "title": "Done", "message": "It worked"},
        )
        assert resp.status_code == 201
        assert resp.json()["title"] == "Done"

        body = user_client.get("/api/notifications").json()
        assert body["total"] == 1
        assert body["unreadCount"] == 1
        assert body["notifications"][0]["type"] == "success"

    def test_invalid_type_is_400(self, user_client):
        resp = user_client.post(
            "/api/notifications",
            json={"type": "critical", "title": "x", "message": "y"},
        )
        assert resp.status_code == 400

    def test_user_cannot_notify_others(self, user_client, admin_user):
        resp = user_client.post(
            "/api/notifications",
            json={"type": "info", "title": "x", "message": "y", "userId": admin_user.id},
        )
        assert resp.status_code == 403

    def test_admin_can_notify_others(self, admin_client, db_session, regular_user):
        resp = admin_client.post(
            "/api/notifications",
            json={"type": "info", "title": "x", "message": "y", "userId": regular_user.id},
        )
        assert resp.status_code == 201
        assert resp.json()["userId"] == regular_user.id

    def test_mark_read(self, user_client, db_session, regular_user):
        n = _create(db_session, regular_user)
        resp = user_client.patch(f"/api/notifications/{n.id}/read")
        assert resp.status_code == 200
        assert resp.json()["read"] is True

    def test_mark_read_other_users_notification(self, user_client, db_session, admin_user):
        n = _create(db_session, admin_user)
        resp = user_client.patch(f"/api/notifications/{n.id}/read")
        assert resp.status_code == 404

    def test_mark_all_read(self, user_client, db_session, regular_user):
        _create(db_session, regular_user)
        resp = user_client.post("/api/notifications/mark-all-read")
        assert resp.json() == {"updatedCount": 1}

    def test_delete(self, user_client, db_session, regular_user):
        n = _create(db_session, regular_user)
        resp = user_client.delete(f"/api/notifications/{n.id}")
        assert resp.status_code == 204
        db_session.expire_all()
        assert db_session.get(Notification, n.id) is None

    def test_delete_missing(self, user_client):
        assert user_client.delete("/api/notifications/nope").status_code == 404

    def test_clear_all(self, user_client, db_session, regular_user):
        _create(db_session, regular_user)
        _create(db_session, regular_user)
        resp = user_client.delete("/api/notifications/clear-all")
        assert resp.json() == {"deletedCount": 2}
