"""Tests for the application factory, health, errors and metrics."""


class TestApp:
    """Tests for create_app."""

    def test_config_is_stored(self, app):
        assert app.state.config["TESTING"] is True

    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Resource not found"}

    def test_method_not_allowed(self, client):
        resp = client.get("/api/webhooks/sonarr/token")
        assert resp.status_code == 405


class TestMetrics:
    """Tests for the /metrics endpoint."""

    def test_exposes_custom_metrics(self, client, admin_user, regular_user):
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert 'users_total{group="admin"} 1.0' in resp.text
        assert 'users_total{group="user"} 1.0' in resp.text
        assert "sse_connections" in resp.text

    def test_webhook_counter(self, client, enable_webhook):
        enable_webhook("radarr")
        client.post("/api/webhooks/radarr/wrong", json={"eventType": "Test"})
        resp = client.get("/metrics")
        assert 'webhook_requests_total{service="radarr",outcome="unauthorized"}' in resp.text
