"""
Prometheus metrics for monitoring the application.

Exposes webhook and delivery counters plus user, notification and live
connection gauges at /metrics in Prometheus format.
"""

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Info
from prometheus_fastapi_instrumentator import Instrumentator

from framerr.core.helpers import _get_pyproject_attr
from framerr.extensions import SessionLocal

app_info = Info(_get_pyproject_attr("name"), _get_pyproject_attr("description"))

# Webhook metrics (counters - monotonically increasing)
webhook_requests_total = Counter(
    "webhook_requests_total",
    "Webhook calls received, by outcome (ok, ignored, unauthorized, error)",
    ["service", "outcome"],
)
webhook_notifications_total = Counter(
    "webhook_notifications_total",
    "Notifications created from webhooks, by outcome (sent, failed)",
    ["service", "outcome"],
)

# Delivery metrics
notification_push_total = Counter(
    "notification_push_total",
    "Web Push deliveries, by outcome (sent, failed, expired)",
    ["outcome"],
)

# Entity counts
users_total = Gauge("users_total", "Total number of users", ["group"])
notifications_unread_total = Gauge(
    "notifications_unread_total", "Unread notifications across all users"
)
sse_connections = Gauge("sse_connections", "Live SSE notification streams")


def init_metrics(app: FastAPI) -> Instrumentator:
    """
    Initialise Prometheus metrics.

    Args:
        app: The FastAPI application instance.

    Returns:
        The configured Instrumentator instance.
    """
    from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
    from starlette.responses import Response

    instrumentator = Instrumentator()
    instrumentator.instrument(app)

    # Custom /metrics endpoint that collects our metrics before generating output
    @app.get("/metrics", include_in_schema=True, tags=["Metrics"])
    def metrics():
        collect_metrics()
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app_info.info(
        {
            "version": _get_pyproject_attr("version"),
            "name": _get_pyproject_attr("name"),
            "description": _get_pyproject_attr("description"),
        }
    )

    return instrumentator


def collect_metrics() -> None:
    """
    Refresh gauges from the database and the SSE hub.

    Called on each /metrics request to ensure fresh data.
    """
    from framerr.core.constants import USER_GROUPS
    from framerr.models import Notification, User
    from framerr.sse_hub import hub

    with SessionLocal() as db:
        for group in USER_GROUPS:
            users_total.labels(group=group).set(
                db.query(User).filter_by(group=group).count()
            )
        notifications_unread_total.set(
            db.query(Notification).filter_by(read=False).count()
        )

    sse_connections.set(hub.connection_count())
