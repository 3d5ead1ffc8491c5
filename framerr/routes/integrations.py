"""Integration webhook administration routes."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from framerr.auth import require_admin
from framerr.extensions import get_db
from framerr.schemas.webhooks import WebhookConfigUpdate
from framerr.services import integrations

router = APIRouter(
    prefix="/api/integrations",
    tags=["Integrations"],
    dependencies=[Depends(require_admin)],
)


@router.get("/webhook-events")
def get_webhook_events():
    """Events an admin can enable, per webhook service."""
    return integrations.event_catalogue()


@router.get("/{service}/webhook")
def get_webhook_settings(service: str, db: Session = Depends(get_db)):
    """Webhook settings for a service. The token itself is never returned."""
    return integrations.masked_webhook_config(db, service)


@router.put("/{service}/webhook")
def update_webhook_settings(
    service: str, payload: WebhookConfigUpdate, db: Session = Depends(get_db)
):
    """
    Update the enabled flag and event lists.

    Enabling a webhook for the first time also generates its token and seeds
    the default admin and user events.
    """
    return integrations.update_webhook_settings(db, service, payload.to_config())


@router.post("/{service}/webhook/token")
def regenerate_webhook_token(
    service: str, request: Request, db: Session = Depends(get_db)
):
    """Issue a new token. The previous URL stops working immediately."""
    return integrations.regenerate_webhook_token(db, service, str(request.base_url))
