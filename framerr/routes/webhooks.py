"""
Webhook routes.

Producers authenticate with the token in the path, so these routes take no
session. The body is whatever JSON the producer sends.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from framerr.core.validators import validate_webhook_service
from framerr.extensions import get_db
from framerr.schemas.common import ErrorResponse
from framerr.services.webhooks import handle_webhook

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


@router.post(
    "/{service}/{token:path}",
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def receive_webhook(
    service: str,
    token: str,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    """
    Receive a webhook from Overseerr, Sonarr or Radarr.

    Returns 401 for a disabled webhook or a bad token, 200 ``ignored`` for
    events Framerr doesn't know, and 200 ``ok`` with the number of
    notifications created otherwise.
    """
    validate_webhook_service(service)
    status_code, body = handle_webhook(db, service, token, payload)
    return JSONResponse(body, status_code=status_code)
