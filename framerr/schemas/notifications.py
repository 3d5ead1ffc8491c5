"""
Notification schemas.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from framerr.schemas.common import PaginationQuery


class NotificationCreate(BaseModel):
    """Request body for creating a notification."""

    type: Literal["success", "error", "warning", "info"]
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    user_id: str | None = Field(None, alias="userId")
    icon_id: str | None = Field(None, alias="iconId")
    metadata: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}


class NotificationListQuery(PaginationQuery):
    """Query parameters for listing notifications."""

    unread: bool = False


class PushKeys(BaseModel):
    p256dh: str | None = None
    auth: str | None = None


class PushSubscriptionInfo(BaseModel):
    """Browser PushSubscription as serialised by ``subscription.toJSON()``."""

    endpoint: str | None = None
    keys: PushKeys | None = None


class PushSubscribeRequest(BaseModel):
    """Request body for registering a push subscription."""

    subscription: PushSubscriptionInfo | None = None
    device_name: str | None = Field(None, alias="deviceName", max_length=100)

    model_config = {"populate_by_name": True}
