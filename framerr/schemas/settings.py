"""Settings schemas."""

from pydantic import BaseModel, Field


class NotificationRetentionResponse(BaseModel):
    """Notification retention settings response."""

    retention_days: int = Field(
        description="Days to keep read notifications (0 = keep forever)"
    )


class NotificationRetentionUpdate(BaseModel):
    """Notification retention settings update."""

    retention_days: int = Field(
        ge=0,
        le=365,
        description="Days to keep read notifications (0 = keep forever, max 1 year)",
    )
