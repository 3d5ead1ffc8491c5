"""User schemas."""

from typing import Any

from pydantic import BaseModel, Field


class PreferencesUpdate(BaseModel):
    """Partial preferences document, deep-merged into the stored one."""

    preferences: dict[str, Any] = Field(default_factory=dict)


class PreferencesResponse(BaseModel):
    preferences: dict[str, Any]
