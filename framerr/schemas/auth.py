"""Authentication schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    remember_me: bool = Field(False, alias="rememberMe")

    model_config = {"populate_by_name": True}
