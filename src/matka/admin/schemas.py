"""Request/response schemas for admin endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class AdminResponse(BaseModel):
    id: int
    username: str


class LoginResponse(BaseModel):
    message: str
    admin: AdminResponse
    token: str


class CheckResponse(BaseModel):
    """Session probe. ``username`` is only present for a valid token."""

    model_config = ConfigDict(populate_by_name=True)

    is_admin: bool = Field(alias="isAdmin")
    username: str | None = None


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: str | None = Field(None, alias="oldPassword")
    new_password: str | None = Field(None, alias="newPassword")
