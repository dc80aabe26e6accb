"""Request/response schemas for web push endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionKeys(BaseModel):
    p256dh: str | None = None
    auth: str | None = None


class SubscribeRequest(BaseModel):
    """Browser ``PushSubscription.toJSON()`` shape."""

    endpoint: str | None = None
    keys: SubscriptionKeys | None = None


class SendRequest(BaseModel):
    title: str | None = None
    message: str | None = None


class SuccessResponse(BaseModel):
    success: bool
    message: str


class SendResponse(SuccessResponse):
    model_config = ConfigDict(populate_by_name=True)

    success_count: int = Field(alias="successCount")
    fail_count: int = Field(alias="failCount")


class CountResponse(BaseModel):
    count: int


class VapidKeyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    public_key: str = Field(alias="publicKey")
