"""Web push router — VAPID key, subscriptions, broadcast, service worker."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from matka.admin.dependencies import bearer_token
from matka.admin.token_store import TokenStore
from matka.config import Settings
from matka.dependencies import get_app_settings, get_push_dispatcher, get_token_store
from matka.push.dispatcher import PushDispatcher
from matka.push.schemas import (
    CountResponse,
    SendRequest,
    SendResponse,
    SubscribeRequest,
    SuccessResponse,
    VapidKeyResponse,
)
from matka.push.service_worker import render_service_worker

router = APIRouter(tags=["Push"])


@router.get("/api/vapid-public-key", response_model=VapidKeyResponse)
async def vapid_public_key(settings: Settings = Depends(get_app_settings)) -> VapidKeyResponse:
    return VapidKeyResponse(public_key=settings.vapid_public_key)


@router.get("/service-worker.js", include_in_schema=False)
async def service_worker(settings: Settings = Depends(get_app_settings)) -> Response:
    return Response(
        content=render_service_worker(settings.push_icon),
        media_type="application/javascript",
    )


@router.post("/api/push/subscribe", response_model=SuccessResponse)
async def subscribe(
    body: SubscribeRequest,
    push: PushDispatcher = Depends(get_push_dispatcher),
) -> SuccessResponse:
    """Register (or refresh) a browser push subscription."""
    keys = body.keys
    await push.subscribe(
        body.endpoint,
        keys.p256dh if keys else "",
        keys.auth if keys else "",
    )
    return SuccessResponse(success=True, message="Subscribed to push notifications")


@router.get("/api/push/count", response_model=CountResponse)
async def count(push: PushDispatcher = Depends(get_push_dispatcher)) -> CountResponse:
    return CountResponse(count=await push.count())


@router.post("/api/push/send", response_model=SendResponse)
async def send(
    body: SendRequest,
    token: str | None = Depends(bearer_token),
    tokens: TokenStore = Depends(get_token_store),
    push: PushDispatcher = Depends(get_push_dispatcher),
    settings: Settings = Depends(get_app_settings),
) -> SendResponse:
    """Broadcast to every subscriber. Admin-gated only when push_send_requires_admin is set."""
    if settings.push_send_requires_admin:
        await tokens.require(token)

    outcome = await push.send(body.title, body.message)
    return SendResponse(
        success=True,
        message=f"Notifications sent to {outcome.success_count} subscriber(s)",
        success_count=outcome.success_count,
        fail_count=outcome.fail_count,
    )
