"""Admin session router — all /api/admin/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from matka.admin.dependencies import bearer_token
from matka.admin.schemas import (
    AdminResponse,
    ChangePasswordRequest,
    CheckResponse,
    LoginRequest,
    LoginResponse,
)
from matka.admin.token_store import TokenStore
from matka.dependencies import get_token_store
from matka.errors import StoreError
from matka.results.schemas import MessageResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, tokens: TokenStore = Depends(get_token_store)) -> LoginResponse:
    """Exchange username/password for a bearer token."""
    issued = await tokens.login(body.username or "", body.password or "")
    return LoginResponse(
        message="Login successful",
        admin=AdminResponse(id=issued.admin.id, username=issued.admin.username),
        token=issued.token,
    )


@router.get("/check", response_model=CheckResponse, response_model_exclude_none=True)
async def check(
    token: str | None = Depends(bearer_token),
    tokens: TokenStore = Depends(get_token_store),
) -> CheckResponse:
    """Report whether the bearer token is a live admin session. Never 401s."""
    try:
        identity = await tokens.check(token)
    except StoreError:
        logger.warning("admin_check_failed")
        return CheckResponse(is_admin=False)
    if identity is None:
        return CheckResponse(is_admin=False)
    return CheckResponse(is_admin=True, username=identity.username)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    token: str | None = Depends(bearer_token),
    tokens: TokenStore = Depends(get_token_store),
) -> MessageResponse:
    await tokens.change_password(token, body.old_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str | None = Depends(bearer_token),
    tokens: TokenStore = Depends(get_token_store),
) -> MessageResponse:
    """Revoke the bearer token. Succeeds even without one."""
    await tokens.logout(token)
    return MessageResponse(message="Logout successful")
