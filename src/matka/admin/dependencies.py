"""FastAPI authentication dependencies."""

from __future__ import annotations

from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

_bearer = HTTPBearer(auto_error=False)


async def bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> str | None:
    """Extract the token from ``Authorization: Bearer <token>``, or None."""
    if credentials is None:
        return None
    return credentials.credentials
