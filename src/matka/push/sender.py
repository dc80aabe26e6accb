"""
Web Push delivery via pywebpush.

pywebpush is synchronous (requests under the hood), so each delivery runs
in a worker thread. Failures are normalised to ``PushDeliveryError`` with
the push service's HTTP status, so callers can tell a permanently gone
endpoint from a transient failure.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

from pywebpush import WebPushException, webpush

# Push services answer 404/410 once a subscription has been withdrawn.
GONE_STATUSES = frozenset({404, 410})


@dataclass(frozen=True)
class PushTarget:
    endpoint: str
    p256dh: str
    auth: str

    def subscription_info(self) -> dict[str, object]:
        return {"endpoint": self.endpoint, "keys": {"p256dh": self.p256dh, "auth": self.auth}}


class PushDeliveryError(Exception):
    """A single delivery attempt failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def gone(self) -> bool:
        """True if the push service reports the endpoint permanently invalid."""
        return self.status_code in GONE_STATUSES


class PushSender(Protocol):
    async def send(self, target: PushTarget, payload: str) -> None: ...


class WebPushSender:
    """Sends VAPID-signed notifications to browser push services."""

    def __init__(self, private_key: str, subject: str, ttl: int = 86400, timeout: float = 30.0) -> None:
        self.private_key = private_key
        self.subject = subject
        self.ttl = ttl
        self.timeout = timeout

    def _send_sync(self, target: PushTarget, payload: str) -> None:
        try:
            webpush(
                subscription_info=target.subscription_info(),
                data=payload,
                vapid_private_key=self.private_key,
                vapid_claims={"sub": self.subject},
                ttl=self.ttl,
                timeout=self.timeout,
            )
        except WebPushException as e:
            status = e.response.status_code if e.response is not None else None
            raise PushDeliveryError(str(e), status_code=status) from e

    async def send(self, target: PushTarget, payload: str) -> None:
        """Deliver ``payload`` to one endpoint. Raises PushDeliveryError on failure."""
        await asyncio.to_thread(self._send_sync, target, payload)
