"""
Push subscription registry and broadcast.

``send`` fans out one delivery task per registered endpoint inside a
task group and returns only after every task has finished. Each task
records its own outcome, so one failing delivery never cancels the
others. Endpoints the push service reports as gone are pruned after the
barrier in a single DELETE.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, select

from matka.db.models import PushSubscription
from matka.errors import NoSubscribersError, ValidationError
from matka.push.sender import PushDeliveryError, PushSender, PushTarget

if TYPE_CHECKING:
    from matka.database import Database

logger = structlog.get_logger()


@dataclass
class BroadcastResult:
    success_count: int = 0
    fail_count: int = 0
    pruned: list[str] = field(default_factory=list)


class PushDispatcher:
    """Registry of browser push endpoints with best-effort fan-out."""

    def __init__(self, db: Database, sender: PushSender, *, icon: str = "/ganesh.png") -> None:
        self._db = db
        self._sender = sender
        self.icon = icon

    async def subscribe(self, endpoint: str | None, p256dh: str | None = "", auth: str | None = "") -> None:
        """
        Register ``endpoint``, or overwrite its keys if already registered.

        Raises:
            ValidationError: If the endpoint is empty.
        """
        if not endpoint:
            msg = "Invalid subscription"
            raise ValidationError(msg)

        stmt = self._db.insert(PushSubscription).values(endpoint=endpoint, p256dh=p256dh or "", auth=auth or "")
        stmt = stmt.on_conflict_do_update(
            index_elements=["endpoint"],
            set_={"p256dh": stmt.excluded.p256dh, "auth": stmt.excluded.auth},
        )
        async with self._db.session() as session:
            await session.execute(stmt)
            await session.commit()
        logger.info("push_subscribed", has_keys=bool(p256dh and auth))

    async def count(self) -> int:
        async with self._db.session() as session:
            return (await session.execute(select(func.count()).select_from(PushSubscription))).scalar_one()

    async def _targets(self) -> list[PushTarget]:
        stmt = select(PushSubscription.endpoint, PushSubscription.p256dh, PushSubscription.auth)
        async with self._db.session() as session:
            rows = (await session.execute(stmt)).all()
        return [PushTarget(endpoint=r.endpoint, p256dh=r.p256dh or "", auth=r.auth or "") for r in rows]

    def build_payload(self, title: str, body: str) -> str:
        return json.dumps({"title": title, "body": body, "icon": self.icon})

    async def send(self, title: str | None, body: str | None) -> BroadcastResult:
        """
        Deliver a notification to every registered endpoint.

        Raises:
            ValidationError: If title or body is empty.
            NoSubscribersError: If nothing is registered.
        """
        if not title:
            msg = "Title is required"
            raise ValidationError(msg)
        if not body:
            msg = "Message is required"
            raise ValidationError(msg)

        targets = await self._targets()
        if not targets:
            raise NoSubscribersError

        payload = self.build_payload(title, body)
        outcome = BroadcastResult()

        async def deliver(target: PushTarget) -> None:
            try:
                await self._sender.send(target, payload)
            except PushDeliveryError as e:
                outcome.fail_count += 1
                logger.warning("push_delivery_failed", status_code=e.status_code, error=str(e))
                if e.gone:
                    outcome.pruned.append(target.endpoint)
            except Exception as e:
                outcome.fail_count += 1
                logger.warning("push_delivery_failed", error=str(e), exc_info=e)
            else:
                outcome.success_count += 1

        async with asyncio.TaskGroup() as tg:
            for target in targets:
                tg.create_task(deliver(target))

        if outcome.pruned:
            await self._prune(outcome.pruned)

        logger.info(
            "push_sent",
            success_count=outcome.success_count,
            fail_count=outcome.fail_count,
            pruned=len(outcome.pruned),
        )
        return outcome

    async def _prune(self, endpoints: list[str]) -> None:
        async with self._db.session() as session:
            await session.execute(delete(PushSubscription).where(PushSubscription.endpoint.in_(endpoints)))
            await session.commit()
        logger.info("push_subscription_pruned", count=len(endpoints))
