"""Contact form submissions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import insert, select

from matka.db.models import ContactSubmission
from matka.errors import ValidationError

if TYPE_CHECKING:
    from matka.database import Database

logger = structlog.get_logger()

_COLUMNS = (
    ContactSubmission.id,
    ContactSubmission.name,
    ContactSubmission.email,
    ContactSubmission.phone,
    ContactSubmission.message,
    ContactSubmission.created_at,
)


class ContactBook:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def submit(self, name: str | None, email: str | None, phone: str | None, message: str | None) -> dict[str, Any]:
        """Store a submission. Raises ValidationError if name, email or message is empty."""
        if not name or not email or not message:
            msg = "Name, email, and message are required"
            raise ValidationError(msg)

        stmt = (
            insert(ContactSubmission)
            .values(name=name, email=email, phone=phone or None, message=message)
            .returning(*_COLUMNS)
        )
        async with self._db.session() as session:
            row = (await session.execute(stmt)).one()
            await session.commit()
        logger.info("contact_submitted", id=row.id)
        return dict(row._mapping)

    async def list_all(self) -> list[dict[str, Any]]:
        """All submissions, newest first."""
        stmt = select(*_COLUMNS).order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc())
        async with self._db.session() as session:
            rows = (await session.execute(stmt)).all()
        return [dict(r._mapping) for r in rows]
