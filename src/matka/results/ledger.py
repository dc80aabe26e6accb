"""Per-game result ledger.

One row per (result_date, time_slot). Writes are single-statement
upserts, so the unique constraint in the store is the only thing that
keeps concurrent writers from producing duplicates.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy import delete, or_, select

from matka.db.models import Result, ResultColumns, SuperGameResult
from matka.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from matka.database import Database

logger = structlog.get_logger()

# Range of the 32-bit INTEGER columns.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

GAMES: dict[str, type[ResultColumns]] = {
    "results": Result,
    "super_game": SuperGameResult,
}


def calendar_today(tz_name: str = "UTC") -> Callable[[], date]:
    """Return a clock that reports the current date in ``tz_name``."""
    tz = ZoneInfo(tz_name)
    return lambda: datetime.now(tz).date()


def _is_missing(value: Any) -> bool:  # noqa: ANN401
    return value is None or value == ""


class ResultLedger:
    """Catalog of numeric draw results for one game."""

    def __init__(
        self,
        db: Database,
        model: type[ResultColumns],
        *,
        today: Callable[[], date] | None = None,
        previous_limit: int = 120,
        recent_days: int = 9,
    ) -> None:
        self._db = db
        self.model = model
        self._today = today or calendar_today()
        self.previous_limit = previous_limit
        self.recent_days = recent_days

    @property
    def game(self) -> str:
        return self.model.__tablename__  # type: ignore[attr-defined]

    def _columns(self) -> tuple[Any, ...]:
        m = self.model
        return (m.id, m.result_date, m.time_slot, m.number_1, m.number_2)

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    async def upsert(
        self,
        result_date: date | None,
        time_slot: str | None,
        number_1: int | None,
        number_2: int | None,
    ) -> dict[str, Any]:
        """Insert a result, or replace the numbers of the existing (date, slot) row.

        ``created_at`` of an existing row is left untouched.

        Raises:
            ValidationError: If any field is missing.
        """
        if not result_date or not time_slot or _is_missing(number_1) or _is_missing(number_2):
            msg = "All fields are required"
            raise ValidationError(msg)

        stmt = self._db.insert(self.model).values(
            result_date=result_date,
            time_slot=time_slot,
            number_1=number_1,
            number_2=number_2,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["result_date", "time_slot"],
            set_={
                "number_1": stmt.excluded.number_1,
                "number_2": stmt.excluded.number_2,
            },
        ).returning(*self._columns())

        async with self._db.session() as session:
            row = (await session.execute(stmt)).one()
            await session.commit()

        logger.info(
            "result_upserted",
            game=self.game,
            id=row.id,
            result_date=str(row.result_date),
            time_slot=row.time_slot,
        )
        return dict(row._mapping)

    async def delete_by_id(self, result_id: int) -> None:
        """Delete a result row.

        Raises:
            NotFoundError: If no row has that id.
        """
        if not 1 <= result_id <= INT_MAX:
            msg = "Result not found"
            raise NotFoundError(msg)
        async with self._db.session() as session:
            result = await session.execute(delete(self.model).where(self.model.id == result_id))
            await session.commit()

        if result.rowcount == 0:
            msg = "Result not found"
            raise NotFoundError(msg)
        logger.info("result_deleted", game=self.game, id=result_id)

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def _fetch(self, stmt: Any) -> list[dict[str, Any]]:  # noqa: ANN401
        async with self._db.session() as session:
            rows = (await session.execute(stmt)).all()
        return [dict(r._mapping) for r in rows]

    def _newest_first(self, stmt: Any) -> Any:  # noqa: ANN401
        return stmt.order_by(self.model.result_date.desc(), self.model.time_slot.asc())

    async def list_today(self) -> list[dict[str, Any]]:
        """Today's results ordered by slot."""
        stmt = (
            select(*self._columns())
            .where(self.model.result_date == self._today())
            .order_by(self.model.time_slot.asc())
        )
        return await self._fetch(stmt)

    async def list_previous(self) -> list[dict[str, Any]]:
        """Results strictly before today, newest date first, capped at ``previous_limit``."""
        stmt = self._newest_first(
            select(*self._columns()).where(self.model.result_date < self._today())
        ).limit(self.previous_limit)
        return await self._fetch(stmt)

    async def list_recent(self) -> list[dict[str, Any]]:
        """Results from the last ``recent_days`` days plus today, uncapped."""
        since = self._today() - timedelta(days=self.recent_days)
        stmt = self._newest_first(select(*self._columns()).where(self.model.result_date >= since))
        return await self._fetch(stmt)

    async def search(self, result_date: date | None = None, number: int | None = None) -> list[dict[str, Any]]:
        """Filter by exact date and/or a number appearing in either position."""
        stmt = select(*self._columns())
        if result_date is not None:
            stmt = stmt.where(self.model.result_date == result_date)
        if number is not None:
            stmt = stmt.where(or_(self.model.number_1 == number, self.model.number_2 == number))
        return await self._fetch(self._newest_first(stmt))
