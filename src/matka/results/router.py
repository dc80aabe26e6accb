"""Result endpoints, mounted once per game."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Request

from matka.dependencies import get_ledger
from matka.errors import ValidationError
from matka.results.ledger import INT_MAX, INT_MIN, ResultLedger
from matka.results.schemas import MessageResponse, ResultRequest, ResultResponse


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        msg = "date must be in YYYY-MM-DD format"
        raise ValidationError(msg) from e


def _parse_number(value: str | None) -> int | None:
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except ValueError as e:
        msg = "number must be an integer"
        raise ValidationError(msg) from e
    if not INT_MIN <= number <= INT_MAX:
        msg = "number is out of range"
        raise ValidationError(msg)
    return number


def build_results_router(game: str, prefix: str, tag: str) -> APIRouter:
    """Create the read/write/delete routes for one game's ledger."""
    router = APIRouter(prefix=prefix, tags=[tag])

    def ledger_dep(request: Request) -> ResultLedger:
        return get_ledger(request, game)

    @router.get("/today", response_model=list[ResultResponse])
    async def today(ledger: ResultLedger = Depends(ledger_dep)) -> list[dict]:
        """Today's results ordered by time slot."""
        return await ledger.list_today()

    @router.get("/previous", response_model=list[ResultResponse])
    async def previous(ledger: ResultLedger = Depends(ledger_dep)) -> list[dict]:
        """Results before today, newest first."""
        return await ledger.list_previous()

    @router.get("/recent", response_model=list[ResultResponse])
    async def recent(ledger: ResultLedger = Depends(ledger_dep)) -> list[dict]:
        """Results from the recent window including today."""
        return await ledger.list_recent()

    @router.get("/search", response_model=list[ResultResponse])
    async def search(
        date: str | None = None,  # noqa: A002
        number: str | None = None,
        ledger: ResultLedger = Depends(ledger_dep),
    ) -> list[dict]:
        """Search by exact date and/or a number in either position."""
        return await ledger.search(result_date=_parse_date(date), number=_parse_number(number))

    @router.post("", status_code=201, response_model=ResultResponse)
    async def upsert(body: ResultRequest, ledger: ResultLedger = Depends(ledger_dep)) -> dict:
        """Create or update the result for (result_date, time_slot)."""
        return await ledger.upsert(body.result_date, body.time_slot, body.number_1, body.number_2)

    @router.delete("/{result_id}", response_model=MessageResponse)
    async def delete(result_id: int, ledger: ResultLedger = Depends(ledger_dep)) -> MessageResponse:
        await ledger.delete_by_id(result_id)
        return MessageResponse(message="Result deleted successfully")

    return router


results_router = build_results_router("results", "/api/results", "Results")
super_game_router = build_results_router("super_game", "/api/super-game", "Super Game")
