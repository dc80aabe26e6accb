"""Request/response schemas for result endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from matka.results.ledger import INT_MAX, INT_MIN


class ResultRequest(BaseModel):
    """Upsert payload. Fields are optional here; the ledger decides what is missing."""

    result_date: date | None = None
    time_slot: str | None = None
    number_1: int | None = Field(None, ge=INT_MIN, le=INT_MAX)
    number_2: int | None = Field(None, ge=INT_MIN, le=INT_MAX)

    @field_validator("result_date", "time_slot", "number_1", "number_2", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:  # noqa: ANN401
        """Treat empty strings from HTML forms as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ResultResponse(BaseModel):
    id: int
    result_date: date
    time_slot: str
    number_1: int
    number_2: int


class MessageResponse(BaseModel):
    message: str
