"""Async SQLAlchemy engine and session management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from matka.db.base import Base
from matka.errors import StoreError

logger = structlog.get_logger()


class Database:
    """Process-wide connection pool handle.

    Constructed once at startup and handed to every component that
    needs the store; disposed at shutdown.
    """

    def __init__(self, url: str) -> None:
        self._engine: AsyncEngine = create_async_engine(url, **_engine_options(url))
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        """Backend name, e.g. ``postgresql`` or ``sqlite``."""
        return self._engine.dialect.name

    def insert(self, model: type) -> Any:  # noqa: ANN401
        """Dialect-specific INSERT supporting ``on_conflict_do_update``."""
        if self.dialect_name == "postgresql":
            return pg_insert(model)
        return sqlite_insert(model)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; store failures are logged and raised as StoreError."""
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("store_error", error=str(exc), exc_info=exc)
                raise StoreError from exc

    async def create_schema(self) -> None:
        """Create any missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Dispose of the engine and its pooled connections."""
        await self._engine.dispose()


def _engine_options(url: str) -> dict[str, object]:
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "pool_size": 20,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "echo": False,
        "connect_args": {"statement_cache_size": 0},
    }
