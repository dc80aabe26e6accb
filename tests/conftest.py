"""Shared test fixtures.

Tests run against a throwaway SQLite file via aiosqlite; the push
provider is replaced by ``FakePushSender``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from matka.admin.token_store import TokenStore
from matka.config import Settings
from matka.database import Database
from matka.db.models import Result, SuperGameResult
from matka.main import create_app
from matka.push.dispatcher import PushDispatcher
from matka.push.sender import PushDeliveryError, PushTarget
from matka.results.ledger import ResultLedger

TODAY = date(2024, 1, 10)


class FakePushSender:
    """Records deliveries; endpoints listed in ``failures`` raise the mapped error."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.failures: dict[str, Exception] = {}

    def fail(self, endpoint: str, status_code: int | None = None, exc: Exception | None = None) -> None:
        self.failures[endpoint] = exc or PushDeliveryError(f"push service said {status_code}", status_code=status_code)

    async def send(self, target: PushTarget, payload: str) -> None:
        if target.endpoint in self.failures:
            raise self.failures[target.endpoint]
        self.sent.append((target.endpoint, payload))


class MutableClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'matka.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(database_url=database_url, log_format="console", token_sweep_interval_minutes=0)


@pytest_asyncio.fixture
async def db(database_url: str) -> AsyncGenerator[Database, None]:
    database = Database(database_url)
    await database.create_schema()
    yield database
    await database.dispose()


@pytest.fixture
def ledger(db: Database) -> ResultLedger:
    return ResultLedger(db, Result, today=lambda: TODAY)


@pytest.fixture
def super_ledger(db: Database) -> ResultLedger:
    return ResultLedger(db, SuperGameResult, today=lambda: TODAY)


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def token_store(db: Database, clock: MutableClock) -> TokenStore:
    store = TokenStore(db, clock=clock)
    await store.seed_default_admin("admin", "admin123")
    return store


@pytest.fixture
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture
def dispatcher(db: Database, push_sender: FakePushSender) -> PushDispatcher:
    return PushDispatcher(db, push_sender)


@pytest_asyncio.fixture
async def client(settings: Settings, push_sender: FakePushSender) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with the full app lifecycle (schema init + admin seed)."""
    app = create_app(settings, push_sender=push_sender)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest_asyncio.fixture
async def admin_token(client: AsyncClient) -> str:
    response = await client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    return response.json()["token"]
