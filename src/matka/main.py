"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

import structlog
from fastapi import FastAPI

from matka.admin.router import router as admin_router
from matka.admin.token_store import TokenStore
from matka.config import Settings, get_settings
from matka.contact.router import router as contact_router
from matka.contact.service import ContactBook
from matka.database import Database
from matka.health.router import router as health_router
from matka.middleware import setup_middleware
from matka.push.dispatcher import PushDispatcher
from matka.push.router import router as push_router
from matka.push.sender import PushSender, WebPushSender
from matka.results.ledger import GAMES, ResultLedger, calendar_today
from matka.results.router import results_router, super_game_router

logger = structlog.get_logger()


async def _sweep_tokens(tokens: TokenStore, interval_seconds: float) -> None:
    """Periodically drop expired admin tokens. Expiry is still enforced at check time."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await tokens.purge_expired()
        except Exception:
            logger.exception("token_sweep_failed")


def _build_components(app: FastAPI, db: Database, settings: Settings, sender: PushSender | None) -> None:
    today = calendar_today(settings.results_timezone)
    app.state.ledgers = {
        game: ResultLedger(
            db,
            model,
            today=today,
            previous_limit=settings.results_previous_limit,
            recent_days=settings.results_recent_days,
        )
        for game, model in GAMES.items()
    }
    app.state.token_store = TokenStore(
        db,
        ttl=timedelta(hours=settings.admin_token_ttl_hours),
        password_min_length=settings.admin_password_min_length,
    )
    app.state.push_dispatcher = PushDispatcher(
        db,
        sender or WebPushSender(settings.vapid_private_key, settings.vapid_email),
        icon=settings.push_icon,
    )
    app.state.contact_book = ContactBook(db)


def _make_lifespan(sender: PushSender | None):  # noqa: ANN202
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup and shutdown lifecycle."""
        settings: Settings = app.state.settings
        db = Database(settings.database_url)
        _build_components(app, db, settings, sender)

        # A failed schema init is logged and the service keeps serving.
        try:
            await db.create_schema()
            await app.state.token_store.seed_default_admin(
                settings.default_admin_username, settings.default_admin_password
            )
            logger.info("schema_initialized")
        except Exception:
            logger.exception("schema_init_failed")

        sweep_task: asyncio.Task[None] | None = None
        if settings.token_sweep_interval_minutes > 0:
            sweep_task = asyncio.create_task(
                _sweep_tokens(app.state.token_store, settings.token_sweep_interval_minutes * 60)
            )

        yield

        if sweep_task is not None:
            sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweep_task

        await db.dispose()

    return lifespan


def create_app(settings: Settings | None = None, push_sender: PushSender | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="M3 Matka Results API",
        description="Draw results, admin sessions and web push for the M3 Matka results site",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=_make_lifespan(push_sender),
    )
    app.state.settings = settings

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(results_router)
    app.include_router(super_game_router)
    app.include_router(contact_router)
    app.include_router(admin_router)
    app.include_router(push_router)

    return app
