"""Shared FastAPI dependencies.

Components are built once in the application lifespan and stored on
``app.state``; these helpers hand them to route functions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from matka.admin.token_store import TokenStore
    from matka.config import Settings
    from matka.contact.service import ContactBook
    from matka.push.dispatcher import PushDispatcher
    from matka.results.ledger import ResultLedger


def get_ledger(request: Request, game: str) -> ResultLedger:
    """Look up the ledger registered for ``game``."""
    return request.app.state.ledgers[game]


def get_token_store(request: Request) -> TokenStore:
    return request.app.state.token_store


def get_push_dispatcher(request: Request) -> PushDispatcher:
    return request.app.state.push_dispatcher


def get_contact_book(request: Request) -> ContactBook:
    return request.app.state.contact_book


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings
