"""Contact form endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from matka.contact.service import ContactBook
from matka.dependencies import get_contact_book

router = APIRouter(prefix="/api/contact", tags=["Contact"])


class ContactRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    message: str | None = None


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None
    message: str
    created_at: datetime | None


@router.post("", status_code=201, response_model=ContactResponse)
async def submit(body: ContactRequest, contacts: ContactBook = Depends(get_contact_book)) -> dict:
    return await contacts.submit(body.name, body.email, body.phone, body.message)


@router.get("", response_model=list[ContactResponse])
async def list_submissions(contacts: ContactBook = Depends(get_contact_book)) -> list[dict]:
    return await contacts.list_all()
