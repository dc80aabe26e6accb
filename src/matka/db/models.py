"""ORM models for the six persisted tables.

``results`` and ``super_game_results`` share one column layout through
``ResultColumns`` so a single ledger implementation serves both games.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from matka.db.base import Base


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class AdminUser(Base):
    """Maps to the 'admin_users' table. ``password`` holds an argon2id hash."""

    __tablename__ = "admin_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())

    tokens: Mapped[list[AdminToken]] = relationship(
        "AdminToken", back_populates="admin", cascade="all, delete-orphan", passive_deletes=True
    )


class AdminToken(Base):
    """Opaque bearer token issued on login. Valid while ``expires_at`` is in the future."""

    __tablename__ = "admin_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admin_id: Mapped[int] = mapped_column(Integer, ForeignKey("admin_users.id", ondelete="CASCADE"), nullable=False)
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())

    admin: Mapped[AdminUser] = relationship("AdminUser", back_populates="tokens")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class ResultColumns:
    """Columns common to every game's result table."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    result_date: Mapped[date] = mapped_column(Date, nullable=False)
    time_slot: Mapped[str] = mapped_column(String(50), nullable=False)
    number_1: Mapped[int] = mapped_column(Integer, nullable=False)
    number_2: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())


class Result(ResultColumns, Base):
    __tablename__ = "results"
    __table_args__ = (UniqueConstraint("result_date", "time_slot", name="results_result_date_time_slot_key"),)


class SuperGameResult(ResultColumns, Base):
    __tablename__ = "super_game_results"
    __table_args__ = (
        UniqueConstraint("result_date", "time_slot", name="super_game_results_result_date_time_slot_key"),
    )


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------


class ContactSubmission(Base):
    __tablename__ = "contact_submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())


# ---------------------------------------------------------------------------
# Web push
# ---------------------------------------------------------------------------


class PushSubscription(Base):
    """Browser push endpoint plus its encryption keys (empty when the client sent none)."""

    __tablename__ = "push_subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    endpoint: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    p256dh: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    auth: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())
