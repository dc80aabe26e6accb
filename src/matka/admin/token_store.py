"""
Admin session tokens.

A token is valid while ``expires_at`` is in the future; expiry is always
evaluated at check time. Logout deletes the row. Expired rows are only
removed by the optional sweep, which nothing depends on for correctness.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from matka.admin.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from matka.db.models import AdminToken, AdminUser
from matka.errors import AuthError, InvalidCredentialsError, StoreError, ValidationError

if TYPE_CHECKING:
    from matka.database import Database

logger = structlog.get_logger()

_TOKEN_ATTEMPTS = 3


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_token() -> str:
    """256 bits of randomness, URL-safe."""
    return secrets.token_urlsafe(32)


@dataclass(frozen=True)
class AdminIdentity:
    id: int
    username: str


@dataclass(frozen=True)
class IssuedToken:
    admin: AdminIdentity
    token: str
    expires_at: datetime


class TokenStore:
    """Issues, validates and revokes admin bearer tokens."""

    def __init__(
        self,
        db: Database,
        *,
        ttl: timedelta = timedelta(hours=24),
        password_min_length: int = 6,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._db = db
        self.ttl = ttl
        self.password_min_length = password_min_length
        self._clock = clock

    # -----------------------------------------------------------------------
    # Login / logout
    # -----------------------------------------------------------------------

    async def login(self, username: str, password: str) -> IssuedToken:
        """
        Verify credentials and issue a new token.

        Raises:
            ValidationError: If username or password is empty.
            InvalidCredentialsError: If no admin matches.
        """
        if not username or not password:
            msg = "Username and password are required"
            raise ValidationError(msg)

        async with self._db.session() as session:
            admin = (
                await session.execute(select(AdminUser).where(AdminUser.username == username))
            ).scalar_one_or_none()
            if admin is None or not verify_password(password, admin.password):
                logger.info("admin_login_failed", username=username)
                raise InvalidCredentialsError

            # Committed separately; a token retry rolls back only the token insert.
            if check_needs_rehash(admin.password):
                admin.password = hash_password(password)
                await session.commit()
                logger.info("admin_password_rehashed", admin_id=admin.id)

            identity = AdminIdentity(id=admin.id, username=admin.username)
            expires_at = self._clock() + self.ttl
            for _ in range(_TOKEN_ATTEMPTS):
                token = generate_token()
                session.add(AdminToken(admin_id=identity.id, token=token, expires_at=expires_at))
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    logger.warning("admin_token_collision", admin_id=identity.id)
                    continue
                break
            else:
                msg = "Could not issue a unique token"
                raise StoreError(msg)

        logger.info("admin_login", admin_id=identity.id, username=identity.username)
        return IssuedToken(admin=identity, token=token, expires_at=expires_at)

    async def logout(self, token: str | None) -> None:
        """Revoke ``token``. Unknown or absent tokens are a no-op."""
        if not token:
            return
        async with self._db.session() as session:
            result = await session.execute(delete(AdminToken).where(AdminToken.token == token))
            await session.commit()
        if result.rowcount:
            logger.info("admin_logout")

    # -----------------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------------

    async def check(self, token: str | None) -> AdminIdentity | None:
        """Return the token's admin if it exists and has not expired, else None."""
        if not token:
            return None
        stmt = (
            select(AdminUser.id, AdminUser.username)
            .join(AdminToken, AdminToken.admin_id == AdminUser.id)
            .where(AdminToken.token == token, AdminToken.expires_at > self._clock())
        )
        async with self._db.session() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            return None
        return AdminIdentity(id=row.id, username=row.username)

    async def require(self, token: str | None) -> AdminIdentity:
        """Like ``check`` but raises AuthError when the token is not valid."""
        if not token:
            raise AuthError
        identity = await self.check(token)
        if identity is None:
            msg = "Invalid or expired token"
            raise AuthError(msg)
        return identity

    # -----------------------------------------------------------------------
    # Password change
    # -----------------------------------------------------------------------

    async def change_password(self, token: str | None, old_password: str | None, new_password: str | None) -> None:
        """
        Rotate the password of the admin owning ``token``.

        Other live tokens for that admin stay valid.

        Raises:
            AuthError: If the token is invalid or the old password is wrong.
            ValidationError: If a password is missing or the new one is too short.
        """
        identity = await self.require(token)

        if not old_password or not new_password:
            msg = "Both passwords are required"
            raise ValidationError(msg)
        try:
            validate_password_strength(new_password, self.password_min_length)
        except PasswordStrengthError as e:
            raise ValidationError(str(e)) from e

        async with self._db.session() as session:
            stored = (
                await session.execute(select(AdminUser.password).where(AdminUser.id == identity.id))
            ).scalar_one_or_none()
            if stored is None or not verify_password(old_password, stored):
                msg = "Current password is incorrect"
                raise AuthError(msg)

            await session.execute(
                update(AdminUser).where(AdminUser.id == identity.id).values(password=hash_password(new_password))
            )
            await session.commit()

        logger.info("admin_password_changed", admin_id=identity.id)

    # -----------------------------------------------------------------------
    # Housekeeping
    # -----------------------------------------------------------------------

    async def seed_default_admin(self, username: str, password: str) -> bool:
        """Create the first admin if the table is empty. Returns True if one was created."""
        async with self._db.session() as session:
            count = (await session.execute(select(func.count()).select_from(AdminUser))).scalar_one()
            if count:
                return False
            session.add(AdminUser(username=username, password=hash_password(password)))
            await session.commit()
        logger.warning("default_admin_created", username=username)
        return True

    async def purge_expired(self) -> int:
        """Delete expired token rows. Returns the number removed."""
        async with self._db.session() as session:
            result = await session.execute(delete(AdminToken).where(AdminToken.expires_at <= self._clock()))
            await session.commit()
        removed = result.rowcount or 0
        if removed:
            logger.info("admin_tokens_purged", removed=removed)
        return removed
