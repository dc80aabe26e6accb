"""
Password hashing and validation using argon2id.

Rows written before hashing was introduced still hold the plaintext
password; those verify once by constant-time comparison and report
that they need a rehash.
"""

from __future__ import annotations

import secrets

import argon2

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,  # argon2id
)

_ARGON2_PREFIX = "$argon2"


class PasswordStrengthError(ValueError):
    """Raised when a password does not meet strength requirements."""


def hash_password(password: str) -> str:
    """Hash a password using argon2id. Returns the full hash string."""
    return _hasher.hash(password)


def is_hashed(stored: str) -> bool:
    return stored.startswith(_ARGON2_PREFIX)


def verify_password(password: str, stored: str) -> bool:
    """
    Verify a password against its stored value.

    Returns True if the password matches. Never raises on mismatch or on a
    corrupt stored hash.
    """
    if not is_hashed(stored):
        return bool(stored) and secrets.compare_digest(password.encode(), stored.encode())
    try:
        return _hasher.verify(stored, password)
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False


def check_needs_rehash(stored: str) -> bool:
    """True for legacy plaintext values and for hashes with outdated parameters."""
    if not is_hashed(stored):
        return True
    return _hasher.check_needs_rehash(stored)


def validate_password_strength(password: str, min_length: int = 6) -> None:
    """
    Raises PasswordStrengthError if the password is shorter than ``min_length``.
    """
    if len(password) < min_length:
        msg = f"New password must be at least {min_length} characters"
        raise PasswordStrengthError(msg)
