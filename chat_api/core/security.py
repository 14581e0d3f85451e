"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc

from .config import Settings


def build_password_hasher(settings: Settings) -> PasswordHasher:
    """Argon2id hasher using the cost factors fixed at startup."""
    return PasswordHasher(
        time_cost=settings.password_time_cost,
        memory_cost=settings.password_memory_cost,
    )


def hash_password(hasher: PasswordHasher, password: str) -> str:
    """Create a salted Argon2 hash; the salt is embedded in the result."""
    return hasher.hash(password)


def verify_password(hasher: PasswordHasher, password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored:
        return False
    try:
        return hasher.verify(stored, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False
