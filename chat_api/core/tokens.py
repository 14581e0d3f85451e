"""Stateless bearer tokens binding a member id to an expiry."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError

from .config import Settings
from .errors import ExpiredTokenError, InvalidTokenError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Signs and verifies JWTs with the process-wide secret."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        ttl_seconds: int = 3600,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not secret:
            raise RuntimeError("JWT_SECRET must be configured to issue tokens.")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=max(1, ttl_seconds))
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl_seconds=settings.token_ttl_seconds,
        )

    def issue(self, subject: str) -> str:
        now = self._clock()
        claims = {
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """Return the subject of a valid, unexpired token."""
        if not token:
            raise InvalidTokenError()
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise ExpiredTokenError()
        except JWTError:
            raise InvalidTokenError()
        subject = claims.get("sub")
        if not subject or not isinstance(subject, str):
            raise InvalidTokenError()
        return subject
