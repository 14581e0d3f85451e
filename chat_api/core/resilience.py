"""Timeout and bounded retry around individual store/cache calls."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from .config import Settings
from .errors import ChatError, InfrastructureError
from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    timeout_seconds: float = 5.0
    attempts: int = 3
    backoff_seconds: float = 0.1

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            timeout_seconds=settings.store_timeout_seconds,
            attempts=max(1, settings.store_retry_attempts),
            backoff_seconds=max(0.0, settings.store_retry_backoff_seconds),
        )

    def delay(self, attempt: int) -> float:
        return self.backoff_seconds * (2 ** (attempt - 1))


async def guarded(
    operation: str,
    call: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    retry: bool = True,
) -> T:
    """
    Await ``call()`` under the policy timeout.

    Idempotent calls are retried with exponential backoff; non-idempotent ones
    (``retry=False``) get a single attempt. Domain errors raised by the call
    pass through untouched, anything else ends as InfrastructureError.
    """
    attempts = policy.attempts if retry else 1
    last_exc: BaseException | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.wait_for(call(), timeout=policy.timeout_seconds)
        except ChatError:
            raise
        except Exception as exc:
            last_exc = exc
            if attempt < attempts:
                logger.warning("%s failed (attempt %d/%d): %r", operation, attempt, attempts, exc)
                await asyncio.sleep(policy.delay(attempt))
    logger.error("%s failed after %d attempt(s)", operation, attempts, exc_info=last_exc)
    raise InfrastructureError() from last_exc
