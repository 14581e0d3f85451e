"""
Fast credential cache backed by Redis.

Best-effort mirror of (member id, password hash, creation time). It is never
authoritative: callers fall back to the durable store whenever it says "absent"
and tolerate its failures.
"""
from __future__ import annotations

from datetime import datetime

from chat_api.core.logging import get_logger
from chat_api.core.resilience import RetryPolicy, guarded

logger = get_logger(__name__)

MEMBER_KEY = "member:{member_id}"  # hash: password_hash, created_at


class CredentialCache:
    def __init__(self, client, policy: RetryPolicy | None = None) -> None:
        # client: redis.asyncio.Redis created with decode_responses=True
        self.client = client
        self.policy = policy or RetryPolicy()

    @staticmethod
    def key(member_id: str) -> str:
        return MEMBER_KEY.format(member_id=member_id)

    async def exists(self, member_id: str) -> bool:
        async def _exists() -> bool:
            return bool(await self.client.exists(self.key(member_id)))

        return await guarded("cache.exists", _exists, self.policy)

    async def save_member(self, member_id: str, password_hash: str, created_at: datetime) -> bool:
        async def _save() -> bool:
            await self.client.hset(
                self.key(member_id),
                mapping={"password_hash": password_hash, "created_at": created_at.isoformat()},
            )
            return True

        saved = await guarded("cache.save_member", _save, self.policy)
        logger.debug("Cached credentials for %s", member_id)
        return saved

    async def update_password(self, member_id: str, password_hash: str) -> bool:
        async def _update() -> bool:
            await self.client.hset(self.key(member_id), "password_hash", password_hash)
            return True

        return await guarded("cache.update_password", _update, self.policy)

    async def evict(self, member_id: str) -> bool:
        async def _evict() -> bool:
            return bool(await self.client.delete(self.key(member_id)))

        return await guarded("cache.evict", _evict, self.policy)
