"""Profile lookup, password change and account removal for a signed-in member."""

from __future__ import annotations

import asyncio

from argon2 import PasswordHasher

from chat_api.core.errors import CredentialMismatchError, InfrastructureError, MemberNotFoundError
from chat_api.core.logging import get_logger
from chat_api.core.security import hash_password, verify_password
from chat_api.domain.entities import Member, MemberView
from chat_api.domain.members import validate_new_password
from chat_api.repositories.credential_cache import CredentialCache
from chat_api.repositories.member_repository import MemberRepository

logger = get_logger(__name__)


class UserInfoService:
    def __init__(self, members: MemberRepository, cache: CredentialCache, hasher: PasswordHasher) -> None:
        self.members = members
        self.cache = cache
        self.hasher = hasher

    async def _require_member(self, member_id: str) -> Member:
        member = await self.members.find_by_member_id(member_id)
        if member is None:
            raise MemberNotFoundError()
        return member

    async def get_member(self, member_id: str) -> MemberView:
        member = await self._require_member(member_id)
        return MemberView.of(member)

    async def change_password(self, member_id: str, current_password: str, new_password: str) -> MemberView:
        """Replace the stored hash once the current password checks out."""
        validate_new_password(new_password)
        member = await self._require_member(member_id)
        matches = await asyncio.to_thread(verify_password, self.hasher, current_password or "", member.password_hash)
        if not matches:
            logger.error("Password change rejected for %s", member_id)
            raise CredentialMismatchError()

        new_hash = await asyncio.to_thread(hash_password, self.hasher, new_password)
        if not await self.members.update_password(member_id, new_hash):
            raise MemberNotFoundError()
        logger.info("Password updated for %s", member_id)
        try:
            await self.cache.update_password(member_id, new_hash)
        except InfrastructureError:
            logger.warning("Could not refresh cached credentials for %s", member_id)
        return MemberView.of(member)

    async def delete_member(self, member_id: str) -> None:
        await self._require_member(member_id)
        if not await self.members.delete(member_id):
            raise MemberNotFoundError()
        logger.info("Member deleted: %s", member_id)
        try:
            await self.cache.evict(member_id)
        except InfrastructureError:
            logger.warning("Could not evict %s from credential cache", member_id)
