"""
Registration and authentication use cases.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from argon2 import PasswordHasher

from chat_api.core.errors import (
    CredentialMismatchError,
    DuplicateMemberIdError,
    InfrastructureError,
    MemberNotFoundError,
)
from chat_api.core.logging import get_logger
from chat_api.core.security import hash_password, verify_password
from chat_api.core.tokens import TokenIssuer
from chat_api.domain.entities import AuthToken, Member, MemberView
from chat_api.domain.members import validate_credentials
from chat_api.repositories.credential_cache import CredentialCache
from chat_api.repositories.member_repository import MemberRepository

logger = get_logger(__name__)


class IdentityService:
    """Handles member registration and login."""

    def __init__(
        self,
        members: MemberRepository,
        cache: CredentialCache,
        tokens: TokenIssuer,
        hasher: PasswordHasher,
    ) -> None:
        self.members = members
        self.cache = cache
        self.tokens = tokens
        self.hasher = hasher
        # Verified against for unknown ids, so they cost the same as wrong passwords.
        self._dummy_hash = hash_password(hasher, "Unused-placeholder-0")

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def _cached_as_taken(self, member_id: str) -> bool:
        try:
            return await self.cache.exists(member_id)
        except InfrastructureError:
            logger.warning("Credential cache unavailable, checking durable store only: %s", member_id)
            return False

    async def _check_duplicate_id(self, member_id: str) -> None:
        if await self._cached_as_taken(member_id):
            logger.error("Duplicate member id found in cache: %s", member_id)
            raise DuplicateMemberIdError()
        if await self.members.exists_by_member_id(member_id):
            logger.error("Duplicate member id found in database: %s", member_id)
            raise DuplicateMemberIdError()
        logger.info("Member id is free in both cache and database: %s", member_id)

    async def _verify(self, password: str, stored_hash: str | None) -> bool:
        return await asyncio.to_thread(verify_password, self.hasher, password, stored_hash)

    async def _burn_verification(self, password: str) -> None:
        await self._verify(password, self._dummy_hash)

    # -------------------------------------- registration --------------------------------------
    async def register(self, member_id: str, password: str) -> MemberView:
        validate_credentials(member_id, password)
        await self._check_duplicate_id(member_id)

        password_hash = await asyncio.to_thread(hash_password, self.hasher, password)
        member = await self.members.save(
            Member(member_id=member_id, password_hash=password_hash, created_at=self._now())
        )
        logger.info("Registered member stored in database: %s", member.member_id)

        try:
            await self.cache.save_member(member.member_id, member.password_hash, member.created_at)
            logger.info("Registered member mirrored to cache: %s", member.member_id)
        except InfrastructureError:
            logger.warning("Could not mirror member %s to cache; database remains authoritative", member.member_id)
        return MemberView.of(member)

    # -------------------------------------- login --------------------------------------
    async def authenticate(self, member_id: str, password: str) -> AuthToken:
        member = await self.members.find_by_member_id(member_id or "")
        if member is None:
            await self._burn_verification(password or "")
            logger.error("Login failed for %s", member_id)
            raise MemberNotFoundError()
        if not await self._verify(password or "", member.password_hash):
            logger.error("Login failed for %s", member_id)
            raise CredentialMismatchError()
        token = self.tokens.issue(member.member_id)
        logger.info("Login succeeded for %s", member.member_id)
        return AuthToken(member_id=member.member_id, access_token=token)
