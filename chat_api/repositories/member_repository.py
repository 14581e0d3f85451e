"""Durable member store backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from chat_api.core.errors import DuplicateMemberIdError
from chat_api.core.logging import get_logger
from chat_api.core.resilience import RetryPolicy, guarded
from chat_api.db import models
from chat_api.db.session import Database
from chat_api.domain.entities import Member

logger = get_logger(__name__)


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is None:
        return None
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_member(entity: models.Member) -> Member:
    return Member(
        member_id=entity.member_id,
        password_hash=entity.password_hash,
        created_at=as_utc(entity.created_at),
    )


class MemberRepository:
    """Authoritative member records; the primary key enforces id uniqueness."""

    def __init__(self, database: Database, policy: RetryPolicy | None = None) -> None:
        self.database = database
        self.policy = policy or RetryPolicy()

    async def exists_by_member_id(self, member_id: str) -> bool:
        async def _exists() -> bool:
            async with self.database.session() as session:
                stmt = select(models.Member.member_id).where(models.Member.member_id == member_id).limit(1)
                return (await session.execute(stmt)).first() is not None

        return await guarded("members.exists", _exists, self.policy)

    async def find_by_member_id(self, member_id: str) -> Optional[Member]:
        async def _find() -> Optional[Member]:
            async with self.database.session() as session:
                entity = await session.get(models.Member, member_id)
                return _to_member(entity) if entity else None

        return await guarded("members.find", _find, self.policy)

    async def save(self, member: Member) -> Member:
        """Insert a new member; a second insert of the same id is rejected."""

        async def _save() -> Member:
            async with self.database.session() as session:
                entity = models.Member(
                    member_id=member.member_id,
                    password_hash=member.password_hash,
                    created_at=member.created_at,
                )
                session.add(entity)
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    logger.warning("Member id already stored: %s", member.member_id)
                    raise DuplicateMemberIdError()
                return _to_member(entity)

        return await guarded("members.save", _save, self.policy, retry=False)

    async def update_password(self, member_id: str, password_hash: str) -> bool:
        async def _update() -> bool:
            async with self.database.session() as session:
                stmt = (
                    update(models.Member)
                    .where(models.Member.member_id == member_id)
                    .values(password_hash=password_hash)
                )
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount > 0

        return await guarded("members.update_password", _update, self.policy)

    async def delete(self, member_id: str) -> bool:
        """Remove the member and every membership row pointing at it."""

        async def _delete() -> bool:
            async with self.database.session() as session:
                await session.execute(delete(models.RoomMember).where(models.RoomMember.member_id == member_id))
                result = await session.execute(delete(models.Member).where(models.Member.member_id == member_id))
                await session.commit()
                return result.rowcount > 0

        return await guarded("members.delete", _delete, self.policy)
