"""Durable room store: room records plus their membership sets."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError

from chat_api.core.logging import get_logger
from chat_api.core.resilience import RetryPolicy, guarded
from chat_api.db import models
from chat_api.db.session import Database
from chat_api.domain.entities import Room
from chat_api.repositories.member_repository import as_utc

logger = get_logger(__name__)


def _to_room(entity: models.Room) -> Room:
    return Room(
        room_id=entity.id,
        room_name=entity.room_name,
        room_password=entity.room_password,
        admin_member_id=entity.admin_member_id,
        member_ids=tuple(m.member_id for m in entity.memberships),
        created_at=as_utc(entity.created_at),
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RoomRepository:
    """
    CRUD helpers for rooms.

    Membership changes are single INSERT/DELETE statements on ``room_members``
    whose composite primary key makes the membership a set, so concurrent
    joins/leaves never lose updates.
    """

    def __init__(self, database: Database, policy: RetryPolicy | None = None) -> None:
        self.database = database
        self.policy = policy or RetryPolicy()

    async def find_by_id(self, room_id: str) -> Optional[Room]:
        async def _find() -> Optional[Room]:
            async with self.database.session() as session:
                entity = await session.get(models.Room, room_id)
                return _to_room(entity) if entity else None

        return await guarded("rooms.find", _find, self.policy)

    async def save(self, room: Room) -> Room:
        """Insert a new room together with its initial members."""

        async def _save() -> Room:
            now = room.created_at or datetime.now(timezone.utc)
            async with self.database.session() as session:
                entity = models.Room(
                    id=room.room_id,
                    room_name=room.room_name,
                    room_password=room.room_password,
                    admin_member_id=room.admin_member_id,
                    created_at=now,
                )
                entity.memberships = [
                    models.RoomMember(member_id=member_id, joined_at=now)
                    for member_id in dict.fromkeys(room.member_ids)
                ]
                session.add(entity)
                await session.commit()
                return _to_room(entity)

        return await guarded("rooms.save", _save, self.policy, retry=False)

    async def delete(self, room: Room) -> bool:
        async def _delete() -> bool:
            async with self.database.session() as session:
                await session.execute(delete(models.RoomMember).where(models.RoomMember.room_id == room.room_id))
                result = await session.execute(delete(models.Room).where(models.Room.id == room.room_id))
                await session.commit()
                return result.rowcount > 0

        return await guarded("rooms.delete", _delete, self.policy, retry=False)

    async def add_member(self, room_id: str, member_id: str) -> Optional[Room]:
        """Atomically add ``member_id``; adding an existing member is a no-op."""

        async def _add() -> None:
            async with self.database.session() as session:
                stmt = insert(models.RoomMember).values(
                    room_id=room_id,
                    member_id=member_id,
                    joined_at=datetime.now(timezone.utc),
                )
                try:
                    await session.execute(stmt)
                    await session.commit()
                except IntegrityError:
                    # Already a member, or the room vanished meanwhile.
                    await session.rollback()
                    logger.debug("Membership (%s, %s) not inserted", room_id, member_id)

        await guarded("rooms.add_member", _add, self.policy)
        return await self.find_by_id(room_id)

    async def remove_member(self, room_id: str, member_id: str) -> Optional[Room]:
        async def _remove() -> None:
            async with self.database.session() as session:
                stmt = delete(models.RoomMember).where(
                    models.RoomMember.room_id == room_id,
                    models.RoomMember.member_id == member_id,
                )
                await session.execute(stmt)
                await session.commit()

        await guarded("rooms.remove_member", _remove, self.policy)
        return await self.find_by_id(room_id)

    async def find_page(self, page: int, size: int) -> list[Room]:
        async def _page() -> list[Room]:
            async with self.database.session() as session:
                stmt = (
                    select(models.Room)
                    .order_by(models.Room.created_at, models.Room.id)
                    .offset(page * size)
                    .limit(size)
                )
                return [_to_room(entity) for entity in (await session.execute(stmt)).scalars().all()]

        return await guarded("rooms.find_page", _page, self.policy)

    async def count(self) -> int:
        async def _count() -> int:
            async with self.database.session() as session:
                stmt = select(func.count()).select_from(models.Room)
                return int((await session.execute(stmt)).scalar_one())

        return await guarded("rooms.count", _count, self.policy)

    async def find_by_title(self, title: str, page: int, size: int) -> list[Room]:
        """Case-insensitive substring match on the room name."""

        async def _search() -> list[Room]:
            pattern = f"%{_escape_like(title.lower())}%"
            async with self.database.session() as session:
                stmt = (
                    select(models.Room)
                    .where(func.lower(models.Room.room_name).like(pattern, escape="\\"))
                    .order_by(models.Room.created_at, models.Room.id)
                    .offset(page * size)
                    .limit(size)
                )
                return [_to_room(entity) for entity in (await session.execute(stmt)).scalars().all()]

        return await guarded("rooms.find_by_title", _search, self.policy)

    async def find_by_member_id(self, member_id: str) -> list[Room]:
        async def _find() -> list[Room]:
            async with self.database.session() as session:
                stmt = (
                    select(models.Room)
                    .join(models.RoomMember, models.RoomMember.room_id == models.Room.id)
                    .where(models.RoomMember.member_id == member_id)
                    .order_by(models.Room.created_at, models.Room.id)
                )
                return [_to_room(entity) for entity in (await session.execute(stmt)).scalars().all()]

        return await guarded("rooms.find_by_member_id", _find, self.policy)
