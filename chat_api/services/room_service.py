"""Room creation, membership changes, deletion and listings."""

from __future__ import annotations

import asyncio
import secrets
import uuid
from datetime import datetime, timezone

from chat_api.core.errors import (
    InvalidRoomPasswordError,
    MemberNotFoundError,
    RoomNotFoundError,
    ValidationError,
)
from chat_api.core.logging import get_logger
from chat_api.domain.entities import (
    JoinConfirmation,
    Room,
    RoomListing,
    RoomPage,
    RoomSummary,
)
from chat_api.repositories.member_repository import MemberRepository
from chat_api.repositories.room_repository import RoomRepository

logger = get_logger(__name__)


class RoomService:
    """
    Orchestrates the room store and the member store.

    Membership is only ever changed through the store's atomic add/remove; a
    room is re-read after each change so callers see the stored state.
    """

    def __init__(self, rooms: RoomRepository, members: MemberRepository, *, max_page_size: int = 100) -> None:
        self.rooms = rooms
        self.members = members
        self.max_page_size = max_page_size

    # -------------------------------------- helpers --------------------------------------
    async def _require_room(self, room_id: str) -> Room:
        room = await self.rooms.find_by_id(room_id)
        if room is None:
            raise RoomNotFoundError()
        return room

    async def _require_member(self, member_id: str) -> None:
        if not await self.members.exists_by_member_id(member_id):
            raise MemberNotFoundError()

    def _check_paging(self, page: int, size: int) -> None:
        if page < 0:
            raise ValidationError("Page must be zero or greater")
        if size < 1 or size > self.max_page_size:
            raise ValidationError(f"Size must be between 1 and {self.max_page_size}")

    @staticmethod
    def _password_matches(stored: str, supplied: str | None) -> bool:
        return secrets.compare_digest((stored or "").encode(), (supplied or "").encode())

    # -------------------------------------- lifecycle --------------------------------------
    async def create_room(self, admin_member_id: str, room_name: str, room_password: str) -> RoomListing:
        name = (room_name or "").strip()
        if not name:
            raise ValidationError("Room name required")
        if not room_password:
            raise ValidationError("Room password required")
        await self._require_member(admin_member_id)

        room = await self.rooms.save(
            Room(
                room_id=uuid.uuid4().hex,
                room_name=name,
                room_password=room_password,
                admin_member_id=admin_member_id,
                member_ids=(admin_member_id,),
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Room %s (%s) created by %s", room.room_name, room.room_id, admin_member_id)
        return RoomListing.of(room)

    async def join_room(self, room_id: str, member_id: str) -> JoinConfirmation:
        await self._require_room(room_id)
        updated = await self.rooms.add_member(room_id, member_id)
        if updated is None:
            raise RoomNotFoundError()
        logger.info("%s joined room %s", member_id, room_id)
        return JoinConfirmation(
            room_id=updated.room_id,
            room_name=updated.room_name,
            member_id=member_id,
            member_ids=updated.member_ids,
        )

    async def leave_room(self, room_id: str, member_id: str) -> RoomSummary:
        await self._require_room(room_id)
        updated = await self.rooms.remove_member(room_id, member_id)
        if updated is None:
            raise RoomNotFoundError()
        logger.info("%s left room %s", member_id, room_id)
        if member_id == updated.admin_member_id:
            logger.warning("Admin %s left room %s", member_id, room_id)
        if not updated.member_ids:
            logger.warning("Room %s has no members left", room_id)
        return RoomSummary.of(updated)

    async def delete_room(self, room_id: str, password: str) -> RoomSummary:
        room = await self._require_room(room_id)
        if not self._password_matches(room.room_password, password):
            logger.error("Wrong password supplied to delete room %s", room_id)
            raise InvalidRoomPasswordError()
        await self.rooms.delete(room)
        logger.info("Room %s (%s) deleted", room.room_name, room_id)
        return RoomSummary.of(room)

    async def get_room(self, room_id: str) -> RoomListing:
        return RoomListing.of(await self._require_room(room_id))

    # -------------------------------------- listings --------------------------------------
    async def list_rooms(self, page: int, size: int) -> RoomPage:
        """Page and total are fetched concurrently; they are not one snapshot."""
        self._check_paging(page, size)
        rooms, total = await asyncio.gather(self.rooms.find_page(page, size), self.rooms.count())
        logger.info("Listed rooms page=%d size=%d total=%d", page, size, total)
        return RoomPage(items=[RoomListing.of(room) for room in rooms], page=page, size=size, total=total)

    async def list_rooms_for_member(self, member_id: str) -> list[RoomListing]:
        rooms = await self.rooms.find_by_member_id(member_id)
        logger.info("Found %d room(s) for %s", len(rooms), member_id)
        return [RoomListing.of(room) for room in rooms]

    async def search_rooms_by_title(self, title: str, page: int, size: int) -> list[RoomListing]:
        self._check_paging(page, size)
        rooms = await self.rooms.find_by_title(title or "", page, size)
        return [RoomListing.of(room) for room in rooms]
