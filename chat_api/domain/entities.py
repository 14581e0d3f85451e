"""Plain value structures exchanged between repositories, services and routers."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Member:
    member_id: str
    password_hash: str
    created_at: datetime


@dataclass(frozen=True)
class Room:
    room_id: str
    room_name: str
    room_password: str
    admin_member_id: Optional[str]
    member_ids: tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MemberView:
    """Member as exposed to callers: never carries the hash."""

    member_id: str
    created_at: datetime

    @classmethod
    def of(cls, member: Member) -> "MemberView":
        return cls(member_id=member.member_id, created_at=member.created_at)


@dataclass(frozen=True)
class MemberSummary:
    member_id: str


@dataclass(frozen=True)
class AuthToken:
    member_id: str
    access_token: str
    token_type: str = "bearer"


@dataclass(frozen=True)
class RoomListing:
    room_id: str
    room_name: str
    admin_member_id: Optional[str]
    members: tuple[MemberSummary, ...]
    created_at: Optional[datetime]

    @classmethod
    def of(cls, room: Room) -> "RoomListing":
        return cls(
            room_id=room.room_id,
            room_name=room.room_name,
            admin_member_id=room.admin_member_id,
            members=tuple(MemberSummary(member_id) for member_id in room.member_ids),
            created_at=room.created_at,
        )

    @property
    def member_ids(self) -> set[str]:
        return {summary.member_id for summary in self.members}


@dataclass(frozen=True)
class RoomSummary:
    room_id: str
    room_name: str
    admin_member_id: Optional[str]
    member_ids: tuple[str, ...]
    created_at: Optional[datetime]

    @classmethod
    def of(cls, room: Room) -> "RoomSummary":
        return cls(
            room_id=room.room_id,
            room_name=room.room_name,
            admin_member_id=room.admin_member_id,
            member_ids=room.member_ids,
            created_at=room.created_at,
        )


@dataclass(frozen=True)
class JoinConfirmation:
    room_id: str
    room_name: str
    member_id: str
    member_ids: tuple[str, ...]


@dataclass(frozen=True)
class RoomPage:
    items: list[RoomListing]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size
