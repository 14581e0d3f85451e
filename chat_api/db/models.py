"""SQLAlchemy models for members, rooms and room membership."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class Member(Base):
    __tablename__ = "members"

    member_id = Column(String(15), primary_key=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(32), primary_key=True)
    room_name = Column(String(255), nullable=False, index=True)
    room_password = Column(String(255), nullable=False)
    # Plain column: a room may outlive or lose its admin.
    admin_member_id = Column(String(15), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    memberships = relationship(
        "RoomMember",
        back_populates="room",
        cascade="all,delete-orphan",
        order_by="RoomMember.joined_at",
        lazy="selectin",
    )


class RoomMember(Base):
    __tablename__ = "room_members"

    room_id = Column(String(32), ForeignKey("rooms.id", ondelete="CASCADE"), primary_key=True)
    # No foreign key: joining a room does not require a registered member.
    member_id = Column(String(15), primary_key=True, index=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    room = relationship("Room", back_populates="memberships")
