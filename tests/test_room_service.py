from __future__ import annotations

import asyncio

import pytest

from chat_api.core.errors import (
    InvalidRoomPasswordError,
    MemberNotFoundError,
    RoomNotFoundError,
    ValidationError,
)


async def _with_admin(c, member_id: str = "alice123") -> None:
    await c.identity.register(member_id, "Passw0rd!")


def test_room_lifecycle_scenario(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            room = await c.rooms.create_room("alice123", "Study", "pw1")
            assert room.member_ids == {"alice123"}
            assert room.admin_member_id == "alice123"
            assert [m.member_id for m in room.members] == ["alice123"]

            joined = await c.rooms.join_room(room.room_id, "bob456")
            assert joined.room_name == "Study"
            assert joined.member_id == "bob456"
            assert set(joined.member_ids) == {"alice123", "bob456"}

            left = await c.rooms.leave_room(room.room_id, "alice123")
            assert set(left.member_ids) == {"bob456"}

            with pytest.raises(InvalidRoomPasswordError):
                await c.rooms.delete_room(room.room_id, "wrong")

            deleted = await c.rooms.delete_room(room.room_id, "pw1")
            assert deleted.room_id == room.room_id
            assert set(deleted.member_ids) == {"bob456"}
            with pytest.raises(RoomNotFoundError):
                await c.rooms.get_room(room.room_id)

    asyncio.run(scenario())


def test_join_is_idempotent(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            room = await c.rooms.create_room("alice123", "Study", "pw1")
            first = await c.rooms.join_room(room.room_id, "bob456")
            second = await c.rooms.join_room(room.room_id, "bob456")
            assert sorted(first.member_ids) == sorted(second.member_ids)
            assert list(second.member_ids).count("bob456") == 1
            # the admin re-joining is a no-op as well
            again = await c.rooms.join_room(room.room_id, "alice123")
            assert sorted(again.member_ids) == ["alice123", "bob456"]

    asyncio.run(scenario())


def test_join_then_leave_restores_membership(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            room = await c.rooms.create_room("alice123", "Study", "pw1")
            await c.rooms.join_room(room.room_id, "carol789")
            before = (await c.rooms.get_room(room.room_id)).member_ids

            await c.rooms.join_room(room.room_id, "dave1234")
            await c.rooms.leave_room(room.room_id, "dave1234")

            assert (await c.rooms.get_room(room.room_id)).member_ids == before

    asyncio.run(scenario())


def test_wrong_password_leaves_room_untouched(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            room = await c.rooms.create_room("alice123", "Study", "pw1")
            await c.rooms.join_room(room.room_id, "bob456")
            with pytest.raises(InvalidRoomPasswordError):
                await c.rooms.delete_room(room.room_id, "PW1")
            with pytest.raises(InvalidRoomPasswordError):
                await c.rooms.delete_room(room.room_id, "")
            current = await c.rooms.get_room(room.room_id)
            assert current.member_ids == {"alice123", "bob456"}

    asyncio.run(scenario())


def test_missing_room_and_admin_are_reported(stack):
    async def scenario():
        async with stack() as c:
            with pytest.raises(MemberNotFoundError):
                await c.rooms.create_room("nobody99", "Study", "pw1")
            with pytest.raises(RoomNotFoundError):
                await c.rooms.join_room("missing", "bob456")
            with pytest.raises(RoomNotFoundError):
                await c.rooms.leave_room("missing", "bob456")
            with pytest.raises(RoomNotFoundError):
                await c.rooms.delete_room("missing", "pw1")

    asyncio.run(scenario())


def test_create_room_validates_input(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            with pytest.raises(ValidationError):
                await c.rooms.create_room("alice123", "   ", "pw1")
            with pytest.raises(ValidationError):
                await c.rooms.create_room("alice123", "Study", "")

    asyncio.run(scenario())


def test_admin_may_leave_and_room_may_become_empty(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            room = await c.rooms.create_room("alice123", "Solo", "pw1")
            summary = await c.rooms.leave_room(room.room_id, "alice123")
            assert summary.member_ids == ()
            assert summary.admin_member_id == "alice123"
            # leaving twice is harmless
            await c.rooms.leave_room(room.room_id, "alice123")
            assert (await c.rooms.get_room(room.room_id)).members == ()

    asyncio.run(scenario())


def test_concurrent_joins_are_not_lost(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            room = await c.rooms.create_room("alice123", "Crowd", "pw1")
            joiners = [f"user{n:04d}" for n in range(8)]
            await asyncio.gather(*(c.rooms.join_room(room.room_id, m) for m in joiners))
            current = await c.rooms.get_room(room.room_id)
            assert current.member_ids == {"alice123", *joiners}

    asyncio.run(scenario())


def test_list_rooms_pages_and_counts(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            for n in range(5):
                await c.rooms.create_room("alice123", f"Room {n}", "pw")

            first = await c.rooms.list_rooms(0, 2)
            assert first.total == 5
            assert first.total_pages == 3
            assert [r.room_name for r in first.items] == ["Room 0", "Room 1"]

            last = await c.rooms.list_rooms(2, 2)
            assert [r.room_name for r in last.items] == ["Room 4"]
            assert all(r.member_ids == {"alice123"} for r in last.items)

            empty = await c.rooms.list_rooms(5, 2)
            assert empty.items == []
            assert empty.total == 5

    asyncio.run(scenario())


def test_paging_arguments_are_validated(stack):
    async def scenario():
        async with stack() as c:
            with pytest.raises(ValidationError):
                await c.rooms.list_rooms(-1, 10)
            with pytest.raises(ValidationError):
                await c.rooms.list_rooms(0, 0)
            with pytest.raises(ValidationError):
                await c.rooms.search_rooms_by_title("x", 0, 1000)

    asyncio.run(scenario())


def test_rooms_for_member(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            study = await c.rooms.create_room("alice123", "Study", "pw1")
            await c.rooms.create_room("alice123", "Games", "pw2")
            await c.rooms.join_room(study.room_id, "bob456")

            bob_rooms = await c.rooms.list_rooms_for_member("bob456")
            assert [r.room_name for r in bob_rooms] == ["Study"]
            assert bob_rooms[0].member_ids == {"alice123", "bob456"}

            alice_rooms = await c.rooms.list_rooms_for_member("alice123")
            assert {r.room_name for r in alice_rooms} == {"Study", "Games"}
            assert await c.rooms.list_rooms_for_member("nobody99") == []

    asyncio.run(scenario())


def test_search_by_title_matches_substrings(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            for name in ("Python Study", "Java study group", "Movie night", "100% fun"):
                await c.rooms.create_room("alice123", name, "pw")

            hits = await c.rooms.search_rooms_by_title("study", 0, 10)
            assert [r.room_name for r in hits] == ["Python Study", "Java study group"]

            paged = await c.rooms.search_rooms_by_title("study", 1, 1)
            assert [r.room_name for r in paged] == ["Java study group"]

            literal = await c.rooms.search_rooms_by_title("%", 0, 10)
            assert [r.room_name for r in literal] == ["100% fun"]

            assert await c.rooms.search_rooms_by_title("chess", 0, 10) == []

    asyncio.run(scenario())


def test_search_by_title_folds_non_ascii_case(stack):
    async def scenario():
        async with stack() as c:
            await _with_admin(c)
            await c.rooms.create_room("alice123", "ÜBER Café", "pw")
            await c.rooms.create_room("alice123", "Plain room", "pw")

            exact = await c.rooms.search_rooms_by_title("ÜBER Café", 0, 10)
            assert [r.room_name for r in exact] == ["ÜBER Café"]

            folded = await c.rooms.search_rooms_by_title("über CAFÉ", 0, 10)
            assert [r.room_name for r in folded] == ["ÜBER Café"]

    asyncio.run(scenario())
