from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from chat_api.routers.deps import current_member_id, room_service
from chat_api.schemas.envelope import success
from chat_api.schemas.rooms import CreateRoomRequest, DeleteRoomRequest
from chat_api.services.room_service import RoomService

router = APIRouter(prefix="/api/chat/room", tags=["rooms"])


@router.get("")
async def list_rooms(
    page: int = Query(0),
    size: int = Query(10),
    service: RoomService = Depends(room_service),
):
    result = await service.list_rooms(page, size)
    return success(
        "Rooms retrieved",
        {
            "content": result.items,
            "page": result.page,
            "size": result.size,
            "total_elements": result.total,
            "total_pages": result.total_pages,
        },
    )


@router.post("", status_code=201)
async def create_room(
    body: CreateRoomRequest,
    member_id: str = Depends(current_member_id),
    service: RoomService = Depends(room_service),
):
    room = await service.create_room(member_id, body.room_name, body.room_password)
    return success("Room created", room)


@router.get("/mine")
async def my_rooms(
    member_id: str = Depends(current_member_id),
    service: RoomService = Depends(room_service),
):
    return success("Rooms retrieved", await service.list_rooms_for_member(member_id))


@router.get("/search")
async def search_rooms(
    title: str = Query(""),
    page: int = Query(0),
    size: int = Query(10),
    service: RoomService = Depends(room_service),
):
    return success("Rooms retrieved", await service.search_rooms_by_title(title, page, size))


@router.get("/{room_id}")
async def get_room(room_id: str, service: RoomService = Depends(room_service)):
    return success("Room retrieved", await service.get_room(room_id))


@router.post("/{room_id}/join")
async def join_room(
    room_id: str,
    member_id: str = Depends(current_member_id),
    service: RoomService = Depends(room_service),
):
    return success("Joined room", await service.join_room(room_id, member_id))


@router.post("/{room_id}/leave")
async def leave_room(
    room_id: str,
    member_id: str = Depends(current_member_id),
    service: RoomService = Depends(room_service),
):
    return success("Left room", await service.leave_room(room_id, member_id))


@router.delete("/{room_id}")
async def delete_room(
    room_id: str,
    body: DeleteRoomRequest,
    service: RoomService = Depends(room_service),
):
    return success("Room deleted", await service.delete_room(room_id, body.password))
