from pydantic import BaseModel


class CreateRoomRequest(BaseModel):
    room_name: str
    room_password: str


class DeleteRoomRequest(BaseModel):
    password: str
