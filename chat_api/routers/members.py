from __future__ import annotations

from fastapi import APIRouter, Depends

from chat_api.core.logging import get_logger
from chat_api.routers.deps import current_member_id, identity_service, user_info_service
from chat_api.schemas.envelope import success
from chat_api.schemas.members import CredentialsRequest, PasswordChangeRequest
from chat_api.services.identity_service import IdentityService
from chat_api.services.user_info_service import UserInfoService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/member", tags=["member"])


@router.post("/register", status_code=201)
async def register(body: CredentialsRequest, service: IdentityService = Depends(identity_service)):
    member = await service.register(body.member_id, body.password)
    return success("Member registered", member)


@router.post("/login")
async def login(body: CredentialsRequest, service: IdentityService = Depends(identity_service)):
    token = await service.authenticate(body.member_id, body.password)
    return success("Login succeeded", token)


@router.get("/info")
async def get_info(
    member_id: str = Depends(current_member_id),
    service: UserInfoService = Depends(user_info_service),
):
    logger.info("memberId:%s", member_id)
    return success("User info retrieved", await service.get_member(member_id))


@router.patch("/info")
async def change_password(
    body: PasswordChangeRequest,
    member_id: str = Depends(current_member_id),
    service: UserInfoService = Depends(user_info_service),
):
    member = await service.change_password(member_id, body.current_password, body.new_password)
    return success("Password updated", {"member_id": member.member_id})


@router.delete("/info")
async def delete_member(
    member_id: str = Depends(current_member_id),
    service: UserInfoService = Depends(user_info_service),
):
    await service.delete_member(member_id)
    return success("Member deleted")
