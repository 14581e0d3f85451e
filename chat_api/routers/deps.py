"""FastAPI dependencies resolving services and the signed-in member."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chat_api.core.errors import InvalidTokenError
from chat_api.services.identity_service import IdentityService
from chat_api.services.room_service import RoomService
from chat_api.services.user_info_service import UserInfoService

_bearer = HTTPBearer(auto_error=False)


def _components(request: Request):
    components = getattr(request.app.state, "components", None)
    if components is None:
        raise RuntimeError("Application components are not initialised")
    return components


def identity_service(request: Request) -> IdentityService:
    return _components(request).identity


def user_info_service(request: Request) -> UserInfoService:
    return _components(request).user_info


def room_service(request: Request) -> RoomService:
    return _components(request).rooms


def current_member_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    """Member id carried by the bearer token."""
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        raise InvalidTokenError()
    return _components(request).tokens.verify(credentials.credentials)
