from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Optional

import redis.asyncio as redis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chat_api.core.config import Settings, get_settings
from chat_api.core.errors import ChatError, InfrastructureError
from chat_api.core.logging import get_logger, setup_logging
from chat_api.core.resilience import RetryPolicy
from chat_api.core.security import build_password_hasher
from chat_api.core.tokens import TokenIssuer
from chat_api.db.create_tables import create_all
from chat_api.db.session import Database
from chat_api.repositories.credential_cache import CredentialCache
from chat_api.repositories.member_repository import MemberRepository
from chat_api.repositories.room_repository import RoomRepository
from chat_api.routers import members as members_router
from chat_api.routers import rooms as rooms_router
from chat_api.schemas.envelope import fail
from chat_api.services.identity_service import IdentityService
from chat_api.services.room_service import RoomService
from chat_api.services.user_info_service import UserInfoService

logger = get_logger(__name__)


@dataclass
class Components:
    database: Database
    cache_client: Any
    tokens: TokenIssuer
    identity: IdentityService
    user_info: UserInfoService
    rooms: RoomService


def build_components(settings: Settings, *, cache_client: Any = None) -> Components:
    """Wire stores, cache and services from one immutable Settings."""
    policy = RetryPolicy.from_settings(settings)
    database = Database.from_settings(settings)
    if cache_client is None:
        cache_client = redis.from_url(settings.redis_url, decode_responses=True)
    hasher = build_password_hasher(settings)
    tokens = TokenIssuer.from_settings(settings)

    members = MemberRepository(database, policy)
    cache = CredentialCache(cache_client, policy)
    rooms = RoomRepository(database, policy)
    return Components(
        database=database,
        cache_client=cache_client,
        tokens=tokens,
        identity=IdentityService(members, cache, tokens, hasher),
        user_info=UserInfoService(members, cache, hasher),
        rooms=RoomService(rooms, members, max_page_size=settings.max_page_size),
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    cache_client: Any = None,
    create_schema: Optional[bool] = None,
) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    if create_schema is None:
        create_schema = settings.app_env != "prod"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        components = build_components(settings, cache_client=cache_client)
        if create_schema:
            await create_all(components.database)
        app.state.components = components
        logger.info("Chat API started (env=%s)", settings.app_env)
        try:
            yield
        finally:
            if cache_client is None:
                await components.cache_client.aclose()
            await components.database.dispose()
            logger.info("Chat API stopped")

    app = FastAPI(title="Chat API", lifespan=lifespan)

    @app.exception_handler(ChatError)
    async def chat_error_handler(request: Request, exc: ChatError):
        if isinstance(exc, InfrastructureError):
            logger.error("Unexpected Exception on %s %s", request.method, request.url.path)
        else:
            logger.error("CustomError Exception :%s", exc.message)
        return JSONResponse(status_code=exc.status_code, content=fail(exc.message, exc.code))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=fail("Invalid input", "invalid_input"))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error("Unexpected Exception :%r", exc, exc_info=exc)
        return JSONResponse(status_code=500, content=fail(InfrastructureError.default_message, InfrastructureError.code))

    app.include_router(members_router.router)
    app.include_router(rooms_router.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
