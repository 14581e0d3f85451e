"""Utility script to create the initial database schema."""
from __future__ import annotations

import asyncio

from sqlalchemy.exc import SQLAlchemyError

from chat_api.core.config import get_settings

from .session import Base, Database
from . import models  # noqa: F401  # ensure models are imported for metadata


async def create_all(database: Database) -> None:
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _main() -> None:
    database = Database.from_settings(get_settings())
    try:
        await create_all(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    try:
        asyncio.run(_main())
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
