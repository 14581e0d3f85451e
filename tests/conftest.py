from __future__ import annotations

import dataclasses
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import pytest

# Garante que o pacote chat_api seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chat_api.app import build_components  # noqa: E402
from chat_api.core.config import Settings  # noqa: E402
from chat_api.db.create_tables import create_all  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the part of redis.asyncio.Redis the cache touches."""

    def __init__(self) -> None:
        self.data: dict[str, dict[str, str]] = {}
        self.fail = False
        self.calls = 0

    def _check(self) -> None:
        self.calls += 1
        if self.fail:
            raise ConnectionError("redis unavailable")

    async def exists(self, *keys: str) -> int:
        self._check()
        return sum(1 for key in keys if key in self.data)

    async def hset(self, name: str, key=None, value=None, mapping=None) -> int:
        self._check()
        entry = self.data.setdefault(name, {})
        added = 0
        items = dict(mapping or {})
        if key is not None:
            items[key] = value
        for field, field_value in items.items():
            added += field not in entry
            entry[field] = str(field_value)
        return added

    async def delete(self, *names: str) -> int:
        self._check()
        return sum(1 for name in names if self.data.pop(name, None) is not None)

    async def aclose(self) -> None:
        return None


def make_settings(tmp_path: Path, **overrides) -> Settings:
    settings = Settings(
        app_env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        redis_url="redis://localhost:6379/15",
        jwt_secret="test-secret-key",
        jwt_algorithm="HS256",
        token_ttl_seconds=3600,
        password_time_cost=1,
        password_memory_cost=1024,
        store_timeout_seconds=5.0,
        store_retry_attempts=2,
        store_retry_backoff_seconds=0.0,
        max_page_size=50,
        log_level="DEBUG",
    )
    return dataclasses.replace(settings, **overrides)


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def stack(settings, fake_redis):
    """Factory for a fully wired set of components over a temporary SQLite file."""

    @asynccontextmanager
    async def _stack():
        components = build_components(settings, cache_client=fake_redis)
        await create_all(components.database)
        try:
            yield components
        finally:
            await components.database.dispose()

    return _stack
