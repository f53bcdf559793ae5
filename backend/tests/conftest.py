"""Shared fixtures for identifier allocation tests."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import fakeredis
import pytest
import pytest_asyncio
import redis.asyncio as redis
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from lis.db.session import create_tables
from lis.services.identifiers.allocator import SequenceAllocator
from lis.services.identifiers.exceptions import StoreUnavailable
from lis.services.identifiers.memory_store import InMemoryCounterStore
from lis.services.identifiers.sql_store import SqlCounterStore
from lis.services.identifiers.store import CounterRecord

NOW = datetime(2025, 3, 5, 10, 30, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return NOW


class OutageStore(InMemoryCounterStore):
    """In-memory store that fails every operation while ``down`` is set."""

    def __init__(self, initial: dict[str, int] | None = None):
        super().__init__(initial)
        self.down = False
        self.calls = 0

    def _check(self, name: str | None) -> None:
        self.calls += 1
        if self.down:
            raise StoreUnavailable(name, "Counter store unavailable: simulated outage")

    async def upsert_and_get(self, name: str) -> CounterRecord:
        self._check(name)
        return await super().upsert_and_get(name)

    async def increment_and_fetch(self, name: str) -> int:
        self._check(name)
        return await super().increment_and_fetch(name)


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


async def open_sqlite_engine(path: Path) -> AsyncEngine:
    """Engine on a fresh SQLite file with the counters table created."""
    # Generous busy timeout so concurrent writers queue instead of failing
    engine = create_async_engine(sqlite_url(path), connect_args={"timeout": 30})
    await create_tables(engine)
    return engine


def fake_redis_client(max_connections: int = 20) -> redis.Redis:
    """Client on a blocking pool whose connections talk to a private in-process server."""
    template = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    pool = redis.BlockingConnectionPool(
        connection_class=template.connection_pool.connection_class,
        max_connections=max_connections,
        timeout=10,
        **template.connection_pool.connection_kwargs,
    )
    return redis.Redis.from_pool(pool)


@pytest.fixture
def memory_store() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest.fixture
def allocator(memory_store: InMemoryCounterStore) -> SequenceAllocator:
    return SequenceAllocator(memory_store, clock=fixed_clock)


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    engine = await open_sqlite_engine(tmp_path / "counters.db")
    yield engine
    await engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: AsyncEngine) -> SqlCounterStore:
    return SqlCounterStore(sqlite_engine)
