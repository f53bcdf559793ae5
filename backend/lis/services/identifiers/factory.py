"""Counter store selection from configuration."""

import redis.asyncio as redis
from sqlalchemy.ext.asyncio import AsyncEngine

from lis.config import Settings
from lis.services.identifiers.redis_store import RedisCounterStore
from lis.services.identifiers.sql_store import SqlCounterStore
from lis.services.identifiers.store import CounterStore


def build_redis_client(config: Settings) -> redis.Redis:
    """Client on a blocking pool, so callers past the limit queue for a connection.

    The client owns the pool; ``aclose()`` disconnects it.
    """
    pool = redis.BlockingConnectionPool.from_url(
        config.redis_url,
        max_connections=config.redis_max_connections,
        timeout=config.redis_pool_timeout,
        decode_responses=True,
    )
    return redis.Redis.from_pool(pool)


def build_counter_store(config: Settings, *, engine: AsyncEngine | None = None) -> CounterStore:
    """Create the store named by ``config.counter_backend``.

    The database backend reuses ``engine`` when given, otherwise the
    application's shared engine.
    """
    if config.counter_backend == "redis":
        return RedisCounterStore(build_redis_client(config), key_prefix=config.counter_key_prefix)

    if engine is None:
        from lis.db.session import engine as app_engine

        engine = app_engine
    return SqlCounterStore(engine)
