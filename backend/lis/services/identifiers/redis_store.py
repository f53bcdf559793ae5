"""Counter store backed by Redis hashes.

Each counter lives in one hash (``value``, ``created_at``, ``updated_at``).
All mutations run as Lua scripts, which Redis executes atomically.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from lis.services.identifiers.exceptions import CounterRegression, StoreUnavailable
from lis.services.identifiers.store import INITIAL_VALUE, CounterRecord, check_advance_value
from lis.utils.datetime_utils import utc_now

logger = structlog.get_logger(__name__)

# KEYS[1] = counter key, ARGV[1] = initial value, ARGV[2] = timestamp
INCREMENT_SCRIPT = """
if redis.call('HEXISTS', KEYS[1], 'value') == 0 then
  redis.call('HSET', KEYS[1], 'value', ARGV[1], 'created_at', ARGV[2])
end
local value = redis.call('HINCRBY', KEYS[1], 'value', 1)
redis.call('HSET', KEYS[1], 'updated_at', ARGV[2])
return value
"""

# KEYS[1] = counter key, ARGV[1] = initial value, ARGV[2] = timestamp
UPSERT_SCRIPT = """
if redis.call('HEXISTS', KEYS[1], 'value') == 0 then
  redis.call('HSET', KEYS[1], 'value', ARGV[1], 'created_at', ARGV[2], 'updated_at', ARGV[2])
end
return redis.call('HMGET', KEYS[1], 'value', 'created_at', 'updated_at')
"""

# KEYS[1] = counter key, ARGV[1] = target value, ARGV[2] = timestamp
# Returns {0, current} when refusing, {1, value, created_at, updated_at} otherwise
ADVANCE_SCRIPT = """
local current = tonumber(redis.call('HGET', KEYS[1], 'value'))
local target = tonumber(ARGV[1])
if current and current > target then
  return {0, current}
end
if not current then
  redis.call('HSET', KEYS[1], 'created_at', ARGV[2])
end
redis.call('HSET', KEYS[1], 'value', target, 'updated_at', ARGV[2])
local stamps = redis.call('HMGET', KEYS[1], 'created_at', 'updated_at')
return {1, target, stamps[1], stamps[2]}
"""


def _decode(raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, bytes):
        return raw.decode("utf-8")
    return str(raw)


def _parse_time(raw: Any) -> datetime | None:
    text = _decode(raw)
    return datetime.fromisoformat(text) if text else None


class RedisCounterStore:
    """Counters stored under ``{key_prefix}{name}``."""

    def __init__(self, client: redis.Redis, *, key_prefix: str = "lis:counter:"):
        self._client = client
        self._key_prefix = key_prefix
        self._increment = client.register_script(INCREMENT_SCRIPT)
        self._upsert = client.register_script(UPSERT_SCRIPT)
        self._advance = client.register_script(ADVANCE_SCRIPT)

    async def aclose(self) -> None:
        """Close the client and its connection pool."""
        await self._client.aclose()

    def _key(self, name: str) -> str:
        return f"{self._key_prefix}{name}"

    def _record(self, name: str, fields: Sequence[Any]) -> CounterRecord:
        value, created_at, updated_at = fields
        return CounterRecord(
            name=name,
            value=int(_decode(value) or INITIAL_VALUE),
            created_at=_parse_time(created_at),
            updated_at=_parse_time(updated_at),
        )

    @asynccontextmanager
    async def _guard(self, name: str | None) -> AsyncIterator[None]:
        """Map redis-py and socket errors to StoreUnavailable."""
        try:
            yield
        except (RedisError, OSError) as exc:
            logger.warning("Counter store operation failed", sequence=name, error=str(exc))
            raise StoreUnavailable(name, f"Counter store unavailable: {exc}") from exc

    async def upsert_and_get(self, name: str) -> CounterRecord:
        async with self._guard(name):
            fields = await self._upsert(keys=[self._key(name)], args=[INITIAL_VALUE, utc_now().isoformat()])
        return self._record(name, fields)

    async def increment_and_fetch(self, name: str) -> int:
        async with self._guard(name):
            value = await self._increment(keys=[self._key(name)], args=[INITIAL_VALUE, utc_now().isoformat()])
        return int(value)

    async def get(self, name: str) -> CounterRecord | None:
        async with self._guard(name):
            fields = await self._client.hmget(self._key(name), ["value", "created_at", "updated_at"])
        if fields[0] is None:
            return None
        return self._record(name, fields)

    async def list_counters(self) -> list[CounterRecord]:
        records = []
        async with self._guard(None):
            keys = [_decode(key) async for key in self._client.scan_iter(match=f"{self._key_prefix}*")]
            for key in sorted(k for k in keys if k):
                fields = await self._client.hmget(key, ["value", "created_at", "updated_at"])
                if fields[0] is not None:
                    records.append(self._record(key.removeprefix(self._key_prefix), fields))
        return records

    async def advance(self, name: str, value: int) -> CounterRecord:
        check_advance_value(value)
        async with self._guard(name):
            result = await self._advance(keys=[self._key(name)], args=[value, utc_now().isoformat()])
        if int(result[0]) == 0:
            raise CounterRegression(name, int(result[1]), value)
        logger.info("Counter advanced", sequence=name, value=value)
        return self._record(name, result[1:])
