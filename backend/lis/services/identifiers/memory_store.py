"""In-process counter store for tests and local development."""

import asyncio
from collections.abc import Mapping
from dataclasses import replace

from lis.services.identifiers.exceptions import CounterRegression
from lis.services.identifiers.store import INITIAL_VALUE, CounterRecord, check_advance_value
from lis.utils.datetime_utils import utc_now


class InMemoryCounterStore:
    """Counters held in a dict, serialized by an ``asyncio.Lock``.

    Only safe within a single event loop; nothing is persisted.
    """

    def __init__(self, initial: Mapping[str, int] | None = None):
        self._lock = asyncio.Lock()
        self._records: dict[str, CounterRecord] = {}
        now = utc_now()
        for name, value in (initial or {}).items():
            check_advance_value(value)
            self._records[name] = CounterRecord(name=name, value=value, created_at=now, updated_at=now)

    async def upsert_and_get(self, name: str) -> CounterRecord:
        async with self._lock:
            return self._get_or_create(name)

    async def increment_and_fetch(self, name: str) -> int:
        async with self._lock:
            record = self._get_or_create(name)
            record = replace(record, value=record.value + 1, updated_at=utc_now())
            self._records[name] = record
            return record.value

    async def get(self, name: str) -> CounterRecord | None:
        async with self._lock:
            return self._records.get(name)

    async def list_counters(self) -> list[CounterRecord]:
        async with self._lock:
            return [self._records[name] for name in sorted(self._records)]

    async def advance(self, name: str, value: int) -> CounterRecord:
        check_advance_value(value)
        async with self._lock:
            record = self._get_or_create(name)
            if record.value > value:
                raise CounterRegression(name, record.value, value)
            record = replace(record, value=value, updated_at=utc_now())
            self._records[name] = record
            return record

    def _get_or_create(self, name: str) -> CounterRecord:
        record = self._records.get(name)
        if record is None:
            now = utc_now()
            record = CounterRecord(name=name, value=INITIAL_VALUE, created_at=now, updated_at=now)
            self._records[name] = record
        return record
