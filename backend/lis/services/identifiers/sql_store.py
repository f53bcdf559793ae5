"""Counter store backed by the relational database.

Every operation is a single ``INSERT ... ON CONFLICT ... RETURNING``
statement, so creation and increment happen in one atomic step and no
row lock is held across round trips.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import Row, Table, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from lis.db.session import build_session_maker
from lis.models.counter import Counter
from lis.services.identifiers.exceptions import CounterRegression, StoreUnavailable
from lis.services.identifiers.store import INITIAL_VALUE, CounterRecord, check_advance_value
from lis.utils.datetime_utils import ensure_utc, utc_now

logger = structlog.get_logger(__name__)

counters: Table = Counter.__table__  # type: ignore[attr-defined]

_RECORD_COLUMNS = (counters.c.name, counters.c.value, counters.c.created_at, counters.c.updated_at)

# Dialects with INSERT ... ON CONFLICT support
_INSERT_BY_DIALECT: dict[str, Callable[[Table], Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _to_record(row: Row[Any]) -> CounterRecord:
    return CounterRecord(
        name=row.name,
        value=row.value,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


class SqlCounterStore:
    """Counters stored in the ``counters`` table."""

    def __init__(self, engine: AsyncEngine):
        dialect = engine.dialect.name
        if dialect not in _INSERT_BY_DIALECT:
            raise ValueError(f"Counter store requires PostgreSQL or SQLite, got {dialect!r}")
        self._insert = _INSERT_BY_DIALECT[dialect]
        self._session_maker = build_session_maker(engine)

    @asynccontextmanager
    async def _transaction(self, name: str | None) -> AsyncIterator[AsyncSession]:
        """Run a block in a committed transaction, mapping backend errors."""
        try:
            async with self._session_maker() as session, session.begin():
                yield session
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Counter store operation failed", sequence=name, error=str(exc))
            raise StoreUnavailable(name, f"Counter store unavailable: {exc}") from exc

    async def upsert_and_get(self, name: str) -> CounterRecord:
        now = utc_now()
        insert = self._insert(counters).values(name=name, value=INITIAL_VALUE, created_at=now, updated_at=now)
        # No-op update so RETURNING yields the existing row on conflict
        stmt = insert.on_conflict_do_update(
            index_elements=[counters.c.name],
            set_={"name": insert.excluded.name},
        ).returning(*_RECORD_COLUMNS)
        async with self._transaction(name) as session:
            result = await session.execute(stmt)
            return _to_record(result.one())

    async def increment_and_fetch(self, name: str) -> int:
        now = utc_now()
        stmt = (
            self._insert(counters)
            .values(name=name, value=INITIAL_VALUE + 1, created_at=now, updated_at=now)
            .on_conflict_do_update(
                index_elements=[counters.c.name],
                set_={"value": counters.c.value + 1, "updated_at": now},
            )
            .returning(counters.c.value)
        )
        async with self._transaction(name) as session:
            result = await session.execute(stmt)
            value: int = result.scalar_one()
        return value

    async def get(self, name: str) -> CounterRecord | None:
        stmt = select(*_RECORD_COLUMNS).where(counters.c.name == name)
        async with self._transaction(name) as session:
            result = await session.execute(stmt)
            row = result.first()
        return _to_record(row) if row is not None else None

    async def list_counters(self) -> list[CounterRecord]:
        stmt = select(*_RECORD_COLUMNS).order_by(counters.c.name)
        async with self._transaction(None) as session:
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.all()]

    async def advance(self, name: str, value: int) -> CounterRecord:
        check_advance_value(value)
        now = utc_now()
        stmt = (
            self._insert(counters)
            .values(name=name, value=value, created_at=now, updated_at=now)
            .on_conflict_do_update(
                index_elements=[counters.c.name],
                set_={"value": value, "updated_at": now},
                where=counters.c.value <= value,
            )
            .returning(*_RECORD_COLUMNS)
        )
        async with self._transaction(name) as session:
            result = await session.execute(stmt)
            row = result.first()
            if row is None:
                current = await session.execute(select(counters.c.value).where(counters.c.name == name))
                raise CounterRegression(name, current.scalar_one(), value)
        logger.info("Counter advanced", sequence=name, value=value)
        return _to_record(row)
