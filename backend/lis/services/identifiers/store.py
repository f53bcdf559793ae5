"""Counter store contract shared by every backend."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

# Value a counter holds when it is first created: the next value to allocate.
INITIAL_VALUE = 1


@dataclass(frozen=True)
class CounterRecord:
    """Snapshot of one named counter."""

    name: str
    value: int  # Next value to allocate
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CounterStore(Protocol):
    """Persistent name -> integer mapping with atomic primitives.

    Implementations must make ``upsert_and_get``, ``increment_and_fetch`` and
    ``advance`` atomic with respect to each other for the same name, and must
    raise ``StoreUnavailable`` (chaining the backend error) instead of leaking
    driver exceptions.
    """

    async def upsert_and_get(self, name: str) -> CounterRecord:
        """Create the counter with ``INITIAL_VALUE`` if absent and return it."""
        ...

    async def increment_and_fetch(self, name: str) -> int:
        """Add one to the counter and return the post-increment value.

        A missing counter is created as if it held ``INITIAL_VALUE``, so the
        first call returns ``INITIAL_VALUE + 1``.
        """
        ...

    async def get(self, name: str) -> CounterRecord | None:
        """Return the counter without creating it."""
        ...

    async def list_counters(self) -> list[CounterRecord]:
        """Return all counters ordered by name."""
        ...

    async def advance(self, name: str, value: int) -> CounterRecord:
        """Raise the stored value to ``value``, never lowering it.

        Raises CounterRegression if the stored value is already greater.
        """
        ...


def check_advance_value(value: int) -> None:
    """Reject administrative targets below the first allocatable value."""
    if value < INITIAL_VALUE:
        raise ValueError(f"Counter value must be >= {INITIAL_VALUE}, got {value}")
