"""Sequential and random identifier generation."""

from lis.services.identifiers.allocator import SequenceAllocator
from lis.services.identifiers.exceptions import CounterRegression, InvalidSequenceName, StoreUnavailable
from lis.services.identifiers.factory import build_counter_store
from lis.services.identifiers.memory_store import InMemoryCounterStore
from lis.services.identifiers.random_ids import generate_short_id, generate_uuid
from lis.services.identifiers.redis_store import RedisCounterStore
from lis.services.identifiers.sequences import SEQUENCE_FORMATS, DateComponent, SequenceFormat, SequenceName
from lis.services.identifiers.sql_store import SqlCounterStore
from lis.services.identifiers.store import INITIAL_VALUE, CounterRecord, CounterStore

__all__ = [
    "SequenceAllocator",
    "CounterRecord",
    "CounterStore",
    "INITIAL_VALUE",
    "InMemoryCounterStore",
    "RedisCounterStore",
    "SqlCounterStore",
    "build_counter_store",
    "SEQUENCE_FORMATS",
    "DateComponent",
    "SequenceFormat",
    "SequenceName",
    "StoreUnavailable",
    "InvalidSequenceName",
    "CounterRegression",
    "generate_uuid",
    "generate_short_id",
]
