"""FastAPI dependencies for identifier allocation."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from lis.config import settings
from lis.services.identifiers.allocator import SequenceAllocator
from lis.services.identifiers.factory import build_counter_store
from lis.services.identifiers.store import CounterStore


@lru_cache
def get_counter_store() -> CounterStore:
    """Get the process-wide counter store selected by settings."""
    return build_counter_store(settings)


def get_allocator(
    store: Annotated[CounterStore, Depends(get_counter_store)],
) -> SequenceAllocator:
    """Get a SequenceAllocator bound to the counter store."""
    return SequenceAllocator(store)


# Type aliases for cleaner endpoint signatures
CounterStoreDep = Annotated[CounterStore, Depends(get_counter_store)]
AllocatorDep = Annotated[SequenceAllocator, Depends(get_allocator)]
