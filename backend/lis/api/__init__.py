"""FastAPI integration for host applications."""

from lis.api.dependencies import AllocatorDep, CounterStoreDep, get_allocator, get_counter_store
from lis.api.errors import register_exception_handlers

__all__ = [
    "AllocatorDep",
    "CounterStoreDep",
    "get_allocator",
    "get_counter_store",
    "register_exception_handlers",
]
