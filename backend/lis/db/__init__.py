"""Database package with engine and session management."""

from lis.db.session import (
    async_session_maker,
    build_engine,
    build_session_maker,
    create_tables,
    dispose_engine,
    engine,
    get_session,
)

__all__ = [
    "async_session_maker",
    "build_engine",
    "build_session_maker",
    "create_tables",
    "dispose_engine",
    "engine",
    "get_session",
]
