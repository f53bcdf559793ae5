"""Database models."""

from sqlmodel import SQLModel

from lis.models.counter import COUNTER_NAME_CONSTRAINT, Counter

__all__ = [
    "SQLModel",
    "Counter",
    "COUNTER_NAME_CONSTRAINT",
]
