"""Counter model backing sequential human-readable identifiers."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from lis.utils.datetime_utils import utc_now

# Conflict target for the allocation upsert
COUNTER_NAME_CONSTRAINT = UniqueConstraint("name", name="uq_counters_name")


class Counter(SQLModel, table=True):
    """Next value to allocate for one named sequence.

    Allocation uses a single INSERT ... ON CONFLICT DO UPDATE ... RETURNING
    so concurrent requests never observe the same value.
    """

    __tablename__ = "counters"
    __table_args__ = (
        COUNTER_NAME_CONSTRAINT,
        CheckConstraint("value >= 1", name="ck_counters_value_positive"),
    )

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=64)
    value: int = Field(default=1)
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
