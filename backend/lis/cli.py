"""Administrative CLI for identifier counters."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click
from sqlalchemy.exc import SQLAlchemyError

from lis.config import Settings, settings
from lis.db.session import build_engine, create_tables
from lis.logging import setup_logging
from lis.services.identifiers.allocator import SequenceAllocator
from lis.services.identifiers.exceptions import CounterRegression, InvalidSequenceName, StoreUnavailable
from lis.services.identifiers.factory import build_counter_store
from lis.services.identifiers.redis_store import RedisCounterStore
from lis.utils.retry import AllocationRetryConfig, get_allocation_retrying

T = TypeVar("T")


def _run(config: Settings, action: Callable[[SequenceAllocator], Awaitable[T]]) -> T:
    """Run ``action`` against a freshly built store, disposing it afterwards."""

    async def runner() -> T:
        engine = build_engine(config.database_url) if config.counter_backend == "database" else None
        store = build_counter_store(config, engine=engine)
        try:
            return await action(SequenceAllocator(store))
        finally:
            if isinstance(store, RedisCounterStore):
                await store.aclose()
            if engine is not None:
                await engine.dispose()

    try:
        return asyncio.run(runner())
    except (InvalidSequenceName, CounterRegression, StoreUnavailable) as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--database-url", default=None, help="Override DATABASE_URL.")
@click.option(
    "--backend",
    type=click.Choice(["database", "redis"]),
    default=None,
    help="Override COUNTER_BACKEND.",
)
@click.pass_context
def cli(ctx: click.Context, database_url: str | None, backend: str | None) -> None:
    """Inspect and maintain identifier counters."""
    setup_logging()
    overrides = {"database_url": database_url, "counter_backend": backend}
    ctx.obj = settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


@cli.command("init-db")
@click.pass_obj
def init_db(config: Settings) -> None:
    """Create the counters table."""
    if config.counter_backend != "database":
        raise click.ClickException("init-db only applies to the database backend")

    async def create() -> None:
        engine = build_engine(config.database_url)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    try:
        asyncio.run(create())
    except (SQLAlchemyError, OSError) as exc:
        raise click.ClickException(f"Could not create counters table: {exc}") from exc
    click.echo("Counters table ready")


@cli.command("list")
@click.pass_obj
def list_counters(config: Settings) -> None:
    """Show every counter."""
    records = _run(config, lambda allocator: allocator.store.list_counters())
    if not records:
        click.echo("No counters yet")
        return
    for record in records:
        updated = record.updated_at.isoformat() if record.updated_at else "-"
        click.echo(f"{record.name:<14} {record.value:>10}  {updated}")


@cli.command()
@click.argument("name")
@click.pass_obj
def show(config: Settings, name: str) -> None:
    """Show one counter and the identifier it would hand out next."""

    async def action(allocator: SequenceAllocator) -> tuple[int, str]:
        record = await allocator.current(name)
        return record.value, await allocator.preview(name)

    value, preview = _run(config, action)
    click.echo(f"{name}: next value {value} ({preview})")


@cli.command("next")
@click.argument("name")
@click.option("--retries", type=click.IntRange(min=1), default=1, show_default=True, help="Attempts on store outage.")
@click.pass_obj
def next_id(config: Settings, name: str, retries: int) -> None:
    """Allocate one identifier and print it."""

    async def action(allocator: SequenceAllocator) -> str:
        async for attempt in get_allocation_retrying(AllocationRetryConfig(max_attempts=retries)):
            with attempt:
                identifier = await allocator.next_id(name)
        return identifier

    click.echo(_run(config, action))


@cli.command()
@click.argument("name")
@click.argument("value", type=click.IntRange(min=1))
@click.pass_obj
def advance(config: Settings, name: str, value: int) -> None:
    """Raise a counter to VALUE, e.g. after importing legacy records."""
    record = _run(config, lambda allocator: allocator.advance(name, value))
    click.echo(f"{record.name}: next value {record.value}")


if __name__ == "__main__":
    cli()
