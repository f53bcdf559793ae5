"""structlog setup for the allocator, the CLI and host applications."""

import logging
import sys

import structlog
from structlog.typing import Processor

from lis.config import settings

_QUIET_LOGGERS = ("asyncio", "sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")


def configure_logging(*, json_output: bool | None = None, level: str | None = None) -> None:
    """Send structlog and stdlib records to stdout through one formatter.

    Records render as JSON lines when ``json_output`` is true and as a
    colored console line otherwise. Both arguments fall back to
    ``settings.log_json`` and ``settings.log_level``.
    """
    json_output = settings.log_json if json_output is None else json_output
    level = level or settings.log_level

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Per-statement SQL and driver chatter only at WARNING and above
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configured = False


def setup_logging() -> None:
    """Configure logging from settings on the first call only."""
    global _configured
    if not _configured:
        configure_logging()
        _configured = True
