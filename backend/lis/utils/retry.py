"""Caller-side retry for identifier allocation using tenacity.

The allocator never retries on its own. Callers that want to retry a
whole operation on a transient store outage wrap it with these helpers.
"""

from dataclasses import dataclass

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lis.config import settings
from lis.services.identifiers.exceptions import StoreUnavailable


@dataclass
class AllocationRetryConfig:
    """Configuration for allocation retries with exponential backoff."""

    max_attempts: int = settings.allocation_retry_attempts
    min_wait: float = settings.allocation_retry_min_wait
    max_wait: float = settings.allocation_retry_max_wait
    multiplier: float = 1.0


def get_allocation_retrying(config: AllocationRetryConfig | None = None) -> AsyncRetrying:
    """Get configured AsyncRetrying for StoreUnavailable.

    Usage:
        async for attempt in get_allocation_retrying():
            with attempt:
                patient_id = await allocator.generate_patient_id()

    Args:
        config: Optional retry configuration. Uses settings if not provided.

    Returns:
        AsyncRetrying instance that re-raises the last StoreUnavailable.
    """
    cfg = config or AllocationRetryConfig()
    return AsyncRetrying(
        retry=retry_if_exception_type(StoreUnavailable),
        stop=stop_after_attempt(cfg.max_attempts),
        wait=wait_exponential(
            multiplier=cfg.multiplier,
            min=cfg.min_wait,
            max=cfg.max_wait,
        ),
        reraise=True,
    )
