"""Sequential human-readable identifier allocation.

The allocator turns "give me the next ID for sequence X" into one atomic
increment on the counter store. The value returned by the store is
authoritative; nothing is read and written back from application code.
"""

from collections.abc import Callable, Mapping
from datetime import datetime

import structlog

from lis.services.identifiers.exceptions import InvalidSequenceName, StoreUnavailable
from lis.services.identifiers.sequences import SEQUENCE_FORMATS, SequenceFormat, SequenceName
from lis.services.identifiers.store import CounterRecord, CounterStore
from lis.utils.datetime_utils import utc_now

logger = structlog.get_logger(__name__)


class SequenceAllocator:
    """Allocates identifiers such as ``PAT-2025-000123``.

    The allocator holds no locks and does not retry. A ``StoreUnavailable``
    from the store propagates to the caller, who decides whether to retry
    the whole higher-level operation.
    """

    def __init__(
        self,
        store: CounterStore,
        *,
        clock: Callable[[], datetime] = utc_now,
        formats: Mapping[str, SequenceFormat] = SEQUENCE_FORMATS,
    ):
        self.store = store
        self._clock = clock
        self._formats = dict(formats)

    @property
    def sequence_names(self) -> list[str]:
        return sorted(self._formats)

    def _format_for(self, name: str) -> SequenceFormat:
        fmt = self._formats.get(name)
        if fmt is None:
            raise InvalidSequenceName(name, self.sequence_names)
        return fmt

    async def next_id(self, name: str) -> str:
        """Allocate and format the next identifier of ``name``."""
        fmt = self._format_for(name)
        now = self._clock()
        try:
            stored = await self.store.increment_and_fetch(name)
        except StoreUnavailable:
            logger.warning("Identifier allocation failed", sequence=name)
            raise
        value = stored - 1
        identifier = fmt.render(value, now)
        logger.debug("Identifier allocated", sequence=name, value=value, identifier=identifier)
        return identifier

    async def current(self, name: str) -> CounterRecord:
        """Return the counter for ``name`` without consuming a value."""
        self._format_for(name)
        return await self.store.upsert_and_get(name)

    async def preview(self, name: str) -> str:
        """Identifier the next allocation would produce, absent other callers."""
        fmt = self._format_for(name)
        now = self._clock()
        record = await self.store.upsert_and_get(name)
        return fmt.render(record.value, now)

    async def advance(self, name: str, value: int) -> CounterRecord:
        """Administratively raise the counter for ``name`` to ``value``.

        Used after importing records that already carry identifiers. Raises
        CounterRegression rather than moving a counter backwards.
        """
        self._format_for(name)
        return await self.store.advance(name, value)

    async def generate_patient_id(self) -> str:
        """PAT-YYYY-NNNNNN"""
        return await self.next_id(SequenceName.PATIENT_ID)

    async def generate_order_number(self) -> str:
        """ORD-YYYY-NNNNNN"""
        return await self.next_id(SequenceName.ORDER_NUMBER)

    async def generate_report_number(self) -> str:
        """RPT-YYYY-NNNNNN"""
        return await self.next_id(SequenceName.REPORT_NUMBER)

    async def generate_test_code(self) -> str:
        """TST-NNNN"""
        return await self.next_id(SequenceName.TEST_CODE)

    async def generate_sample_id(self) -> str:
        """SPL-YYYY-NNNNNN"""
        return await self.next_id(SequenceName.SAMPLE_ID)

    async def generate_barcode(self) -> str:
        """SMP-YYYYMMDD-NNNNNN, date in UTC."""
        return await self.next_id(SequenceName.BARCODE)
