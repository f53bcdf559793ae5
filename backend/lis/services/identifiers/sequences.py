"""Sequence names and their identifier formats."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class SequenceName(StrEnum):
    """Named counters backing human-readable identifiers."""

    PATIENT_ID = "patientId"
    ORDER_NUMBER = "orderNumber"
    REPORT_NUMBER = "reportNumber"
    TEST_CODE = "testCode"
    SAMPLE_ID = "sampleId"
    BARCODE = "barcode"


class DateComponent(StrEnum):
    """Date segment placed between the prefix and the number."""

    NONE = "none"
    YEAR = "year"  # 2025
    DATE = "date"  # 20250305


@dataclass(frozen=True)
class SequenceFormat:
    """Formatting rule for one sequence: ``PREFIX[-DATE]-NNNNNN``."""

    prefix: str
    width: int
    date_component: DateComponent = DateComponent.NONE

    def render(self, value: int, now: datetime) -> str:
        """Format ``value`` using the date segment taken from ``now``.

        The number is zero-padded to ``width`` and never truncated.
        """
        parts = [self.prefix]
        if self.date_component is not DateComponent.NONE:
            # Naive datetimes are treated as UTC
            moment = now.astimezone(UTC) if now.tzinfo else now
            if self.date_component is DateComponent.YEAR:
                parts.append(f"{moment.year:04d}")
            else:
                parts.append(moment.strftime("%Y%m%d"))
        parts.append(f"{value:0{self.width}d}")
        return "-".join(parts)


SEQUENCE_FORMATS: dict[str, SequenceFormat] = {
    SequenceName.PATIENT_ID: SequenceFormat("PAT", 6, DateComponent.YEAR),
    SequenceName.ORDER_NUMBER: SequenceFormat("ORD", 6, DateComponent.YEAR),
    SequenceName.REPORT_NUMBER: SequenceFormat("RPT", 6, DateComponent.YEAR),
    SequenceName.TEST_CODE: SequenceFormat("TST", 4),
    SequenceName.SAMPLE_ID: SequenceFormat("SPL", 6, DateComponent.YEAR),
    SequenceName.BARCODE: SequenceFormat("SMP", 6, DateComponent.DATE),
}
