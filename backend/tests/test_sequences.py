"""Tests for identifier formatting rules."""

from datetime import UTC, datetime, timedelta, timezone

from lis.services.identifiers.sequences import SEQUENCE_FORMATS, DateComponent, SequenceFormat, SequenceName

NOW = datetime(2025, 3, 5, 10, 30, 0, tzinfo=UTC)


class TestRender:
    def test_year_component(self):
        fmt = SequenceFormat("PAT", 6, DateComponent.YEAR)
        assert fmt.render(7, NOW) == "PAT-2025-000007"

    def test_date_component(self):
        fmt = SequenceFormat("SMP", 6, DateComponent.DATE)
        assert fmt.render(3, NOW) == "SMP-20250305-000003"

    def test_no_date_component(self):
        fmt = SequenceFormat("TST", 4)
        assert fmt.render(42, NOW) == "TST-0042"

    def test_number_grows_past_width(self):
        fmt = SequenceFormat("PAT", 6, DateComponent.YEAR)
        assert fmt.render(1_000_000, NOW) == "PAT-2025-1000000"
        assert SequenceFormat("TST", 4).render(12345, NOW) == "TST-12345"

    def test_date_taken_in_utc(self):
        # 23:30 on March 4th in UTC-05:00 is already March 5th in UTC
        local = datetime(2025, 3, 4, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        fmt = SequenceFormat("SMP", 6, DateComponent.DATE)
        assert fmt.render(1, local) == "SMP-20250305-000001"

    def test_year_rollover_in_utc(self):
        local = datetime(2024, 12, 31, 22, 0, tzinfo=timezone(timedelta(hours=-3)))
        fmt = SequenceFormat("ORD", 6, DateComponent.YEAR)
        assert fmt.render(1, local) == "ORD-2025-000001"

    def test_naive_datetime_treated_as_utc(self):
        fmt = SequenceFormat("SMP", 6, DateComponent.DATE)
        assert fmt.render(9, datetime(2025, 3, 5, 23, 59)) == "SMP-20250305-000009"


class TestSequenceFormats:
    def test_every_sequence_has_a_format(self):
        assert set(SEQUENCE_FORMATS) == {name.value for name in SequenceName}

    def test_known_formats(self):
        rendered = {name: fmt.render(1, NOW) for name, fmt in SEQUENCE_FORMATS.items()}
        assert rendered == {
            "patientId": "PAT-2025-000001",
            "orderNumber": "ORD-2025-000001",
            "reportNumber": "RPT-2025-000001",
            "testCode": "TST-0001",
            "sampleId": "SPL-2025-000001",
            "barcode": "SMP-20250305-000001",
        }
