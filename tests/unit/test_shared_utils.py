"""Tests for shared datetime and id helpers."""

from datetime import datetime, timedelta, timezone

from sopdesk.shared.utils import add_months, ensure_utc, generate_cuid, generate_order_id


class TestAddMonths:
    def test_simple(self) -> None:
        dt = datetime(2025, 3, 15, 10, 0, tzinfo=timezone.utc)
        assert add_months(dt, 1) == datetime(2025, 4, 15, 10, 0, tzinfo=timezone.utc)

    def test_clamps_to_month_end(self) -> None:
        dt = datetime(2025, 1, 31, tzinfo=timezone.utc)
        assert add_months(dt, 1) == datetime(2025, 2, 28, tzinfo=timezone.utc)

    def test_leap_year(self) -> None:
        dt = datetime(2024, 1, 31, tzinfo=timezone.utc)
        assert add_months(dt, 1).day == 29

    def test_year_rollover(self) -> None:
        dt = datetime(2025, 12, 5, tzinfo=timezone.utc)
        assert add_months(dt, 1) == datetime(2026, 1, 5, tzinfo=timezone.utc)


class TestEnsureUtc:
    def test_none(self) -> None:
        assert ensure_utc(None) is None

    def test_naive_is_assumed_utc(self) -> None:
        assert ensure_utc(datetime(2025, 1, 1)).tzinfo is not None

    def test_aware_is_converted(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        got = ensure_utc(datetime(2025, 1, 1, 12, tzinfo=plus_two))
        assert got.hour == 10


def test_order_id_prefix_and_digits() -> None:
    order_id = generate_order_id()
    assert order_id.startswith("TD_")
    assert order_id[3:].isdigit()


def test_cuid_is_unique() -> None:
    assert generate_cuid() != generate_cuid()
