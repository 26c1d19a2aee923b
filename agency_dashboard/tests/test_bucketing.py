"""
Test suite for the calendar bucketing engine.

The tests verify:
1. Each granularity maps a raw date (or hour) to the documented group key
2. Daily keys are the identity of valid date strings
3. Weekly keys are always the Sunday on or before the date
4. Keys of every granularity order chronologically, not alphabetically
5. Unparseable input is logged, kept as its own bucket and sorted last
6. Axis labels render per granularity
"""

import logging
from datetime import date, timedelta

import pytest

from agency_dashboard.models.enums import Granularity
from agency_dashboard.services.bucketing import (
    GroupKey,
    WEEKDAY_NAMES,
    bucket_for,
    bucket_sort_key,
    compare_group_keys,
    format_bucket_label,
    group_key_for,
    parse_date_key,
    sunday_index,
    week_start,
)


# =============================================================================
# TEST CLASS: DATE PARSING
# =============================================================================


class TestParseDateKey:
    """Component-wise parsing of "YYYY-MM-DD" keys."""

    def test_parses_iso_date(self) -> None:
        assert parse_date_key("2025-09-07") == date(2025, 9, 7)

    def test_accepts_unpadded_components(self) -> None:
        assert parse_date_key("2025-9-7") == date(2025, 9, 7)

    def test_ignores_trailing_time_and_offset(self) -> None:
        """A late-evening timestamp with a negative offset keeps its written date."""
        assert parse_date_key("2025-09-01T23:30:00-05:00") == date(2025, 9, 1)
        assert parse_date_key("2025-09-01 23:30:00") == date(2025, 9, 1)

    @pytest.mark.parametrize("raw", [
        "2025-02-30",
        "2025-13-01",
        "not-a-date",
        "",
        "20250901",
        None,
        20250901,
    ])
    def test_rejects_invalid_values(self, raw) -> None:
        assert parse_date_key(raw) is None


# =============================================================================
# TEST CLASS: GROUP KEYS PER GRANULARITY
# =============================================================================


class TestGroupKeys:
    """group_key_for / bucket_for for each granularity."""

    @pytest.mark.parametrize("raw", ["2025-09-01", "2024-02-29", "1999-12-31", "2025-9-1"])
    def test_daily_is_identity(self, raw: str) -> None:
        assert group_key_for(raw, Granularity.DAILY) == raw

    @pytest.mark.parametrize("raw", [
        "2025-09-01T04:00:00.000Z",
        "2025-09-01T23:30:00-05:00",
        "2025-09-01 08:15:00",
        "2025-9-1T00:00:00",
    ])
    def test_daily_timestamp_uses_date_part(self, raw: str) -> None:
        key = bucket_for(raw, Granularity.DAILY)
        assert key.label == "2025-09-01"
        assert not key.fallback

    def test_day_of_week_names(self) -> None:
        # 2025-09-07 is a Sunday
        start = date(2025, 9, 7)
        names = [
            group_key_for((start + timedelta(days=i)).isoformat(), Granularity.DAY_OF_WEEK)
            for i in range(7)
        ]
        assert names == list(WEEKDAY_NAMES)

    def test_day_of_week_is_stable_across_weeks(self) -> None:
        for offset in range(0, 70, 7):
            raw = (date(2025, 9, 3) + timedelta(days=offset)).isoformat()
            assert group_key_for(raw, Granularity.DAY_OF_WEEK) == "Wednesday"

    def test_weekly_key_is_preceding_sunday(self) -> None:
        assert group_key_for("2025-09-01", Granularity.WEEKLY) == "2025-08-31"
        assert group_key_for("2025-09-06", Granularity.WEEKLY) == "2025-08-31"

    def test_weekly_key_on_sunday_is_same_day(self) -> None:
        assert group_key_for("2025-09-07", Granularity.WEEKLY) == "2025-09-07"

    def test_weekly_key_is_a_sunday_within_six_days(self) -> None:
        """Every date of a year maps to a Sunday 0-6 days before it."""
        current = date(2024, 1, 1)
        while current.year == 2024:
            label = group_key_for(current.isoformat(), Granularity.WEEKLY)
            sunday = date.fromisoformat(label)
            assert sunday_index(sunday) == 0
            assert 0 <= (current - sunday).days <= 6
            current += timedelta(days=1)

    def test_weekly_key_crosses_year_boundary(self) -> None:
        assert group_key_for("2026-01-01", Granularity.WEEKLY) == "2025-12-28"

    def test_monthly_key(self) -> None:
        assert group_key_for("2025-09-01", Granularity.MONTHLY) == "September 2025"
        assert group_key_for("2026-01-31", Granularity.MONTHLY) == "January 2026"

    def test_timestamp_buckets_by_written_date(self) -> None:
        assert group_key_for("2025-09-07T23:59:00+09:00", Granularity.DAY_OF_WEEK) == "Sunday"
        assert group_key_for("2025-08-31T23:30:00-05:00", Granularity.MONTHLY) == "August 2025"

    @pytest.mark.parametrize("hour,expected", [(0, "0"), ("07", "7"), ("23", "23"), (14, "14")])
    def test_hourly_key_normalizes_hour(self, hour, expected: str) -> None:
        key = bucket_for(hour, Granularity.HOURLY)
        assert key == GroupKey(Granularity.HOURLY, expected)

    def test_granularity_accepts_loose_names(self) -> None:
        assert group_key_for("2025-09-01", "day_of_week") == "Monday"
        assert Granularity("day-of-week") is Granularity.DAY_OF_WEEK
        assert Granularity("weekly") is Granularity.WEEKLY


# =============================================================================
# TEST CLASS: MALFORMED INPUT
# =============================================================================


class TestFallbackKeys:
    """Unparseable values become their own logged fallback bucket."""

    def test_unparseable_date_keeps_raw_label(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="agency_dashboard.services.bucketing"):
            key = bucket_for("not-a-date", Granularity.WEEKLY)

        assert key.fallback is True
        assert key.label == "not-a-date"
        assert "not-a-date" in caplog.text

    def test_none_date_becomes_empty_fallback(self) -> None:
        key = bucket_for(None, Granularity.MONTHLY)
        assert key.fallback is True
        assert key.label == ""

    @pytest.mark.parametrize("hour", [24, -1, "noon", None])
    def test_out_of_range_hour_is_fallback(self, hour) -> None:
        assert bucket_for(hour, Granularity.HOURLY).fallback is True

    def test_fallback_sorts_after_valid_keys(self) -> None:
        valid = bucket_for("2099-12-31", Granularity.DAILY)
        fallback = bucket_for("garbage", Granularity.DAILY)
        assert bucket_sort_key(valid) < bucket_sort_key(fallback)


# =============================================================================
# TEST CLASS: ORDERING
# =============================================================================


class TestOrdering:
    """compare_group_keys and bucket_sort_key."""

    def test_hourly_orders_numerically(self) -> None:
        labels = ["10", "2", "0", "23"]
        ordered = sorted(labels, key=lambda label: bucket_sort_key(bucket_for(label, Granularity.HOURLY)))
        assert ordered == ["0", "2", "10", "23"]

    def test_day_of_week_orders_sunday_first(self) -> None:
        assert compare_group_keys("Sunday", "Monday", Granularity.DAY_OF_WEEK) < 0
        assert compare_group_keys("Saturday", "Friday", Granularity.DAY_OF_WEEK) > 0
        # Alphabetical order would put Friday before Monday
        assert compare_group_keys("Monday", "Friday", Granularity.DAY_OF_WEEK) < 0

    def test_monthly_orders_december_before_january(self) -> None:
        assert compare_group_keys("December 2025", "January 2026", Granularity.MONTHLY) < 0
        assert compare_group_keys("April 2025", "August 2025", Granularity.MONTHLY) < 0

    def test_weekly_orders_chronologically(self) -> None:
        assert compare_group_keys("2025-12-28", "2026-01-04", Granularity.WEEKLY) < 0

    def test_daily_orders_chronologically(self) -> None:
        assert compare_group_keys("2025-09-09", "2025-09-10", Granularity.DAILY) < 0
        assert compare_group_keys("2025-9-9", "2025-09-10", Granularity.DAILY) < 0

    def test_equal_labels_compare_equal(self) -> None:
        assert compare_group_keys("Tuesday", "Tuesday", Granularity.DAY_OF_WEEK) == 0

    def test_representative_date_orders_monthly_buckets(self) -> None:
        december = GroupKey(Granularity.MONTHLY, "December 2025")
        january = GroupKey(Granularity.MONTHLY, "January 2026")
        assert bucket_sort_key(december, "2025-12-14") < bucket_sort_key(january, "2026-01-02")

    def test_week_start_helper(self) -> None:
        assert week_start(date(2025, 9, 3)) == date(2025, 8, 31)


# =============================================================================
# TEST CLASS: AXIS LABELS
# =============================================================================


class TestBucketLabels:

    @pytest.mark.parametrize("label,granularity,expected", [
        ("7", Granularity.HOURLY, "7:00"),
        ("2025-09-01", Granularity.DAILY, "Sep 1"),
        ("2025-08-31", Granularity.WEEKLY, "Aug 31"),
        ("Sunday", Granularity.DAY_OF_WEEK, "Sun"),
        ("January 2026", Granularity.MONTHLY, "Jan"),
        ("garbage", Granularity.DAILY, "garbage"),
        ("", Granularity.DAILY, ""),
    ])
    def test_format_bucket_label(self, label: str, granularity: Granularity, expected: str) -> None:
        assert format_bucket_label(label, granularity) == expected
