"""
Date range presets for the dashboard and report pickers.

Presets resolve against an explicit `today` so the calculation stays
deterministic; only the routers read the clock. Weeks start on Sunday, the
same convention the Weekly chart buckets use.
"""

from datetime import date, timedelta
from typing import Optional

from agency_dashboard.models.enums import DateRangePreset, Granularity
from agency_dashboard.models.schemas import DateRange
from agency_dashboard.services.bucketing import week_start


LIFETIME_START = date(2020, 1, 1)


def resolve_preset(preset: DateRangePreset, today: date) -> DateRange:
    """
    Inclusive date range for a named preset.

    Raises:
        ValueError: For CUSTOM, which has no fixed range.

    Example:
        >>> resolve_preset(DateRangePreset.LAST_WEEK, date(2025, 9, 3))
        DateRange(start_date=datetime.date(2025, 8, 24), end_date=datetime.date(2025, 8, 30))
    """
    preset = DateRangePreset(preset)
    one_day = timedelta(days=1)

    if preset is DateRangePreset.TODAY:
        return DateRange(start_date=today, end_date=today)
    if preset is DateRangePreset.YESTERDAY:
        return DateRange(start_date=today - one_day, end_date=today - one_day)
    if preset is DateRangePreset.LAST_7:
        return DateRange(start_date=today - timedelta(days=6), end_date=today)
    if preset is DateRangePreset.LAST_14:
        return DateRange(start_date=today - timedelta(days=13), end_date=today)
    if preset is DateRangePreset.LAST_30:
        return DateRange(start_date=today - timedelta(days=29), end_date=today)
    if preset is DateRangePreset.THIS_WEEK:
        return DateRange(start_date=week_start(today), end_date=today)
    if preset is DateRangePreset.LAST_WEEK:
        this_week = week_start(today)
        return DateRange(start_date=this_week - timedelta(days=7), end_date=this_week - one_day)
    if preset is DateRangePreset.THIS_MONTH:
        return DateRange(start_date=today.replace(day=1), end_date=today)
    if preset is DateRangePreset.LAST_MONTH:
        last_day = today.replace(day=1) - one_day
        return DateRange(start_date=last_day.replace(day=1), end_date=last_day)
    if preset is DateRangePreset.LIFETIME:
        return DateRange(start_date=LIFETIME_START, end_date=today)

    raise ValueError("Custom date range requires explicit start and end dates")


def resolve_date_range(
    preset: Optional[DateRangePreset],
    start_date: Optional[date],
    end_date: Optional[date],
    today: Optional[date] = None,
) -> DateRange:
    """
    Resolve a picker selection to a concrete range.

    A non-custom preset wins over explicit dates. Without one, both dates are
    required and must be in order.

    Raises:
        ValueError: Missing dates for a custom range, or start after end.
    """
    if preset is not None and DateRangePreset(preset) is not DateRangePreset.CUSTOM:
        return resolve_preset(preset, today or date.today())

    if start_date is None or end_date is None:
        raise ValueError("Custom date range requires explicit start and end dates")
    if start_date > end_date:
        raise ValueError(f"Start date {start_date} is after end date {end_date}")
    return DateRange(start_date=start_date, end_date=end_date)


def default_granularity_for_range(
    date_range: DateRange,
    fallback: Granularity = Granularity.DAILY,
) -> Granularity:
    """Single-day ranges are charted by hour; longer ranges use `fallback`."""
    if date_range.start_date == date_range.end_date:
        return Granularity.HOURLY
    return Granularity(fallback)
