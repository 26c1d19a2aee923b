"""
Calendar bucketing engine for the interactive chart.

This module maps a raw record's date (or hour) to the group key of a requested
granularity and defines how keys of each granularity are ordered. It is pure:
the key depends only on the input value and the granularity, never on the
clock or the host timezone.

Granularities:
- Hourly: hour of day "0".."23" from hourly records; numeric order
- Daily: the "YYYY-MM-DD" date unchanged (a timestamp is cut to its zero-padded
  date); chronological order
- Day Of Week: "Sunday".."Saturday"; canonical week order, not alphabetical
- Weekly: ISO date of the Sunday that starts the week; chronological order
- Monthly: "<MonthName> <Year>"; chronological by (year, month)

Date Semantics:
Dates are zone-less calendar dates. "YYYY-MM-DD" is split into its year, month
and day components and turned into a `datetime.date` directly; no generic date
parser is involved, so no timezone can shift the day. A value with a trailing
time or offset ("2025-09-01T23:30:00-05:00") is bucketed by the date as
written.

Failure Handling:
A value that cannot be parsed is logged and becomes its own fallback bucket
labelled with the raw string. Fallback buckets sort after every valid bucket.
Nothing in this module raises for bad input.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional, Tuple

from agency_dashboard.models.enums import Granularity


logger = logging.getLogger(__name__)


# =============================================================================
# Calendar Constants
# =============================================================================

# Index 0 is Sunday, matching the dashboard's week definition.
WEEKDAY_NAMES: Tuple[str, ...] = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)

MONTH_NAMES: Tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

HOURS_PER_DAY = 24

_DATE_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:$|[T ])")

# Sort tuple type: (fallback flag, ordinal, tie-break label)
SortKey = Tuple[int, int, str]


# =============================================================================
# Group Key
# =============================================================================


@dataclass(frozen=True)
class GroupKey:
    """
    Bucket identifier for one granularity.

    Attributes:
        granularity: Granularity the key was produced for.
        label: Value emitted in the chart row's `date` field.
        fallback: True when the raw value could not be parsed and the label
            is the raw value itself.
    """
    granularity: Granularity
    label: str
    fallback: bool = False


# =============================================================================
# Parsing Helpers
# =============================================================================


def parse_date_key(date_key: Any) -> Optional[date]:
    """
    Parse "YYYY-MM-DD" into a calendar date from its components.

    Returns None for anything that is not a real calendar date (wrong shape,
    month 13, February 30, non-string input).

    Example:
        >>> parse_date_key("2025-09-07")
        datetime.date(2025, 9, 7)
        >>> parse_date_key("2025-02-30") is None
        True
    """
    if not isinstance(date_key, str):
        return None
    match = _DATE_KEY_PATTERN.match(date_key.strip())
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _has_time_suffix(raw: str) -> bool:
    """True when a date key carries a time of day or offset after the date."""
    stripped = raw.strip()
    match = _DATE_KEY_PATTERN.match(stripped)
    return match is not None and match.end(3) < len(stripped)


def sunday_index(value: date) -> int:
    """Day of week with Sunday=0 through Saturday=6."""
    return (value.weekday() + 1) % 7


def week_start(value: date) -> date:
    """The Sunday on or before `value`."""
    return value - timedelta(days=sunday_index(value))


def _parse_hour(hour: Any) -> Optional[int]:
    try:
        parsed = int(str(hour).strip())
    except (TypeError, ValueError):
        return None
    if 0 <= parsed < HOURS_PER_DAY:
        return parsed
    return None


def _parse_month_label(label: str) -> Optional[Tuple[int, int]]:
    parts = label.strip().rsplit(" ", 1)
    if len(parts) != 2 or parts[0] not in MONTH_NAMES or not parts[1].isdigit():
        return None
    return int(parts[1]), MONTH_NAMES.index(parts[0]) + 1


# =============================================================================
# Bucketing
# =============================================================================


def hourly_key(hour: Any) -> GroupKey:
    """
    Bucket an hourly record by its hour field.

    The hour is normalized to its integer form ("07" -> "7"). Values outside
    0-23 or that are not integers become fallback keys.
    """
    parsed = _parse_hour(hour)
    if parsed is None:
        raw = "" if hour is None else str(hour)
        logger.warning(f"Unparseable hour {raw!r} for Hourly grouping; using raw value")
        return GroupKey(Granularity.HOURLY, raw, fallback=True)
    return GroupKey(Granularity.HOURLY, str(parsed))


def bucket_for(date_key: Any, granularity: Granularity) -> GroupKey:
    """
    Assign a raw date (or hour, for Hourly) to its group key.

    Args:
        date_key: "YYYY-MM-DD" date string, or the hour field for Hourly.
        granularity: Requested time-bucket resolution.

    Returns:
        GroupKey for the bucket. Unparseable input yields a fallback key
        whose label is the raw value.
    """
    granularity = Granularity(granularity)
    if granularity is Granularity.HOURLY:
        return hourly_key(date_key)

    raw = "" if date_key is None else str(date_key)
    parsed = parse_date_key(date_key)
    if parsed is None:
        logger.warning(
            f"Unparseable date key {raw!r} for {granularity.value} grouping; using raw value"
        )
        return GroupKey(granularity, raw, fallback=True)

    if granularity is Granularity.DAILY:
        if _has_time_suffix(raw):
            return GroupKey(granularity, parsed.isoformat())
        return GroupKey(granularity, raw)
    if granularity is Granularity.DAY_OF_WEEK:
        return GroupKey(granularity, WEEKDAY_NAMES[sunday_index(parsed)])
    if granularity is Granularity.WEEKLY:
        return GroupKey(granularity, week_start(parsed).isoformat())
    if granularity is Granularity.MONTHLY:
        return GroupKey(granularity, f"{MONTH_NAMES[parsed.month - 1]} {parsed.year}")

    raise ValueError(f"Unknown granularity: {granularity}")


def group_key_for(date_key: Any, granularity: Granularity) -> str:
    """
    Return the group key label for a raw date under `granularity`.

    Example:
        >>> group_key_for("2025-09-01", Granularity.WEEKLY)
        '2025-08-31'
        >>> group_key_for("2025-09-01", Granularity.MONTHLY)
        'September 2025'
        >>> group_key_for("2025-09-07", Granularity.DAY_OF_WEEK)
        'Sunday'
    """
    return bucket_for(date_key, granularity).label


# =============================================================================
# Ordering
# =============================================================================


def _label_ordinal(label: str, granularity: Granularity) -> Optional[int]:
    """Position of a valid label on its granularity's axis, or None if invalid."""
    if granularity is Granularity.HOURLY:
        return _parse_hour(label)
    if granularity is Granularity.DAILY:
        parsed = parse_date_key(label)
        return parsed.toordinal() if parsed is not None else None
    if granularity is Granularity.DAY_OF_WEEK:
        return WEEKDAY_NAMES.index(label) if label in WEEKDAY_NAMES else None
    if granularity is Granularity.WEEKLY:
        parsed = parse_date_key(label)
        return week_start(parsed).toordinal() if parsed is not None else None
    if granularity is Granularity.MONTHLY:
        parts = _parse_month_label(label)
        return parts[0] * 12 + parts[1] - 1 if parts is not None else None
    return None


def bucket_sort_key(key: GroupKey, representative_date: Optional[str] = None) -> SortKey:
    """
    Sort key placing `key` on its granularity's axis.

    Weekly and Monthly buckets are ordered by the representative raw date of
    the group (the earliest date that fed it) when one is supplied; the label
    is used otherwise. Both give the same chronological order. Daily keys sort
    by calendar date, which for zero-padded ISO labels is the same as string
    order. Fallback keys sort after all valid keys, by raw label.
    """
    if key.fallback:
        return (1, 0, key.label)

    granularity = key.granularity
    ordinal = None
    if representative_date is not None and granularity in (Granularity.WEEKLY, Granularity.MONTHLY):
        parsed = parse_date_key(representative_date)
        if parsed is not None:
            if granularity is Granularity.WEEKLY:
                ordinal = week_start(parsed).toordinal()
            else:
                ordinal = parsed.year * 12 + parsed.month - 1

    if ordinal is None:
        ordinal = _label_ordinal(key.label, granularity)
    if ordinal is None:
        return (1, 0, key.label)
    return (0, ordinal, key.label)


def key_from_label(label: str, granularity: Granularity) -> GroupKey:
    """Rebuild a GroupKey from a label produced earlier (e.g. by a client)."""
    granularity = Granularity(granularity)
    valid = _label_ordinal(label, granularity) is not None
    return GroupKey(granularity, label, fallback=not valid)


def compare_group_keys(a: str, b: str, granularity: Granularity) -> int:
    """
    Three-way comparison of two group key labels.

    Returns a negative number when `a` sorts first, zero when equal and a
    positive number otherwise.

    Example:
        >>> compare_group_keys("December 2025", "January 2026", Granularity.MONTHLY) < 0
        True
        >>> compare_group_keys("Saturday", "Sunday", Granularity.DAY_OF_WEEK) > 0
        True
    """
    key_a = bucket_sort_key(key_from_label(a, granularity))
    key_b = bucket_sort_key(key_from_label(b, granularity))
    return (key_a > key_b) - (key_a < key_b)


# =============================================================================
# Axis Labels
# =============================================================================


def format_bucket_label(label: str, granularity: Granularity) -> str:
    """
    Short axis tick for a group key.

    - Hourly: "7:00"
    - Daily / Weekly: "Sep 1"
    - Day Of Week: "Sun"
    - Monthly: "Jan"

    Unparseable dates are returned unchanged.
    """
    if not label:
        return ''
    granularity = Granularity(granularity)
    if granularity is Granularity.HOURLY:
        return f"{label}:00"
    if granularity is Granularity.DAY_OF_WEEK:
        return label[:3]
    if granularity is Granularity.MONTHLY:
        return label.split(' ')[0][:3] or label
    parsed = parse_date_key(label)
    if parsed is None:
        return label
    return f"{MONTH_NAMES[parsed.month - 1][:3]} {parsed.day}"
