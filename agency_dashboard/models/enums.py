"""
Enumeration definitions for the Agency Dashboard backend.

All enums inherit from both `str` and `Enum` so they serialize as plain strings
in pydantic models and FastAPI responses. Values match the labels the dashboard
shell sends and displays (e.g. "Day Of Week", "pendingcancellation").
"""

from enum import Enum


class Granularity(str, Enum):
    """
    Time-bucket resolution for the interactive chart.

    - Hourly: hour of day 0-23, taken from hourly records
    - Daily: the calendar date itself
    - Day Of Week: weekday name, ordered Sunday through Saturday
    - Weekly: the Sunday that starts the week
    - Monthly: "<MonthName> <Year>"

    Lookup is lenient about separators and case, so "day-of-week",
    "Day_Of_Week" and "DAY OF WEEK" all resolve to DAY_OF_WEEK.
    """
    HOURLY = "Hourly"
    DAILY = "Daily"
    DAY_OF_WEEK = "Day Of Week"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        normalized = value.replace("-", " ").replace("_", " ").strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None

    @property
    def accumulates(self) -> bool:
        """True when several raw records can land in the same bucket."""
        return self in (Granularity.DAY_OF_WEEK, Granularity.WEEKLY, Granularity.MONTHLY)


class MetricKind(str, Enum):
    """
    Kind of count carried by a metric series.

    Each kind feeds exactly one numeric field of an aggregated chart row
    (see `row_field`).
    """
    INBOUND = "inbound"
    OUTBOUND = "outbound"
    PRIMARY_SALE = "primary_sale"
    SECONDARY_SALE = "secondary_sale"

    @property
    def row_field(self) -> str:
        return _ROW_FIELDS[self]


_ROW_FIELDS = {
    MetricKind.INBOUND: "inbound",
    MetricKind.OUTBOUND: "outbound",
    MetricKind.PRIMARY_SALE: "primary",
    MetricKind.SECONDARY_SALE: "secondary",
}


class SortDirection(str, Enum):
    """Direction for report table sorting."""
    ASC = "asc"
    DESC = "desc"


class DateRangePreset(str, Enum):
    """
    Named date ranges offered by the report and dashboard pickers.

    Weeks start on Sunday. LIFETIME starts on 2020-01-01. CUSTOM means the
    caller supplies explicit start and end dates.
    """
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7 = "last7"
    LAST_14 = "last14"
    LAST_30 = "last30"
    THIS_WEEK = "thisWeek"
    LAST_WEEK = "lastWeek"
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    LIFETIME = "lifetime"
    CUSTOM = "custom"


class LineOfBusiness(str, Enum):
    """Product line filter forwarded to the data API."""
    ALL = "All"
    MEDICARE_ADVANTAGE = "MedAdv"
    FINAL_EXPENSE = "FE"


class PolicyStatus(str, Enum):
    """Policy statuses counted on the dashboard summary cards."""
    ACTIVE = "active"
    PENDING_CANCELLATION = "pendingcancellation"


class ReportKind(str, Enum):
    """Breakdown reports generated by the data API."""
    AGENT = "agent"
    STATE = "state"
    VENDOR = "vendor"
