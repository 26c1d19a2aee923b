"""
Series merge service for the interactive chart.

Combines independently fetched metric series (inbound calls, outbound calls,
primary sales, secondary sales) into one row per group key, filling metrics a
series did not report with zero, then orders the rows for the granularity.

Merge Semantics:
- Hourly / Daily: direct union. Each raw key is its own bucket; a series sets
  its metric on the matching row, and a key seen by one series only still
  produces a row with the other metrics at 0.
- Day Of Week / Weekly / Monthly: accumulating union. Many raw dates land in
  one bucket, so contributions are summed into the row.

Ordering uses bucketing.bucket_sort_key. The earliest raw date behind each
Weekly/Monthly bucket is tracked in a map of its own and passed to the sort
step; it never appears on the output rows.

The merge is total: empty input gives an empty list and every numeric field
of every row is an int.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from agency_dashboard.models.enums import Granularity, MetricKind
from agency_dashboard.models.schemas import AggregatedRow, DashboardData
from agency_dashboard.services.bucketing import GroupKey, bucket_for, bucket_sort_key


logger = logging.getLogger(__name__)

ROW_METRIC_FIELDS = ("inbound", "outbound", "primary", "secondary")


# =============================================================================
# Series Data Classes
# =============================================================================


@dataclass(frozen=True)
class SeriesPoint:
    """
    One raw observation of a metric series.

    Attributes:
        key: "YYYY-MM-DD" date, or the hour "0".."23" for hourly series.
        count: Observed count; anything non-numeric counts as 0.
    """
    key: Any
    count: Any = 0


@dataclass
class MetricSeries:
    """All observations of one metric kind for the requested period."""
    metric_kind: MetricKind
    records: List[SeriesPoint] = field(default_factory=list)


def _safe_count(value: Any) -> int:
    """Coerce a raw count to int; None, NaN and junk become 0."""
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def series_from_rows(
    metric_kind: MetricKind,
    rows: Optional[Iterable[Mapping[str, Any]]],
    value_field: str,
    key_field: str = "date",
) -> MetricSeries:
    """
    Build a series from loosely shaped upstream rows.

    Example:
        >>> calls = [{"date": "2025-09-01", "inbound": 10, "outbound": 2}]
        >>> series_from_rows(MetricKind.INBOUND, calls, "inbound").records
        [SeriesPoint(key='2025-09-01', count=10)]
    """
    return MetricSeries(
        metric_kind=MetricKind(metric_kind),
        records=[
            SeriesPoint(key=row.get(key_field), count=row.get(value_field))
            for row in (rows or [])
        ],
    )


# =============================================================================
# Merge
# =============================================================================


def merge(series_list: Iterable[MetricSeries], granularity: Granularity) -> List[AggregatedRow]:
    """
    Merge metric series into chart rows ordered for `granularity`.

    Args:
        series_list: Series to combine. Several series may share a metric
            kind; their contributions are combined the same way as records
            within one series.
        granularity: Requested time-bucket resolution.

    Returns:
        One AggregatedRow per group key, in the granularity's order.

    Example:
        >>> calls = MetricSeries(MetricKind.INBOUND, [SeriesPoint("2025-09-01", 5)])
        >>> sales = MetricSeries(MetricKind.PRIMARY_SALE, [SeriesPoint("2025-09-02", 3)])
        >>> [r.model_dump() for r in merge([calls, sales], Granularity.WEEKLY)]
        [{'date': '2025-08-31', 'inbound': 5, 'outbound': 0, 'primary': 3, 'secondary': 0}]
    """
    granularity = Granularity(granularity)
    accumulate = granularity.accumulates

    totals: Dict[GroupKey, Dict[str, int]] = {}
    representative_dates: Dict[GroupKey, str] = {}

    for series in series_list:
        metric_field = MetricKind(series.metric_kind).row_field
        for record in series.records:
            key = bucket_for(record.key, granularity)
            metrics = totals.get(key)
            if metrics is None:
                metrics = {name: 0 for name in ROW_METRIC_FIELDS}
                totals[key] = metrics

            count = _safe_count(record.count)
            if accumulate:
                metrics[metric_field] += count
                raw = str(record.key)
                earliest = representative_dates.get(key)
                if earliest is None or raw < earliest:
                    representative_dates[key] = raw
            else:
                metrics[metric_field] = count

    ordered = sorted(totals, key=lambda k: bucket_sort_key(k, representative_dates.get(k)))
    logger.debug(f"Merged {len(ordered)} {granularity.value} buckets")
    return [AggregatedRow(date=key.label, **totals[key]) for key in ordered]


def build_chart_series(data: DashboardData, granularity: Granularity) -> List[AggregatedRow]:
    """
    Build the interactive chart rows from a dashboard payload.

    Hourly uses the per-hour arrays keyed by `hour`; every other granularity
    groups the per-day arrays keyed by `date`. Call rows feed the inbound and
    outbound lines, core sales the primary bars and secondary sales the
    secondary bars.
    """
    granularity = Granularity(granularity)
    use_hourly = granularity is Granularity.HOURLY

    if use_hourly:
        calls = data.calls_by_hour
        primary = data.core_sales_by_hour
        secondary = data.secondary_sales_by_hour
    else:
        calls = data.calls_by_day
        primary = data.core_sales_by_day
        secondary = data.secondary_sales_by_day

    def _key(row) -> Any:
        return row.hour if use_hourly else row.date

    series = [
        MetricSeries(MetricKind.INBOUND, [SeriesPoint(_key(r), r.inbound) for r in calls]),
        MetricSeries(MetricKind.OUTBOUND, [SeriesPoint(_key(r), r.outbound) for r in calls]),
        MetricSeries(MetricKind.PRIMARY_SALE, [SeriesPoint(_key(r), r.count) for r in primary]),
        MetricSeries(MetricKind.SECONDARY_SALE, [SeriesPoint(_key(r), r.count) for r in secondary]),
    ]
    return merge(series, granularity)
