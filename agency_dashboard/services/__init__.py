"""
Dashboard Services Module

This module contains the business logic of the agency dashboard. The
services are pure functions over Pydantic models: no network access, no
clock reads, and no exceptions for malformed data.

Services:
- bucketing: Granularity group keys and their ordering
- series_merge: Union of per-metric series into chart rows
- derived_metrics: CPA, percentages, rates and display formatting
- reporting: Breakdown tables, snapshots and summary cards
- date_ranges: Date picker presets
- export: CSV rendering of the breakdown reports (pandas)

All services are consumed by the API layer (agency_dashboard/api/).
"""

# =============================================================================
# Bucketing Exports
# Maps raw dates and hours to granularity group keys and orders those keys
# =============================================================================

from agency_dashboard.services.bucketing import (
    GroupKey,
    WEEKDAY_NAMES,
    MONTH_NAMES,
    bucket_for,
    bucket_sort_key,
    compare_group_keys,
    format_bucket_label,
    group_key_for,
    parse_date_key,
    week_start,
)

# =============================================================================
# Series Merge Exports
# Combines inbound/outbound/primary/secondary series into chart rows
# =============================================================================

from agency_dashboard.services.series_merge import (
    MetricSeries,
    SeriesPoint,
    build_chart_series,
    merge,
    series_from_rows,
)

# =============================================================================
# Derived Metrics Exports
# Ratios with an explicit "undefined" result and display formatting
# =============================================================================

from agency_dashboard.services.derived_metrics import (
    billable_percentage,
    conversion_rate_percentage,
    cost_per_acquisition,
    format_cpa,
    format_currency,
    format_duration,
    format_percentage,
    percent_of_total,
    percentages_of_total,
    round_half_up,
    weighted_average,
)

# =============================================================================
# Reporting Exports
# Breakdown ordering, agent roll-up, dashboard snapshots and summary cards
# =============================================================================

from agency_dashboard.services.reporting import (
    build_agent_breakdown,
    build_agent_snapshot,
    build_carrier_snapshot,
    build_state_report,
    build_vendor_report,
    order_report_rows,
    summarize_dashboard,
)

# =============================================================================
# Date Range Exports
# =============================================================================

from agency_dashboard.services.date_ranges import (
    default_granularity_for_range,
    resolve_date_range,
    resolve_preset,
)

# =============================================================================
# Export Exports
# CSV rendering of the agent, state and vendor reports
# =============================================================================

from agency_dashboard.services.export import (
    agent_report_csv,
    report_filename,
    state_report_csv,
    vendor_report_csv,
)


__all__ = [
    # Bucketing
    "GroupKey",
    "WEEKDAY_NAMES",
    "MONTH_NAMES",
    "bucket_for",
    "bucket_sort_key",
    "compare_group_keys",
    "format_bucket_label",
    "group_key_for",
    "parse_date_key",
    "week_start",
    # Series merge
    "MetricSeries",
    "SeriesPoint",
    "build_chart_series",
    "merge",
    "series_from_rows",
    # Derived metrics
    "billable_percentage",
    "conversion_rate_percentage",
    "cost_per_acquisition",
    "format_cpa",
    "format_currency",
    "format_duration",
    "format_percentage",
    "percent_of_total",
    "percentages_of_total",
    "round_half_up",
    "weighted_average",
    # Reporting
    "build_agent_breakdown",
    "build_agent_snapshot",
    "build_carrier_snapshot",
    "build_state_report",
    "build_vendor_report",
    "order_report_rows",
    "summarize_dashboard",
    # Date ranges
    "default_granularity_for_range",
    "resolve_date_range",
    "resolve_preset",
    # CSV export
    "agent_report_csv",
    "report_filename",
    "state_report_csv",
    "vendor_report_csv",
]
