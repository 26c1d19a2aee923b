"""
Reporting service for the dashboard snapshots and breakdown reports.

This module turns the flat rows returned by the data API into the tables the
dashboard renders:

- Dashboard summary cards (primary/secondary sales, active/at-risk policies)
- Agent snapshot: sales and calls per agent merged by agent id, with CPA
- Carrier snapshot: sales per carrier with percent of total
- State and vendor breakdowns with derived rates
- Agent breakdown: per-vendor rows rolled up to one entry per agent

Totals Row Handling:
The data API appends a synthetic grand-total row flagged `is_total`. It is
split off before filtering and sorting and appended after, so it always
renders last whatever the active sort column.

Derived fields are recomputed from counts and costs with the guarded formulas
in derived_metrics, so a row with no sales always carries CPA None.
"""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, get_args

from agency_dashboard.models.enums import PolicyStatus, SortDirection
from agency_dashboard.models.schemas import (
    AgentBreakdown,
    AgentBreakdownEntry,
    AgentCallsRow,
    AgentReportRow,
    AgentSalesRow,
    AgentSnapshotRow,
    CallPerformanceRow,
    CarrierSalesRow,
    CarrierSnapshotRow,
    DashboardData,
    DashboardSummary,
    ReportRow,
    StateReportRow,
    VendorReportRow,
)
from agency_dashboard.services.derived_metrics import (
    billable_percentage,
    conversion_rate_percentage,
    cost_per_acquisition,
    percentages_of_total,
    weighted_average,
)


logger = logging.getLogger(__name__)

RowT = TypeVar('RowT', bound=ReportRow)
CallRowT = TypeVar('CallRowT', bound=CallPerformanceRow)

_SORTABLE_TYPES = (int, float, str, bool, type(None))


# =============================================================================
# Table Ordering
# =============================================================================


def split_totals(rows: Iterable[RowT]) -> Tuple[List[RowT], Optional[RowT]]:
    """
    Separate the grand-total row from the data rows.

    If the upstream sends more than one total row the first one wins and the
    rest are dropped with a warning.
    """
    data_rows: List[RowT] = []
    totals_row: Optional[RowT] = None
    for row in rows:
        if not row.is_total:
            data_rows.append(row)
        elif totals_row is None:
            totals_row = row
        else:
            logger.warning("Dropping duplicate totals row from report payload")
    return data_rows, totals_row


def filter_rows(rows: Sequence[RowT], name_field: str, filter_text: Optional[str]) -> List[RowT]:
    """Keep rows whose `name_field` contains `filter_text`, case-insensitively."""
    if not filter_text:
        return list(rows)
    needle = filter_text.lower()
    return [row for row in rows if needle in str(getattr(row, name_field, '') or '').lower()]


def _is_sortable(model: type, column: str) -> bool:
    """True for a scalar column (int, float, str, bool, optionally None)."""
    field_info = model.model_fields.get(column)
    if field_info is None:
        return False
    annotation = field_info.annotation
    return all(arg in _SORTABLE_TYPES for arg in (get_args(annotation) or (annotation,)))


def sort_rows(
    rows: Sequence[RowT],
    sort_key: Optional[str],
    direction: SortDirection = SortDirection.ASC,
) -> List[RowT]:
    """
    Stable sort on one column.

    Rows whose value is None (an undefined CPA, say) go last in either
    direction. An unknown or non-scalar column (such as an agent's nested
    vendor rows) leaves the order unchanged.
    """
    rows = list(rows)
    if not sort_key or not rows:
        return rows
    if not _is_sortable(type(rows[0]), sort_key):
        logger.warning(f"Ignoring unknown or non-scalar sort column: {sort_key}")
        return rows

    present = [row for row in rows if getattr(row, sort_key) is not None]
    missing = [row for row in rows if getattr(row, sort_key) is None]
    present.sort(
        key=lambda row: getattr(row, sort_key),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )
    return present + missing


def order_report_rows(
    rows: Iterable[RowT],
    name_field: str,
    sort_key: Optional[str] = None,
    direction: SortDirection = SortDirection.ASC,
    filter_text: Optional[str] = None,
) -> List[RowT]:
    """
    Filter and sort a breakdown table, keeping the totals row last.

    Args:
        rows: Report rows including at most one `is_total` row.
        name_field: Column the free-text filter matches against.
        sort_key: Column to sort by, or None for upstream order.
        direction: Sort direction.
        filter_text: Case-insensitive substring filter; the totals row is
            never filtered out.

    Returns:
        Ordered data rows followed by the totals row, if any.
    """
    data_rows, totals_row = split_totals(rows)
    data_rows = filter_rows(data_rows, name_field, filter_text)
    data_rows = sort_rows(data_rows, sort_key, direction)
    if totals_row is not None:
        data_rows.append(totals_row)
    return data_rows


# =============================================================================
# Row Derivations
# =============================================================================


def derive_call_performance(row: CallRowT) -> CallRowT:
    """Recompute billable %, CPA and conversion % from a row's counts."""
    return row.model_copy(update={
        'billable_percentage': billable_percentage(row.billable_calls, row.completed_calls),
        'call_sale_cpa': cost_per_acquisition(row.call_cost, row.call_sale_count),
        'call_conversion_rate_percentage': conversion_rate_percentage(
            row.call_sale_count, row.billable_calls
        ),
    })


def derive_vendor_row(row: VendorReportRow) -> VendorReportRow:
    """
    Recompute the per-channel CPAs of a vendor row.

    `total_sale_count` is filled from the channel counts when the upstream
    left it at zero.
    """
    channel_total = row.call_sale_count + row.lead_sale_count + row.drop_sale_count
    return row.model_copy(update={
        'call_sale_cpa': cost_per_acquisition(row.call_cost, row.call_sale_count),
        'lead_sale_cpa': cost_per_acquisition(row.lead_cost, row.lead_sale_count),
        'drop_sale_cpa': cost_per_acquisition(row.drop_cost, row.drop_sale_count),
        'total_sale_count': row.total_sale_count or channel_total,
    })


# =============================================================================
# Breakdown Reports
# =============================================================================


def build_state_report(
    rows: Iterable[StateReportRow],
    sort_key: Optional[str] = None,
    direction: SortDirection = SortDirection.ASC,
    filter_text: Optional[str] = None,
) -> List[StateReportRow]:
    derived = [derive_call_performance(row) for row in rows]
    return order_report_rows(derived, 'state_name', sort_key, direction, filter_text)


def build_vendor_report(
    rows: Iterable[VendorReportRow],
    sort_key: Optional[str] = None,
    direction: SortDirection = SortDirection.ASC,
    filter_text: Optional[str] = None,
) -> List[VendorReportRow]:
    derived = [derive_vendor_row(row) for row in rows]
    return order_report_rows(derived, 'friendlyname', sort_key, direction, filter_text)


def build_agent_breakdown(
    rows: Iterable[AgentReportRow],
    sort_key: Optional[str] = None,
    direction: SortDirection = SortDirection.ASC,
    filter_text: Optional[str] = None,
) -> AgentBreakdown:
    """
    Roll per-vendor agent rows up to one entry per agent.

    Counts and costs are summed across an agent's vendors. The average
    billable duration is weighted by each vendor's billable calls. Rates and
    CPA are recomputed from the summed counts. Agents appear in the order
    first seen unless a sort column is given; the upstream totals row is
    returned separately.

    Args:
        rows: Agent/vendor rows from the agent report, plus the totals row.
        sort_key: Agent-level column to sort by.
        direction: Sort direction.
        filter_text: Substring filter on the agent's full name.

    Returns:
        AgentBreakdown with one entry per agent and the derived totals row.
    """
    data_rows, totals_row = split_totals(rows)
    data_rows = filter_rows(data_rows, 'agent_full_name', filter_text)

    grouped: "OrderedDict[str, List[AgentReportRow]]" = OrderedDict()
    for row in data_rows:
        grouped.setdefault(row.agent_full_name, []).append(derive_call_performance(row))

    agents = []
    for agent_name, vendors in grouped.items():
        billable = sum(v.billable_calls for v in vendors)
        entry = AgentBreakdownEntry(
            agent_full_name=agent_name,
            live_calls=sum(v.live_calls for v in vendors),
            completed_calls=sum(v.completed_calls for v in vendors),
            billable_calls=billable,
            call_cost=sum(v.call_cost for v in vendors),
            call_sale_count=sum(v.call_sale_count for v in vendors),
            average_billable_duration=weighted_average(
                [v.average_billable_duration for v in vendors],
                [v.billable_calls for v in vendors],
            ),
            vendors=vendors,
        )
        agents.append(derive_call_performance(entry))

    agents = sort_rows(agents, sort_key, direction)
    if totals_row is not None:
        totals_row = derive_call_performance(totals_row)

    logger.info(f"Built agent breakdown: {len(agents)} agents from {len(data_rows)} rows")
    return AgentBreakdown(agents=agents, totals_row=totals_row)


# =============================================================================
# Dashboard Snapshots
# =============================================================================


def build_agent_snapshot(
    sales_by_agent: Iterable[AgentSalesRow],
    calls_by_agent: Iterable[AgentCallsRow],
    agent_names: Optional[Dict[str, str]] = None,
) -> List[AgentSnapshotRow]:
    """
    Merge per-agent sales and calls into the dashboard agent table.

    Every agent id seen in either input gets a row; missing sides count as
    zero. Rows are ordered by core sales descending, then agent id.
    """
    agent_names = agent_names or {}
    sales_map = {row.agent_id: row for row in sales_by_agent}
    calls_map = {row.agent_id: row for row in calls_by_agent}

    snapshot = []
    for agent_id in list(sales_map) + [a for a in calls_map if a not in sales_map]:
        sales = sales_map.get(agent_id)
        calls = calls_map.get(agent_id)
        lead_cost = calls.total_cost if calls else 0
        core_sales = sales.sale_count if sales else 0
        snapshot.append(AgentSnapshotRow(
            agent_name=agent_names.get(agent_id, agent_id),
            agent_id=agent_id,
            call_count=calls.call_count if calls else 0,
            core_sales=core_sales,
            lead_cost=lead_cost,
            cpa=cost_per_acquisition(lead_cost, core_sales),
        ))

    snapshot.sort(key=lambda row: (-row.core_sales, row.agent_id))
    return snapshot


def build_carrier_snapshot(carriers: Iterable[CarrierSalesRow]) -> List[CarrierSnapshotRow]:
    """Carrier table with each carrier's share of sales, largest first."""
    carriers = list(carriers)
    shares = percentages_of_total([c.sale_count for c in carriers])
    rows = [
        CarrierSnapshotRow(
            carrier=c.carrier,
            top_contract=c.top_contract or None,
            sale_count=c.sale_count,
            percent_of_total=share,
        )
        for c, share in zip(carriers, shares)
    ]
    rows.sort(key=lambda row: -row.sale_count)
    return rows


def summarize_dashboard(data: DashboardData) -> DashboardSummary:
    """Headline counts for the dashboard summary cards."""

    def _policy_count(status: PolicyStatus) -> int:
        for policy in data.policy_info:
            if policy.status == status.value:
                return policy.count
        return 0

    return DashboardSummary(
        primary_sales=sum(point.count for point in data.core_sales_by_day),
        secondary_sales=len(data.secondary_sale_records),
        active_policies=_policy_count(PolicyStatus.ACTIVE),
        at_risk_policies=_policy_count(PolicyStatus.PENDING_CANCELLATION),
    )
