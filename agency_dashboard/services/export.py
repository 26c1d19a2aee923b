"""
CSV export for the breakdown reports.

Reports are laid out as pandas DataFrames and written with DataFrame.to_csv,
which handles quoting of names containing commas or quotes.

Layouts:
- Agent: one agent total row followed by its vendor rows (vendor names
  indented), a blank row between agents, then a blank row and the totals row
  labelled "ALL VENDORS".
- State: one row per state, a blank row, then the totals row.
- Vendor: one row per vendor with call/lead/drop columns, a blank row, then
  the totals row.

Money columns are rendered as dollars; CPA columns use the no-sales sentinel
when there were no sales.
"""

from typing import Dict, List, Optional, Sequence

import pandas as pd

from agency_dashboard.models.enums import ReportKind
from agency_dashboard.models.schemas import (
    AgentBreakdown,
    CallPerformanceRow,
    DateRange,
    StateReportRow,
    VendorReportRow,
)
from agency_dashboard.services.derived_metrics import format_cpa, format_currency, format_duration
from agency_dashboard.services.reporting import split_totals


CALL_PERFORMANCE_COLUMNS = [
    'Live Calls',
    'Completed',
    'Billable',
    'Avg Duration',
    'Billable %',
    'Call Cost',
    'Sales',
    'CPA',
    'Conversion %',
]

AGENT_COLUMNS = ['Agent Name', 'Vendor'] + CALL_PERFORMANCE_COLUMNS

STATE_COLUMNS = ['State Name'] + CALL_PERFORMANCE_COLUMNS

VENDOR_COLUMNS = [
    'Vendor',
    'Calls', 'Billable Calls', 'Call Cost', 'Call Sales', 'Call CPA',
    'Leads', 'Lead Cost', 'Lead Sales', 'Lead CPA',
    'Drops', 'Drop Cost', 'Drop Sales', 'Drop CPA',
    'Total Sales',
]


def _call_performance_cells(row: CallPerformanceRow) -> List[object]:
    return [
        row.live_calls,
        row.completed_calls,
        row.billable_calls,
        format_duration(row.average_billable_duration),
        row.billable_percentage,
        format_currency(row.call_cost),
        row.call_sale_count,
        format_cpa(row.call_sale_cpa),
        row.call_conversion_rate_percentage,
    ]


def _blank(columns: Sequence[str]) -> List[str]:
    return [''] * len(columns)


def _to_csv(records: List[List[object]], columns: Sequence[str]) -> str:
    frame = pd.DataFrame(records, columns=list(columns))
    return frame.to_csv(index=False, lineterminator='\n')


def agent_report_csv(
    breakdown: AgentBreakdown,
    vendor_names: Optional[Dict[str, str]] = None,
) -> str:
    """
    Agent report CSV.

    Args:
        breakdown: Output of reporting.build_agent_breakdown.
        vendor_names: Vendor id to display name; unknown ids are shown raw.
    """
    vendor_names = vendor_names or {}
    records: List[List[object]] = []

    for index, agent in enumerate(breakdown.agents):
        records.append([agent.agent_full_name, ''] + _call_performance_cells(agent))
        for vendor in agent.vendors:
            name = vendor_names.get(vendor.vendor, vendor.vendor)
            records.append(['', f"  {name}"] + _call_performance_cells(vendor))
        if index < len(breakdown.agents) - 1:
            records.append(_blank(AGENT_COLUMNS))

    if breakdown.totals_row is not None:
        totals = breakdown.totals_row
        records.append(_blank(AGENT_COLUMNS))
        records.append([totals.agent_full_name, 'ALL VENDORS'] + _call_performance_cells(totals))

    return _to_csv(records, AGENT_COLUMNS)


def state_report_csv(rows: Sequence[StateReportRow]) -> str:
    """State report CSV; `rows` may include the totals row anywhere."""
    data_rows, totals_row = split_totals(rows)
    records: List[List[object]] = [
        [row.state_name] + _call_performance_cells(row) for row in data_rows
    ]
    if totals_row is not None:
        records.append(_blank(STATE_COLUMNS))
        records.append([totals_row.state_name] + _call_performance_cells(totals_row))
    return _to_csv(records, STATE_COLUMNS)


def _vendor_cells(row: VendorReportRow) -> List[object]:
    return [
        row.friendlyname or row.vendor,
        row.total_calls, row.billable_calls, format_currency(row.call_cost),
        row.call_sale_count, format_cpa(row.call_sale_cpa),
        row.total_leads, format_currency(row.lead_cost),
        row.lead_sale_count, format_cpa(row.lead_sale_cpa),
        row.total_drops, format_currency(row.drop_cost),
        row.drop_sale_count, format_cpa(row.drop_sale_cpa),
        row.total_sale_count,
    ]


def vendor_report_csv(rows: Sequence[VendorReportRow]) -> str:
    """Vendor report CSV; `rows` may include the totals row anywhere."""
    data_rows, totals_row = split_totals(rows)
    records: List[List[object]] = [_vendor_cells(row) for row in data_rows]
    if totals_row is not None:
        records.append(_blank(VENDOR_COLUMNS))
        records.append(_vendor_cells(totals_row))
    return _to_csv(records, VENDOR_COLUMNS)


def report_filename(kind: ReportKind, date_range: DateRange) -> str:
    """e.g. "agent_performance_2025-09-01_to_2025-09-07.csv"."""
    return (
        f"{ReportKind(kind).value}_performance_"
        f"{date_range.start_date.isoformat()}_to_{date_range.end_date.isoformat()}.csv"
    )
