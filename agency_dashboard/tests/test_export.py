"""
Test suite for CSV export of the breakdown reports.

The tests verify:
1. Agent CSV nests vendor rows under each agent and ends with ALL VENDORS
2. State and vendor CSVs put the totals row last behind a blank row
3. Money renders as dollars and undefined CPAs as the no-sales sentinel
4. Names with commas are quoted
"""

import io
from datetime import date
from typing import List

import pandas as pd

from agency_dashboard.models.enums import ReportKind
from agency_dashboard.models.schemas import (
    AgentReportRow,
    DateRange,
    StateReportRow,
    VendorReportRow,
)
from agency_dashboard.services.export import (
    AGENT_COLUMNS,
    VENDOR_COLUMNS,
    agent_report_csv,
    report_filename,
    state_report_csv,
    vendor_report_csv,
)
from agency_dashboard.services.reporting import (
    build_agent_breakdown,
    build_state_report,
    build_vendor_report,
)


def _read(content: str) -> pd.DataFrame:
    return pd.read_csv(io.StringIO(content), dtype=str, keep_default_na=False)


class TestAgentReportCsv:

    def test_layout(self, agent_report_rows: List[AgentReportRow]) -> None:
        content = agent_report_csv(
            build_agent_breakdown(agent_report_rows),
            {'v-1': 'Acme Leads'},
        )
        lines = content.splitlines()

        assert lines[0] == ','.join(AGENT_COLUMNS)
        assert lines[1] == 'Alice Smith,,30,28,15,4:00,53.57,$50.00,3,$16.67,20.0'
        assert lines[2] == ',  Acme Leads,20,18,10,5:00,55.56,$50.00,2,$25.00,20.0'
        assert lines[3] == ',  v-2,10,10,5,2:00,50.0,$0.00,1,$0.00,20.0'
        assert lines[4] == ',' * (len(AGENT_COLUMNS) - 1)
        assert lines[5] == 'Bob Jones,,5,5,0,0:00,0.0,$12.00,0,—,0.0'
        assert lines[6] == ',  Acme Leads,5,5,0,0:00,0.0,$12.00,0,—,0.0'
        assert lines[7] == ',' * (len(AGENT_COLUMNS) - 1)
        assert lines[8] == 'Total,ALL VENDORS,35,33,15,4:00,45.45,$62.00,3,$20.67,20.0'
        assert len(lines) == 9

    def test_without_totals_row(self, agent_report_rows: List[AgentReportRow]) -> None:
        rows = [row for row in agent_report_rows if not row.is_total]
        frame = _read(agent_report_csv(build_agent_breakdown(rows)))

        assert 'ALL VENDORS' not in frame['Vendor'].tolist()
        assert frame['Agent Name'].iloc[-1] == ''

    def test_empty_report_is_header_only(self) -> None:
        content = agent_report_csv(build_agent_breakdown([]))
        assert content.splitlines() == [','.join(AGENT_COLUMNS)]


class TestStateReportCsv:

    def test_totals_row_last(self, state_report_rows: List[StateReportRow]) -> None:
        frame = _read(state_report_csv(build_state_report(state_report_rows)))

        assert frame['State Name'].tolist() == ['Texas', 'Florida', 'Ohio', '', 'Total']
        assert frame.loc[0, 'CPA'] == '$10.00'
        assert frame.loc[2, 'CPA'] == '—'

    def test_names_with_commas_are_quoted(self) -> None:
        content = state_report_csv([StateReportRow(state_name='Washington, D.C.')])

        assert '"Washington, D.C."' in content
        assert _read(content)['State Name'].tolist() == ['Washington, D.C.']


class TestVendorReportCsv:

    def test_layout(self, vendor_report_rows: List[VendorReportRow]) -> None:
        lines = vendor_report_csv(build_vendor_report(vendor_report_rows)).splitlines()

        assert lines[0] == ','.join(VENDOR_COLUMNS)
        assert lines[1] == (
            'Acme Leads,40,30,$120.00,4,$30.00,100,$50.00,0,—,10,$0.00,1,$0.00,5'
        )
        assert lines[-2] == ',' * (len(VENDOR_COLUMNS) - 1)
        assert lines[-1].startswith('Total,50,35,$140.00,5,$28.00')

    def test_large_amounts_keep_thousands_separator(self) -> None:
        row = VendorReportRow(friendlyname='Big', call_cost=123456, call_sale_count=1)
        frame = _read(vendor_report_csv([row]))
        assert frame.loc[0, 'Call Cost'] == '$1,234.56'


class TestReportFilename:

    def test_filename(self) -> None:
        date_range = DateRange(start_date=date(2025, 9, 1), end_date=date(2025, 9, 7))
        assert report_filename(ReportKind.AGENT, date_range) == (
            'agent_performance_2025-09-01_to_2025-09-07.csv'
        )
        assert report_filename('vendor', date_range).startswith('vendor_performance_')
