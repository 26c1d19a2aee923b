"""
FastAPI router for the breakdown reports.

Implements POST /reports/agent, /reports/state and /reports/vendor, which
fetch a report from the data API and return it sorted and filtered, and
POST /reports/{kind}/export, which returns the same report as CSV.

Each report request resolves its date range first (a preset or explicit
dates), then asks the upstream for `/report/generate/{kind}` with the
selected agent, state or vendor. Report generation is deduplicated per
report kind: a second request for the same kind while one is running
answers 409.

Upstream rows carry an `is_total` flag; the totals row is kept out of the
sort and filter and always returned last (or separately for the agent
report).
"""

import logging
from datetime import date
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from agency_dashboard.core.dependencies import CredentialsDep, DataClientDep
from agency_dashboard.core.errors import DashboardError, status_code_for
from agency_dashboard.models.enums import ReportKind
from agency_dashboard.models.schemas import (
    AgentBreakdown,
    AgentReportResponse,
    AgentReportRow,
    DateRange,
    ReportRequest,
    StateReportResponse,
    StateReportRow,
    VendorReportResponse,
    VendorReportRow,
)
from agency_dashboard.services.date_ranges import resolve_date_range
from agency_dashboard.services.export import (
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


logger = logging.getLogger(__name__)

router = APIRouter()

# Upstream request field naming the selected agent, state or vendor.
SELECTION_FIELDS = {
    ReportKind.AGENT: 'selectedAgent',
    ReportKind.STATE: 'selectedState',
    ReportKind.VENDOR: 'selectedVendor',
}


# =============================================================================
# Upstream Fetch
# =============================================================================

async def fetch_report_rows(
    kind: ReportKind,
    request: ReportRequest,
    client: Any,
    credentials: Any,
) -> Tuple[DateRange, List[Dict[str, Any]]]:
    """
    Resolve the request's date range and fetch the raw report rows.

    Raises:
        HTTPException: 422 for an invalid date range, 401/409/502 for
            upstream failures.
    """
    try:
        date_range = resolve_date_range(
            request.preset, request.start_date, request.end_date, today=date.today()
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    payload = {
        SELECTION_FIELDS[kind]: request.selection,
        'startDate': date_range.start_date.isoformat(),
        'endDate': date_range.end_date.isoformat(),
    }

    try:
        result = await client.execute(
            f"/report/generate/{kind.value}", credentials, payload, dedupe_key=kind.value
        )
    except DashboardError as e:
        logger.error(f"{kind.value} report generation failed: {e}")
        raise HTTPException(status_code=status_code_for(e), detail=str(e))

    rows = result.get('data') if isinstance(result, dict) else result
    if rows is None:
        rows = []
    if not isinstance(rows, list):
        logger.error(f"Unexpected {kind.value} report payload type: {type(rows).__name__}")
        raise HTTPException(status_code=502, detail="Data API returned an unexpected payload")

    logger.info(
        f"Fetched {len(rows)} {kind.value} report rows for "
        f"{date_range.start_date} to {date_range.end_date}"
    )
    return date_range, rows


async def _agent_report(request, client, credentials) -> AgentReportResponse:
    date_range, rows = await fetch_report_rows(ReportKind.AGENT, request, client, credentials)
    breakdown = build_agent_breakdown(
        [AgentReportRow.model_validate(row) for row in rows],
        request.sort_key,
        request.direction,
        request.filter_text,
    )
    return AgentReportResponse(
        date_range=date_range,
        agents=breakdown.agents,
        totals_row=breakdown.totals_row,
    )


async def _state_report(request, client, credentials) -> StateReportResponse:
    date_range, rows = await fetch_report_rows(ReportKind.STATE, request, client, credentials)
    ordered = build_state_report(
        [StateReportRow.model_validate(row) for row in rows],
        request.sort_key,
        request.direction,
        request.filter_text,
    )
    return StateReportResponse(date_range=date_range, rows=ordered)


async def _vendor_report(request, client, credentials) -> VendorReportResponse:
    date_range, rows = await fetch_report_rows(ReportKind.VENDOR, request, client, credentials)
    ordered = build_vendor_report(
        [VendorReportRow.model_validate(row) for row in rows],
        request.sort_key,
        request.direction,
        request.filter_text,
    )
    return VendorReportResponse(date_range=date_range, rows=ordered)


# =============================================================================
# Report Endpoints
# =============================================================================

@router.post("/agent", response_model=AgentReportResponse)
async def agent_report(
    request: ReportRequest,
    client: DataClientDep,
    credentials: CredentialsDep,
) -> AgentReportResponse:
    """Per-agent totals with each agent's vendor rows nested beneath."""
    return await _agent_report(request, client, credentials)


@router.post("/state", response_model=StateReportResponse)
async def state_report(
    request: ReportRequest,
    client: DataClientDep,
    credentials: CredentialsDep,
) -> StateReportResponse:
    return await _state_report(request, client, credentials)


@router.post("/vendor", response_model=VendorReportResponse)
async def vendor_report(
    request: ReportRequest,
    client: DataClientDep,
    credentials: CredentialsDep,
) -> VendorReportResponse:
    return await _vendor_report(request, client, credentials)


@router.post("/{kind}/export")
async def export_report(
    kind: ReportKind,
    request: ReportRequest,
    client: DataClientDep,
    credentials: CredentialsDep,
) -> Response:
    """
    Download a report as CSV.

    The response carries a Content-Disposition filename built from the
    report kind and the resolved date range.
    """
    if kind is ReportKind.AGENT:
        report = await _agent_report(request, client, credentials)
        content = agent_report_csv(
            AgentBreakdown(agents=report.agents, totals_row=report.totals_row),
            request.vendor_names,
        )
    elif kind is ReportKind.STATE:
        report = await _state_report(request, client, credentials)
        content = state_report_csv(report.rows)
    else:
        report = await _vendor_report(request, client, credentials)
        content = vendor_report_csv(report.rows)

    filename = report_filename(kind, report.date_range)
    return Response(
        content=content,
        media_type='text/csv',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )
