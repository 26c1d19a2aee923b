"""
FastAPI router for the sales dashboard.

Implements:
- POST /dashboard/chart: aggregate dashboard data into chart rows
- POST /dashboard/summary: headline counts for the summary cards
- POST /dashboard/snapshots: agent, carrier and vendor snapshot tables
- POST /dashboard/data: fetch a refresh from the data API and return the
  chart, summary and snapshots in one response

The first three endpoints are pure: the caller posts a payload it already
holds (for example after switching the chart granularity) and nothing is
fetched. /dashboard/data forwards the caller's Authorization header to the
upstream data API.

Granularity Defaults:
- An explicit `granularity` in the request always wins
- /dashboard/data charts single-day ranges by hour
- Otherwise Settings.default_granularity applies
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException

from agency_dashboard.core.dependencies import CredentialsDep, DataClientDep, SettingsDep
from agency_dashboard.core.errors import DashboardError, status_code_for
from agency_dashboard.models.enums import SortDirection
from agency_dashboard.models.schemas import (
    AggregatedRow,
    ChartRequest,
    DashboardData,
    DashboardRequest,
    DashboardResponse,
    DashboardSnapshots,
    DashboardSummary,
    SnapshotRequest,
)
from agency_dashboard.services.date_ranges import default_granularity_for_range, resolve_date_range
from agency_dashboard.services.reporting import (
    build_agent_snapshot,
    build_carrier_snapshot,
    build_vendor_report,
    summarize_dashboard,
)
from agency_dashboard.services.series_merge import build_chart_series


logger = logging.getLogger(__name__)

router = APIRouter()

DASHBOARD_DATA_PATH = '/dashboard/data'


def _snapshots(
    data: DashboardData,
    agent_names: Dict[str, str],
    vendor_sort_key: Optional[str] = None,
    vendor_direction: SortDirection = SortDirection.ASC,
    vendor_filter_text: Optional[str] = None,
) -> DashboardSnapshots:
    return DashboardSnapshots(
        agents=build_agent_snapshot(data.sales_by_agent, data.calls_by_agent, agent_names),
        carriers=build_carrier_snapshot(data.sales_by_carrier),
        vendors=build_vendor_report(
            data.vendor_data, vendor_sort_key, vendor_direction, vendor_filter_text
        ),
    )


def _unwrap(result: Any) -> Any:
    """Accept both a bare payload and one wrapped as {"data": ...}."""
    if isinstance(result, dict) and isinstance(result.get('data'), dict):
        return result['data']
    return result


# =============================================================================
# Pure Aggregation Endpoints
# =============================================================================

@router.post("/chart", response_model=List[AggregatedRow])
async def dashboard_chart(request: ChartRequest, settings: SettingsDep) -> List[AggregatedRow]:
    """
    Aggregate call and sales series into chart rows.

    Returns an empty list when the payload has no rows for the chosen
    granularity.
    """
    granularity = request.granularity or settings.default_granularity
    return build_chart_series(request.data, granularity)


@router.post("/summary", response_model=DashboardSummary)
async def dashboard_summary(data: DashboardData) -> DashboardSummary:
    return summarize_dashboard(data)


@router.post("/snapshots", response_model=DashboardSnapshots)
async def dashboard_snapshots(request: SnapshotRequest) -> DashboardSnapshots:
    return _snapshots(
        request.data,
        request.agent_names,
        request.vendor_sort_key,
        request.vendor_direction,
        request.vendor_filter_text,
    )


# =============================================================================
# Upstream Refresh
# =============================================================================

@router.post("/data", response_model=DashboardResponse)
async def dashboard_data(
    request: DashboardRequest,
    client: DataClientDep,
    credentials: CredentialsDep,
    settings: SettingsDep,
) -> DashboardResponse:
    """
    Fetch dashboard data for a date range and line of business.

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
        'primaryDateRange': {
            'from': date_range.start_date.isoformat(),
            'to': date_range.end_date.isoformat(),
        },
        'lineOfBusiness': request.line_of_business.value,
    }

    try:
        result = await client.execute(
            DASHBOARD_DATA_PATH, credentials, payload, dedupe_key='dashboard'
        )
    except DashboardError as e:
        logger.error(f"Dashboard refresh failed: {e}")
        raise HTTPException(status_code=status_code_for(e), detail=str(e))

    raw = _unwrap(result) or {}
    if not isinstance(raw, dict):
        logger.error(f"Unexpected dashboard payload type: {type(raw).__name__}")
        raise HTTPException(status_code=502, detail="Data API returned an unexpected payload")
    data = DashboardData.model_validate(raw)
    granularity = request.granularity or default_granularity_for_range(
        date_range, settings.default_granularity
    )

    logger.info(
        f"Dashboard refresh {date_range.start_date} to {date_range.end_date} "
        f"({request.line_of_business.value}, {granularity.value})"
    )
    return DashboardResponse(
        date_range=date_range,
        granularity=granularity,
        chart=build_chart_series(data, granularity),
        summary=summarize_dashboard(data),
        snapshots=_snapshots(data, request.agent_names),
    )
