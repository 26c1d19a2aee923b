"""
Pydantic request/response models for the Agency Dashboard backend.

This module provides type-safe validation and serialization for:
- Raw series rows returned by the upstream data API (calls and sales by day/hour)
- Breakdown rows for the agent, state and vendor reports (with an `is_total` row)
- Snapshot rows for the dashboard tables (agents, carriers)
- Aggregated chart rows produced by the series merge service
- Request bodies accepted by the dashboard and report routers

Upstream payloads are loose: numeric fields may be missing or null, hours may
arrive as ints or strings, and collections may be null. Every model here
normalizes those cases to zeros, strings and empty lists at the boundary so
the services downstream only ever see complete records.

All models use Pydantic v2 syntax.
"""

from datetime import date as DateType
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from agency_dashboard.models.enums import (
    DateRangePreset,
    Granularity,
    LineOfBusiness,
    SortDirection,
)


def _none_to_zero(value: Any) -> Any:
    return 0 if value is None else value


def _none_to_empty_list(value: Any) -> Any:
    return [] if value is None else value


# =============================================================================
# Raw Series Rows (upstream data API)
# =============================================================================


class _SeriesRow(BaseModel):
    """
    Common shape of a per-day or per-hour series row.

    Daily rows carry `date` ("YYYY-MM-DD"); hourly rows carry `hour`
    ("0".."23"). Both are kept as strings so malformed values survive to the
    bucketing engine, which logs and falls back instead of failing validation.
    """
    model_config = ConfigDict(extra='ignore')

    date: Optional[str] = None
    hour: Optional[str] = None

    @field_validator('date', 'hour', mode='before')
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class CallVolumePoint(_SeriesRow):
    """Inbound/outbound call counts for one day or one hour."""
    inbound: int = 0
    outbound: int = 0

    @field_validator('inbound', 'outbound', mode='before')
    @classmethod
    def _zero_counts(cls, value: Any) -> Any:
        return _none_to_zero(value)


class SaleCountPoint(_SeriesRow):
    """Sale count for one day or one hour."""
    count: int = 0

    @field_validator('count', mode='before')
    @classmethod
    def _zero_count(cls, value: Any) -> Any:
        return _none_to_zero(value)


# =============================================================================
# Snapshot Inputs (upstream data API)
# =============================================================================


class AgentSalesRow(BaseModel):
    """Sales attributed to one agent."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    agent_id: str = Field(..., alias='agentId')
    sale_count: int = Field(default=0, alias='saleCount')


class AgentCallsRow(BaseModel):
    """Calls handled by one agent and the lead cost behind them (cents)."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    agent_id: str = Field(..., alias='agentId')
    call_count: int = Field(default=0, alias='callCount')
    total_cost: int = Field(default=0, alias='totalCost')


class CarrierSalesRow(BaseModel):
    """Sales written with one carrier."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    carrier: str
    top_contract: Optional[str] = Field(default=None, alias='topContract')
    sale_count: int = Field(default=0, alias='saleCount')


class PolicyStatusCount(BaseModel):
    """Number of policies currently in a given status."""
    model_config = ConfigDict(extra='ignore')

    status: Optional[str] = None
    count: int = 0


# =============================================================================
# Breakdown Report Rows
# =============================================================================


class ReportRow(BaseModel):
    """
    Base for breakdown report rows.

    `is_total` flags the synthetic grand-total row the data API appends. It
    arrives as 0/1 and is exposed as a bool. Null numeric fields become 0 so
    sums and ratios never see None.
    """
    model_config = ConfigDict(extra='ignore')

    is_total: bool = False

    @model_validator(mode='before')
    @classmethod
    def _zero_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for name, field_info in cls.model_fields.items():
            if name not in cleaned or cleaned[name] is not None:
                continue
            if field_info.annotation in (int, float):
                cleaned[name] = 0
            elif field_info.annotation is str:
                cleaned[name] = ''
        return cleaned


class CallPerformanceRow(ReportRow):
    """
    Call funnel metrics shared by the agent and state reports.

    Costs are integer cents. CPA is None when there were no sales. The
    average billable duration is in seconds and may be fractional.
    """
    live_calls: int = 0
    completed_calls: int = 0
    billable_calls: int = 0
    average_billable_duration: float = 0.0
    billable_percentage: float = 0.0
    call_cost: int = 0
    call_sale_count: int = 0
    call_sale_cpa: Optional[float] = None
    call_conversion_rate_percentage: float = 0.0


class AgentReportRow(CallPerformanceRow):
    """One agent/vendor pair from the agent report."""
    agent_full_name: str = ''
    vendor: str = ''


class StateReportRow(CallPerformanceRow):
    """One state from the state report."""
    state_name: str = ''


class VendorReportRow(ReportRow):
    """
    One vendor from the vendor report, split by traffic channel.

    Calls, leads and drops each carry a volume, a cost in cents, a sale count
    and a CPA. `total_sale_count` is the sum across channels.
    """
    friendlyname: str = ''
    vendor: str = ''

    total_calls: int = 0
    billable_calls: int = 0
    call_cost: int = 0
    call_sale_count: int = 0
    call_sale_cpa: Optional[float] = None

    total_leads: int = 0
    lead_cost: int = 0
    lead_sale_count: int = 0
    lead_sale_cpa: Optional[float] = None

    total_drops: int = 0
    drop_cost: int = 0
    drop_sale_count: int = 0
    drop_sale_cpa: Optional[float] = None

    total_sale_count: int = 0


# =============================================================================
# Dashboard Payload
# =============================================================================


class DashboardData(BaseModel):
    """
    Everything the data API returns for one dashboard refresh.

    Field aliases follow the upstream camelCase keys. Any collection may be
    missing or null; it is treated as "no data for this period".
    """
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    calls_by_day: List[CallVolumePoint] = Field(default_factory=list, alias='callsByDay')
    calls_by_hour: List[CallVolumePoint] = Field(default_factory=list, alias='callsByHour')
    core_sales_by_day: List[SaleCountPoint] = Field(default_factory=list, alias='coreSalesByDay')
    core_sales_by_hour: List[SaleCountPoint] = Field(default_factory=list, alias='coreSalesByHour')
    secondary_sales_by_day: List[SaleCountPoint] = Field(
        default_factory=list, alias='secondarySalesByDay'
    )
    secondary_sales_by_hour: List[SaleCountPoint] = Field(
        default_factory=list, alias='secondarySalesByHour'
    )
    secondary_sale_records: List[Dict[str, Any]] = Field(
        default_factory=list, alias='secondarysalerecords'
    )
    sales_by_agent: List[AgentSalesRow] = Field(default_factory=list, alias='salesByAgent')
    calls_by_agent: List[AgentCallsRow] = Field(default_factory=list, alias='callsByAgent')
    sales_by_carrier: List[CarrierSalesRow] = Field(default_factory=list, alias='salesByCarrier')
    policy_info: List[PolicyStatusCount] = Field(default_factory=list, alias='policyInfo')
    vendor_data: List[VendorReportRow] = Field(default_factory=list, alias='vendorData')

    @field_validator('*', mode='before')
    @classmethod
    def _null_collections(cls, value: Any) -> Any:
        return _none_to_empty_list(value)


# =============================================================================
# Derived Output Rows
# =============================================================================


class AggregatedRow(BaseModel):
    """
    One point of the interactive chart.

    `date` holds the group key whatever the granularity (an hour, a date, a
    weekday name, a week-start date or "<Month> <Year>").
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "date": "2025-08-31",
                "inbound": 10,
                "outbound": 2,
                "primary": 3,
                "secondary": 0,
            }
        }
    )

    date: str
    inbound: int = 0
    outbound: int = 0
    primary: int = 0
    secondary: int = 0


class AgentSnapshotRow(BaseModel):
    """Agent row on the dashboard: calls, core sales, lead cost and CPA."""
    agent_name: str
    agent_id: str
    call_count: int = 0
    core_sales: int = 0
    lead_cost: int = 0
    cpa: Optional[float] = None


class CarrierSnapshotRow(BaseModel):
    """Carrier row on the dashboard with its share of all sales."""
    carrier: str
    top_contract: Optional[str] = None
    sale_count: int = 0
    percent_of_total: float = 0.0


class AgentBreakdownEntry(CallPerformanceRow):
    """An agent's totals across vendors, with the per-vendor rows attached."""
    agent_full_name: str = ''
    vendors: List[AgentReportRow] = Field(default_factory=list)


class AgentBreakdown(BaseModel):
    agents: List[AgentBreakdownEntry] = Field(default_factory=list)
    totals_row: Optional[AgentReportRow] = None


class DashboardSummary(BaseModel):
    """Headline counts shown on the dashboard cards."""
    primary_sales: int = 0
    secondary_sales: int = 0
    active_policies: int = 0
    at_risk_policies: int = 0


class DateRange(BaseModel):
    """Inclusive calendar date range."""
    start_date: DateType
    end_date: DateType


class DashboardSnapshots(BaseModel):
    """Agent, carrier and vendor tables; the vendor totals row comes last."""
    agents: List[AgentSnapshotRow] = Field(default_factory=list)
    carriers: List[CarrierSnapshotRow] = Field(default_factory=list)
    vendors: List[VendorReportRow] = Field(default_factory=list)


# =============================================================================
# Request / Response Models
# =============================================================================


class ChartRequest(BaseModel):
    """Aggregate already-fetched dashboard data into chart rows."""
    granularity: Optional[Granularity] = None
    data: DashboardData = Field(default_factory=DashboardData)


class SnapshotRequest(BaseModel):
    """
    Build the agent, carrier and vendor snapshot tables.

    `agent_names` maps agent ids to display names; unknown ids are shown raw.
    The vendor table is sorted and filtered like the vendor report.
    """
    data: DashboardData = Field(default_factory=DashboardData)
    agent_names: Dict[str, str] = Field(default_factory=dict)
    vendor_sort_key: Optional[str] = None
    vendor_direction: SortDirection = SortDirection.ASC
    vendor_filter_text: Optional[str] = None


class DashboardRequest(BaseModel):
    """Fetch and aggregate a dashboard refresh from the data API."""
    preset: Optional[DateRangePreset] = None
    start_date: Optional[DateType] = None
    end_date: Optional[DateType] = None
    line_of_business: LineOfBusiness = LineOfBusiness.ALL
    granularity: Optional[Granularity] = None
    agent_names: Dict[str, str] = Field(default_factory=dict)


class DashboardResponse(BaseModel):
    date_range: DateRange
    granularity: Granularity
    chart: List[AggregatedRow] = Field(default_factory=list)
    summary: DashboardSummary = Field(default_factory=DashboardSummary)
    snapshots: DashboardSnapshots = Field(default_factory=DashboardSnapshots)


class ReportRequest(BaseModel):
    """
    Generate a breakdown report.

    Either a preset or an explicit start/end date is required. `selection`
    narrows the report upstream (e.g. a single agent); "All" means no filter.
    Sorting and filtering are applied locally and never move the totals row.
    `vendor_names` maps vendor ids to display names in the agent CSV.
    """
    preset: Optional[DateRangePreset] = None
    start_date: Optional[DateType] = None
    end_date: Optional[DateType] = None
    selection: str = 'All'
    sort_key: Optional[str] = None
    direction: SortDirection = SortDirection.ASC
    filter_text: Optional[str] = None
    vendor_names: Dict[str, str] = Field(default_factory=dict)


class AgentReportResponse(BaseModel):
    date_range: DateRange
    agents: List[AgentBreakdownEntry] = Field(default_factory=list)
    totals_row: Optional[AgentReportRow] = None


class StateReportResponse(BaseModel):
    date_range: DateRange
    rows: List[StateReportRow] = Field(default_factory=list)


class VendorReportResponse(BaseModel):
    date_range: DateRange
    rows: List[VendorReportRow] = Field(default_factory=list)
