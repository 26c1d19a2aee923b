"""
Package initialization file for the dashboard models.

This module exports the Pydantic schemas and enumerations from schemas.py and
enums.py, so other modules can import data models without knowing the
internal module structure.

Usage:
    from agency_dashboard.models import (
        Granularity,
        DashboardData,
        AggregatedRow,
        # ... etc
    )
"""

# =============================================================================
# Enums - Import and re-export all enumerations from enums.py
# =============================================================================

from agency_dashboard.models.enums import (
    Granularity,
    MetricKind,
    SortDirection,
    DateRangePreset,
    LineOfBusiness,
    PolicyStatus,
    ReportKind,
)


# =============================================================================
# Schemas - Import and re-export all Pydantic models from schemas.py
# =============================================================================

from agency_dashboard.models.schemas import (
    # -------------------------------------------------------------------------
    # Upstream Dashboard Payload
    # -------------------------------------------------------------------------
    CallVolumePoint,
    SaleCountPoint,
    AgentSalesRow,
    AgentCallsRow,
    CarrierSalesRow,
    PolicyStatusCount,
    DashboardData,

    # -------------------------------------------------------------------------
    # Upstream Report Rows
    # -------------------------------------------------------------------------
    ReportRow,
    CallPerformanceRow,
    AgentReportRow,
    StateReportRow,
    VendorReportRow,

    # -------------------------------------------------------------------------
    # Derived Output Models
    # -------------------------------------------------------------------------
    AggregatedRow,
    AgentSnapshotRow,
    CarrierSnapshotRow,
    AgentBreakdownEntry,
    AgentBreakdown,
    DashboardSummary,
    DashboardSnapshots,
    DateRange,

    # -------------------------------------------------------------------------
    # API Request / Response Models
    # -------------------------------------------------------------------------
    ChartRequest,
    SnapshotRequest,
    DashboardRequest,
    DashboardResponse,
    ReportRequest,
    AgentReportResponse,
    StateReportResponse,
    VendorReportResponse,
)


# =============================================================================
# Public API - Define __all__ for explicit exports
# =============================================================================

__all__ = [
    # Enums
    "Granularity",
    "MetricKind",
    "SortDirection",
    "DateRangePreset",
    "LineOfBusiness",
    "PolicyStatus",
    "ReportKind",
    # Upstream dashboard payload
    "CallVolumePoint",
    "SaleCountPoint",
    "AgentSalesRow",
    "AgentCallsRow",
    "CarrierSalesRow",
    "PolicyStatusCount",
    "DashboardData",
    # Upstream report rows
    "ReportRow",
    "CallPerformanceRow",
    "AgentReportRow",
    "StateReportRow",
    "VendorReportRow",
    # Derived output models
    "AggregatedRow",
    "AgentSnapshotRow",
    "CarrierSnapshotRow",
    "AgentBreakdownEntry",
    "AgentBreakdown",
    "DashboardSummary",
    "DashboardSnapshots",
    "DateRange",
    # API request / response models
    "ChartRequest",
    "SnapshotRequest",
    "DashboardRequest",
    "DashboardResponse",
    "ReportRequest",
    "AgentReportResponse",
    "StateReportResponse",
    "VendorReportResponse",
]
