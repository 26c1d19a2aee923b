"""
API package initialization.

This package contains the FastAPI router modules for the Agency Dashboard:
- dashboard: Chart aggregation, summary cards, snapshots and upstream refresh
- reports: Agent, state and vendor breakdown reports with CSV export
"""

from fastapi import APIRouter

# Import router modules
from agency_dashboard.api.dashboard import router as dashboard_router
from agency_dashboard.api.reports import router as reports_router

# Create main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])

# Export all routers for selective imports
__all__ = [
    "api_router",
    "dashboard_router",
    "reports_router",
]
