"""
Pytest Configuration and Shared Fixtures for Agency Dashboard Tests.

This module provides fixtures and configuration for all backend tests, supporting:
- Async test execution with pytest-asyncio
- A mock upstream data client for router tests without network access
- Sample dashboard payloads in the upstream's camelCase shape
- Sample agent, state and vendor report rows including a totals row
- A settings cache reset so environment overrides do not leak between tests

Dependency References:
- agency_dashboard/core/config.py: get_settings for application configuration
- agency_dashboard/core/data_client.py: DataApiClient for upstream requests
- agency_dashboard/core/dependencies.py: dependency functions overridden in router tests
"""

from typing import Any, Dict, Generator, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from agency_dashboard.core.config import get_settings
from agency_dashboard.core.data_client import DataApiClient
from agency_dashboard.models.schemas import (
    AgentReportRow,
    DashboardData,
    StateReportRow,
    VendorReportRow,
)


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - api: Marks tests that exercise the FastAPI routers through TestClient
    """
    config.addinivalue_line(
        'markers',
        'api: marks tests that call the HTTP API through TestClient'
    )


# ============================================================
# SETTINGS FIXTURES
# ============================================================

@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """
    Reset the cached Settings before and after every test.

    Tests that set environment variables with monkeypatch then see a fresh
    Settings instance, and never leak it into later tests.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================
# DATA CLIENT FIXTURES
# ============================================================

@pytest.fixture
def mock_data_client() -> MagicMock:
    """
    Mock DataApiClient whose execute() is an AsyncMock.

    Tests set `mock_data_client.execute.return_value` (or `side_effect`) to
    the upstream response they need.
    """
    client = MagicMock(spec=DataApiClient)
    client.execute = AsyncMock(return_value={})
    return client


# ============================================================
# DASHBOARD PAYLOAD FIXTURES
# ============================================================

@pytest.fixture
def sample_dashboard_payload() -> Dict[str, Any]:
    """
    Dashboard payload as the upstream data API returns it.

    Two days in the week starting Sunday 2025-08-31 and one day in the next
    week, with hourly arrays for the first day.
    """
    return {
        'callsByDay': [
            {'date': '2025-09-01', 'inbound': 10, 'outbound': 4},
            {'date': '2025-09-02', 'inbound': 6, 'outbound': None},
            {'date': '2025-09-08', 'inbound': 3, 'outbound': 1},
        ],
        'callsByHour': [
            {'hour': 9, 'inbound': 4, 'outbound': 1},
            {'hour': 14, 'inbound': 6, 'outbound': 3},
        ],
        'coreSalesByDay': [
            {'date': '2025-09-01', 'count': 2},
            {'date': '2025-09-08', 'count': 1},
        ],
        'coreSalesByHour': [
            {'hour': '14', 'count': 2},
        ],
        'secondarySalesByDay': [
            {'date': '2025-09-02', 'count': 1},
        ],
        'secondarySalesByHour': [],
        'secondarysalerecords': [
            {'id': 'sec-1', 'date': '2025-09-02'},
        ],
        'salesByAgent': [
            {'agentId': 'a-2', 'saleCount': 2},
            {'agentId': 'a-1', 'saleCount': 2},
        ],
        'callsByAgent': [
            {'agentId': 'a-1', 'callCount': 12, 'totalCost': 4000},
            {'agentId': 'a-2', 'callCount': 8, 'totalCost': 0},
            {'agentId': 'a-3', 'callCount': 5, 'totalCost': 1500},
        ],
        'salesByCarrier': [
            {'carrier': 'Humana', 'topContract': 'H1036', 'saleCount': 1},
            {'carrier': 'Aetna', 'topContract': None, 'saleCount': 3},
        ],
        'policyInfo': [
            {'status': 'active', 'count': 40},
            {'status': 'pendingcancellation', 'count': 3},
        ],
        'vendorData': None,
    }


@pytest.fixture
def dashboard_data(sample_dashboard_payload: Dict[str, Any]) -> DashboardData:
    """Validated DashboardData built from sample_dashboard_payload."""
    return DashboardData.model_validate(sample_dashboard_payload)


# ============================================================
# REPORT ROW FIXTURES
# ============================================================

@pytest.fixture
def agent_report_payload() -> List[Dict[str, Any]]:
    """
    Agent report rows as returned by /report/generate/agent.

    Alice sold through two vendors, Bob through one; the final row is the
    grand total (is_total=1).
    """
    return [
        {
            'is_total': 0, 'agent_full_name': 'Alice Smith', 'vendor': 'v-1',
            'live_calls': 20, 'completed_calls': 18, 'billable_calls': 10,
            'average_billable_duration': 300, 'call_cost': 5000, 'call_sale_count': 2,
        },
        {
            'is_total': 0, 'agent_full_name': 'Bob Jones', 'vendor': 'v-1',
            'live_calls': 5, 'completed_calls': 5, 'billable_calls': 0,
            'average_billable_duration': 0, 'call_cost': 1200, 'call_sale_count': 0,
        },
        {
            'is_total': 0, 'agent_full_name': 'Alice Smith', 'vendor': 'v-2',
            'live_calls': 10, 'completed_calls': 10, 'billable_calls': 5,
            'average_billable_duration': 120, 'call_cost': 0, 'call_sale_count': 1,
        },
        {
            'is_total': 1, 'agent_full_name': 'Total', 'vendor': None,
            'live_calls': 35, 'completed_calls': 33, 'billable_calls': 15,
            'average_billable_duration': 240, 'call_cost': 6200, 'call_sale_count': 3,
        },
    ]


@pytest.fixture
def agent_report_rows(agent_report_payload: List[Dict[str, Any]]) -> List[AgentReportRow]:
    return [AgentReportRow.model_validate(row) for row in agent_report_payload]


@pytest.fixture
def state_report_payload() -> List[Dict[str, Any]]:
    """State report rows with the totals row first, as some payloads send it."""
    return [
        {
            'is_total': 1, 'state_name': 'Total',
            'live_calls': 30, 'completed_calls': 25, 'billable_calls': 20,
            'average_billable_duration': 200, 'call_cost': 9000, 'call_sale_count': 4,
        },
        {
            'is_total': 0, 'state_name': 'Texas',
            'live_calls': 10, 'completed_calls': 10, 'billable_calls': 8,
            'average_billable_duration': 180, 'call_cost': 3000, 'call_sale_count': 3,
        },
        {
            'is_total': 0, 'state_name': 'Florida',
            'live_calls': 15, 'completed_calls': 10, 'billable_calls': 10,
            'average_billable_duration': 240, 'call_cost': 6000, 'call_sale_count': 1,
        },
        {
            'is_total': 0, 'state_name': 'Ohio',
            'live_calls': 5, 'completed_calls': 5, 'billable_calls': 2,
            'average_billable_duration': None, 'call_cost': 0, 'call_sale_count': 0,
        },
    ]


@pytest.fixture
def state_report_rows(state_report_payload: List[Dict[str, Any]]) -> List[StateReportRow]:
    return [StateReportRow.model_validate(row) for row in state_report_payload]


@pytest.fixture
def vendor_report_payload() -> List[Dict[str, Any]]:
    return [
        {
            'is_total': 0, 'friendlyname': 'Acme Leads', 'vendor': 'v-1',
            'total_calls': 40, 'billable_calls': 30, 'call_cost': 12000, 'call_sale_count': 4,
            'total_leads': 100, 'lead_cost': 5000, 'lead_sale_count': 0,
            'total_drops': 10, 'drop_cost': 0, 'drop_sale_count': 1,
            'total_sale_count': 0,
        },
        {
            'is_total': 0, 'friendlyname': 'Beacon Media', 'vendor': 'v-2',
            'total_calls': 10, 'billable_calls': 5, 'call_cost': 2000, 'call_sale_count': 1,
            'total_leads': 0, 'lead_cost': 0, 'lead_sale_count': 0,
            'total_drops': 0, 'drop_cost': 0, 'drop_sale_count': 0,
            'total_sale_count': 1,
        },
        {
            'is_total': 1, 'friendlyname': 'Total', 'vendor': '',
            'total_calls': 50, 'billable_calls': 35, 'call_cost': 14000, 'call_sale_count': 5,
            'total_leads': 100, 'lead_cost': 5000, 'lead_sale_count': 0,
            'total_drops': 10, 'drop_cost': 0, 'drop_sale_count': 1,
            'total_sale_count': 6,
        },
    ]


@pytest.fixture
def vendor_report_rows(vendor_report_payload: List[Dict[str, Any]]) -> List[VendorReportRow]:
    return [VendorReportRow.model_validate(row) for row in vendor_report_payload]
