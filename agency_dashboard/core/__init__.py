"""
Core infrastructure package for the Agency Dashboard backend.

Provides:
- Configuration management via pydantic-settings
- Async client for the upstream data API via httpx
- Exception hierarchy for the I/O edges
- FastAPI dependency injection utilities

This module re-exports key components from submodules so other modules can
write:

    from agency_dashboard.core import get_settings, DataClientDep

instead of importing from each submodule.
"""

# =============================================================================
# Re-exports from agency_dashboard.core.config
# =============================================================================
from agency_dashboard.core.config import Settings, get_settings

# =============================================================================
# Re-exports from agency_dashboard.core.errors
# =============================================================================
from agency_dashboard.core.errors import (
    AuthenticationError,
    DashboardError,
    DataApiError,
    DuplicateRequestError,
    status_code_for,
)

# =============================================================================
# Re-exports from agency_dashboard.core.data_client
# =============================================================================
from agency_dashboard.core.data_client import (
    CredentialProvider,
    DataApiClient,
    close_data_client,
    get_data_client,
    init_data_client,
)

# =============================================================================
# Re-exports from agency_dashboard.core.dependencies
# =============================================================================
from agency_dashboard.core.dependencies import (
    CredentialsDep,
    DataClientDep,
    SettingsDep,
    bearer_credentials,
    get_credentials,
    get_data_client_dependency,
    get_settings_dependency,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Errors (from errors.py)
    'DashboardError',
    'AuthenticationError',
    'DataApiError',
    'DuplicateRequestError',
    'status_code_for',
    # Upstream client lifecycle (from data_client.py)
    'CredentialProvider',
    'DataApiClient',
    'init_data_client',
    'get_data_client',
    'close_data_client',
    # FastAPI dependency injection (from dependencies.py)
    'get_settings_dependency',
    'get_data_client_dependency',
    'get_credentials',
    'bearer_credentials',
    'SettingsDep',
    'DataClientDep',
    'CredentialsDep',
]
