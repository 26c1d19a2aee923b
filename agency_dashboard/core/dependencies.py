"""
FastAPI dependency injection module for the Agency Dashboard backend.

This module provides reusable FastAPI dependencies for configuration access,
the upstream data API client, and the caller's bearer credential. Routers
declare these through the type aliases below, and tests replace them with
app.dependency_overrides.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- get_data_client_dependency: Returns the shared DataApiClient
- get_credentials: Builds a credential provider from the Authorization header
- SettingsDep / DataClientDep / CredentialsDep: Annotated aliases

Credential Model:
Identity and session management live in the desktop shell. This service only
forwards the bearer credential it was given. When the data API rejects that
credential, the provider cannot refresh it server-side and raises
AuthenticationError, which surfaces as a 401 so the shell can refresh its
session and retry.

Usage Examples:
    @router.post("/dashboard/data")
    async def dashboard_data(
        request: DashboardRequest,
        client: DataClientDep,
        credentials: CredentialsDep,
    ) -> DashboardResponse:
        payload = await client.execute('/dashboard/data', credentials, {...})
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from agency_dashboard.core.config import Settings, get_settings
from agency_dashboard.core.data_client import CredentialProvider, DataApiClient, get_data_client
from agency_dashboard.core.errors import AuthenticationError


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    This is a thin wrapper around get_settings() so tests can override it:

        app.dependency_overrides[get_settings_dependency] = lambda: mock_settings
    """
    return get_settings()


# =============================================================================
# Data API Dependencies
# =============================================================================

def get_data_client_dependency() -> DataApiClient:
    """Return the shared upstream data API client."""
    return get_data_client()


def bearer_credentials(authorization: str) -> CredentialProvider:
    """
    Credential provider that forwards a fixed bearer credential.

    The first call returns the credential; a refresh request raises
    AuthenticationError because this service holds no refresh token.
    """
    async def provide(refresh: bool = False) -> str:
        if refresh:
            raise AuthenticationError("Bearer credential was rejected by the data API")
        return authorization

    return provide


def get_credentials(
    authorization: Annotated[Optional[str], Header()] = None,
) -> CredentialProvider:
    """
    Build a credential provider from the request's Authorization header.

    Raises:
        HTTPException: 401 when the header is missing or blank.
    """
    if not authorization or not authorization.strip():
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    return bearer_credentials(authorization.strip())


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

DataClientDep = Annotated[DataApiClient, Depends(get_data_client_dependency)]

CredentialsDep = Annotated[CredentialProvider, Depends(get_credentials)]
