"""
Async HTTP client for the upstream data API.

The data API serves pre-aggregated dashboard data and breakdown reports. This
module wraps an httpx.AsyncClient with the behavior the dashboard expects:

- Every request carries the caller's bearer credential in `Authorization`
- Request bodies are JSON of the form {"data": <payload>} ({} without payload)
- A 401 asks the credential provider for a refreshed token and retries
- Transport failures are retried up to the same budget
- Error responses and {"success": false} bodies raise DataApiError
- An optional dedupe key rejects a second identical request while the first
  is still in flight

Key Components:
- Global client singleton (_client)
- init_data_client(): Create the client at application startup
- get_data_client(): Get the client instance (creates it if needed)
- close_data_client(): Close the underlying connection pool at shutdown

Usage:
    client = get_data_client()
    payload = await client.execute('/dashboard/data', credentials, {'lineOfBusiness': 'All'})
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Set, Tuple

import httpx

from agency_dashboard.core.config import get_settings
from agency_dashboard.core.errors import DataApiError, DuplicateRequestError


logger = logging.getLogger(__name__)

# Called with refresh=True after the API rejected the previous credential.
CredentialProvider = Callable[[bool], Awaitable[str]]


class DataApiClient:
    """
    Thin retrying wrapper around httpx.AsyncClient.

    Args:
        base_url: Root URL of the data API; request paths are appended to it.
        timeout: Per-request timeout in seconds.
        max_retries: Extra attempts after a 401 or a transport error.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.max_retries = max(0, max_retries)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )
        self._in_flight: Set[Tuple[str, str, str]] = set()

    async def execute(
        self,
        path: str,
        credentials: CredentialProvider,
        payload: Any = None,
        method: str = 'POST',
        dedupe_key: Optional[str] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Args:
            path: Endpoint path, e.g. '/report/generate/agent'.
            credentials: Async callable producing the bearer credential.
            payload: Body sent under the "data" key; omitted when None.
            method: HTTP method.
            dedupe_key: When set, a second request with the same key, method
                and path is rejected while the first is running.

        Raises:
            DuplicateRequestError: An identical request is already in flight.
            AuthenticationError: The credential provider could not supply a token.
            DataApiError: The API failed, was unreachable or reported failure.
        """
        method = method.upper()
        request_key = (dedupe_key or '', method, path)
        if dedupe_key is not None:
            if request_key in self._in_flight:
                logger.warning(f"Request already in progress, rejecting duplicate {method} {path}")
                raise DuplicateRequestError(method, path)
            self._in_flight.add(request_key)

        try:
            return await self._send(path, credentials, payload, method)
        finally:
            if dedupe_key is not None:
                self._in_flight.discard(request_key)

    async def _send(
        self,
        path: str,
        credentials: CredentialProvider,
        payload: Any,
        method: str,
    ) -> Any:
        body = {'data': payload} if payload is not None else {}
        refresh = False
        attempt = 0

        while True:
            token = await credentials(refresh)
            try:
                response = await self._client.request(
                    method,
                    path,
                    json=body,
                    headers={'Content-Type': 'application/json', 'Authorization': token},
                )
            except httpx.TransportError as e:
                if attempt < self.max_retries:
                    attempt += 1
                    logger.warning(f"Data API transport error on {method} {path}, retrying: {e}")
                    continue
                logger.error(f"Data API unreachable for {method} {path}: {e}")
                raise DataApiError(f"Data API unreachable: {e}") from e

            if response.status_code == 401 and attempt < self.max_retries:
                attempt += 1
                refresh = True
                logger.info(f"Data API rejected credential for {path}; refreshing and retrying")
                continue

            if response.is_error:
                logger.error(f"Data API error on {method} {path}: {response.status_code}")
                raise DataApiError(response.reason_phrase or 'Request failed', response.status_code)

            try:
                result = response.json()
            except ValueError as e:
                raise DataApiError('Data API returned invalid JSON', response.status_code) from e

            if isinstance(result, dict) and result.get('success') is False:
                raise DataApiError(str(result.get('error') or 'An error occurred'))
            return result

    async def aclose(self) -> None:
        await self._client.aclose()


# =============================================================================
# Global Client Singleton
# =============================================================================

_client: Optional[DataApiClient] = None


async def init_data_client() -> DataApiClient:
    """Create the shared client from settings at startup; idempotent."""
    client = get_data_client()
    logger.info(f"Data API client ready for {client.base_url}")
    return client


def get_data_client() -> DataApiClient:
    """Return the shared client, creating it on first use."""
    global _client

    if _client is None:
        settings = get_settings()
        _client = DataApiClient(
            base_url=settings.data_api_url,
            timeout=settings.data_api_timeout_seconds,
            max_retries=settings.data_api_max_retries,
        )
    return _client


async def close_data_client() -> None:
    """Close the shared client; safe to call when it was never created."""
    global _client

    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Data API client closed")
