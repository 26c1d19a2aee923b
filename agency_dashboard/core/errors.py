"""
Exception hierarchy for the Agency Dashboard backend.

Only the I/O edges raise these: the upstream data client and the credential
provider it calls. The aggregation and reporting services never raise for bad
data; they fall back to zeros or raw keys instead.

Routers translate these into HTTP responses:
- AuthenticationError -> 401
- DuplicateRequestError -> 409
- DataApiError -> 502, or 401 when the upstream still refused the credential
"""

from typing import Optional


class DashboardError(Exception):
    """Base class for all errors raised by this package."""


class AuthenticationError(DashboardError):
    """The identity provider could not produce a bearer credential."""


class DuplicateRequestError(DashboardError):
    """
    A request for the same upstream endpoint is already in flight.

    The dashboard rejects the duplicate instead of queueing it, so rapid
    repeated clicks do not fan out into several identical upstream calls.
    """

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f"Request already in progress: {method} {path}")


class DataApiError(DashboardError):
    """
    The upstream data API answered with an error or could not be reached.

    Attributes:
        status_code: HTTP status returned upstream, or None for transport failures.
        message: Human-readable description suitable for a toast.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        self.message = message
        if status_code is not None:
            super().__init__(f"API Error: {status_code} {message}")
        else:
            super().__init__(message)


def status_code_for(error: DashboardError) -> int:
    """HTTP status a router should answer with for a domain error."""
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, DataApiError) and error.status_code == 401:
        return 401
    if isinstance(error, DuplicateRequestError):
        return 409
    return 502
