"""Domain exceptions mapped to HTTP error envelopes in ``app.main``."""
from typing import List, Optional


class OccupancyAPIError(Exception):
    """Base class for errors that surface to API callers."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(OccupancyAPIError):
    """Missing, malformed or expired credential."""

    status_code = 401


class TenantAccessError(OccupancyAPIError):
    """The credential does not grant access to the requested tenant."""

    status_code = 403


class NotFoundError(OccupancyAPIError):
    """A room, office or tenant is absent or inactive."""

    status_code = 404


class RequestValidationFailed(OccupancyAPIError):
    """Malformed payload or query, with per-field details."""

    status_code = 400

    def __init__(self, message: str, details: Optional[List[dict]] = None):
        super().__init__(message)
        self.details = details or []


class ConfigurationError(OccupancyAPIError):
    """The server is missing configuration needed to serve the request."""

    status_code = 500
