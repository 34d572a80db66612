"""
Exceptions raised by the Passiify API client.
"""
from typing import Any, Optional
import httpx


class PassiifyClientError(Exception):
    """Base class for client-side errors."""


class PayoutValidationError(PassiifyClientError):
    """A payout command failed client-side validation; nothing was sent."""


class ApiError(PassiifyClientError):
    """Non-2xx response from the backend."""

    def __init__(self, status_code: int, message: Optional[str] = None, payload: Any = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(message or f"HTTP {status_code}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build the right error for a failed response, keeping the backend message."""
        try:
            payload = response.json()
        except ValueError:
            payload = None

        message = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("detail")
            if not isinstance(message, str):
                message = None

        error_cls = UnauthorizedError if response.status_code == 401 else cls
        return error_cls(response.status_code, message, payload)


class UnauthorizedError(ApiError):
    """401: the credential attached to the request was missing or rejected."""
