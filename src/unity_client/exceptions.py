"""Custom exception hierarchy for the Unity client."""
from __future__ import annotations

from typing import Any


class UnityError(RuntimeError):
    """Base error for Unity failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AuthenticationError(UnityError):
    """Raised when credentials are rejected by the array."""


class TransportError(UnityError):
    """Raised when an HTTP request cannot reach the array."""


class APIError(UnityError):
    """Raised when the array answers with a non-success status code."""


class UnexpectedResponseError(UnityError):
    """Raised when the API returns an unexpected payload structure."""


class CapabilityProbeError(UnityError):
    """Raised when a system-dependent default cannot be resolved."""


class NotConnectedError(UnityError):
    """Raised when a request is attempted on a session that is not connected."""


class ValidationError(UnityError, ValueError):
    """Raised when user-supplied parameters are missing or malformed."""
