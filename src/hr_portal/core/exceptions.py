from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence


class PortalError(Exception):
    """Base exception for everything the portal reports to the user."""

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class ValidationError(PortalError):
    """Raised when a client-side precondition fails; no request is sent."""


class AuthenticationError(PortalError):
    """Raised when no token is available or the login is refused."""


class AuthorizationError(PortalError):
    """Raised when a user opens a screen reserved to another role."""


class ApiError(PortalError):
    """Raised when the remote API answers with an error or cannot be reached.

    `status` is 0 for network failures (no HTTP response at all).
    """

    def __init__(
        self,
        message: str,
        *,
        status: int = 0,
        errors: Optional[Mapping[str, Sequence[str]]] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.status = int(status)
        self.errors = dict(errors or {})
        self.payload = payload


class RequestTimeout(ApiError):
    """Raised when a request exceeds its time budget."""
