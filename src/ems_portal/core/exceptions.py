from __future__ import annotations

from typing import Any, Optional, Sequence


class DomainError(Exception):
    """Base exception for the portal."""


class ValidationError(DomainError):
    """Raised when form input fails client-side checks."""

    def __init__(self, message: str = "Invalid input", *, field_errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class AuthenticationError(DomainError):
    """Raised when login credentials are rejected or the token is unusable."""


class AuthorizationError(DomainError):
    """Raised when a role is not permitted for an action."""


class PartialUpdateError(DomainError):
    """Raised when a multi-step update failed after earlier steps were applied."""

    def __init__(self, message: str, *, completed_steps: Sequence[str], cause: Optional[Exception] = None):
        super().__init__(message)
        self.completed_steps = list(completed_steps)
        self.cause = cause


class ApiError(DomainError):
    """Non-2xx response (or transport failure) from the REST backend."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ConflictError(ApiError):
    """HTTP 409, e.g. duplicate username or email."""


class SessionExpiredError(ApiError):
    """HTTP 401 from a protected endpoint; the local session has been cleared."""


class ApiUnavailableError(ApiError):
    """Connection error or timeout talking to the backend."""
