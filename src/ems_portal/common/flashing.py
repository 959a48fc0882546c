from __future__ import annotations

from flask import flash

from ..core.exceptions import (
    ApiError,
    ApiUnavailableError,
    DomainError,
    PartialUpdateError,
    SessionExpiredError,
)


def flash_failure(e: DomainError) -> None:
    """Flash why an action failed.

    Session expiry is re-raised so the app-level handler can send the user to /login.
    """
    if isinstance(e, SessionExpiredError):
        raise e
    if isinstance(e, ApiUnavailableError):
        flash("Network or server error", "danger")
    elif isinstance(e, PartialUpdateError):
        flash(str(e), "warning")
    elif isinstance(e, ApiError):
        flash(e.message or "Request failed", "danger")
    else:
        flash(str(e), "danger")
