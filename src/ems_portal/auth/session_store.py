from __future__ import annotations

from typing import MutableMapping, Optional

from flask import has_request_context, session

from ..core.constants import SESSION_NAME_KEY, SESSION_ROLE_KEY, SESSION_TOKEN_KEY
from ..core.enums import Role
from .model import SessionContext

_KEYS = (SESSION_TOKEN_KEY, SESSION_ROLE_KEY, SESSION_NAME_KEY)


class SessionStore:
    """Owns the ``token`` / ``role`` / ``name`` entries of the cookie session.

    Other session entries (flashed messages) are left alone.
    """

    def __init__(self, mapping: MutableMapping):
        self._data = mapping

    @property
    def token(self) -> Optional[str]:
        return self._data.get(SESSION_TOKEN_KEY) or None

    @property
    def role(self) -> Optional[Role]:
        return Role.parse(self._data.get(SESSION_ROLE_KEY))

    @property
    def name(self) -> str:
        return self._data.get(SESSION_NAME_KEY) or ""

    def save(self, token: str, role: Role, name: str) -> None:
        self._data[SESSION_TOKEN_KEY] = token
        self._data[SESSION_ROLE_KEY] = role.value
        self._data[SESSION_NAME_KEY] = name

    def context(self) -> Optional[SessionContext]:
        if not self.token or not self.role:
            return None
        return SessionContext(token=self.token, role=self.role, display_name=self.name)

    def clear(self) -> None:
        for key in _KEYS:
            if key in self._data:
                self._data.pop(key)


def flask_session_store() -> SessionStore:
    return SessionStore(session)


def current_token() -> Optional[str]:
    """Token of the active request, or None outside a request."""
    if not has_request_context():
        return None
    return flask_session_store().token


def clear_current_session() -> None:
    if has_request_context():
        flask_session_store().clear()
