from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, Optional

from flask import flash, g, redirect, url_for

from ..core.constants import LANDING_ROUTES, LOGIN_ROUTE
from ..core.enums import AuthState, Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .claims import get_role_from_token, is_token_expired
from .session_store import SessionStore, flask_session_store

logger = logging.getLogger(__name__)


class AuthGate:
    """Decides, once per request, whether the stored session is usable.

    Starts in ``LOADING``; ``resolve`` moves it to ``AUTHENTICATED`` or
    ``UNAUTHENTICATED``. Views never see the ``LOADING`` state.
    """

    def __init__(self, store: SessionStore, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock
        self.state = AuthState.LOADING
        self.role: Optional[Role] = None
        self.name = ""

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    @property
    def landing_route(self) -> str:
        if self.is_authenticated and self.role:
            return LANDING_ROUTES[self.role]
        return LOGIN_ROUTE

    def resolve(self) -> AuthState:
        token = self._store.token
        role = Role.parse(get_role_from_token(token)) if token else None

        if token and role and not is_token_expired(token, now=self._clock()):
            self.state = AuthState.AUTHENTICATED
            self.role = role
            self.name = self._store.name
        else:
            if token:
                logger.info("Stored token expired or unreadable; clearing session")
            self._store.clear()
            self.state = AuthState.UNAUTHENTICATED
            self.role = None
            self.name = ""
        return self.state

    def login(self, token: str, name: str, role: Optional[str] = None) -> str:
        """Store a fresh session and return the landing route for its role.

        The role claim inside the token wins; ``role`` from the login
        response is used only when the token carries none.
        """
        resolved = Role.parse(get_role_from_token(token)) or Role.parse(role)
        if not resolved:
            raise AuthenticationError("Your account role is not supported")
        if is_token_expired(token, now=self._clock()):
            raise AuthenticationError("The server issued an expired session")

        self._store.save(token, resolved, name)
        self.state = AuthState.AUTHENTICATED
        self.role = resolved
        self.name = name
        return LANDING_ROUTES[resolved]

    def logout(self) -> None:
        self._store.clear()
        self.state = AuthState.UNAUTHENTICATED
        self.role = None
        self.name = ""

    def allows(self, *roles: Role) -> bool:
        return self.is_authenticated and self.role in roles


def current_gate() -> AuthGate:
    gate = g.get("auth_gate")
    if gate is None:
        gate = AuthGate(flask_session_store())
        gate.resolve()
        g.auth_gate = gate
    return gate


def roles_required(*roles: Role):
    """Route guard: only the listed roles may open the view, everyone else goes to /login."""
    allowed = tuple(Role(r) for r in roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            gate = current_gate()
            if not gate.is_authenticated:
                flash("Please log in to continue.", "warning")
                return redirect(url_for("login"))
            if not gate.allows(*allowed):
                raise AuthorizationError(f"Role {gate.role.value} may not open {view.__name__}")
            return view(*args, **kwargs)

        return wrapper

    return decorator
