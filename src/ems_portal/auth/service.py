from __future__ import annotations

from ..core.exceptions import AuthenticationError, ValidationError
from .model import CurrentUser, LoginResult
from .repository import AuthRepository


class AuthService:
    def __init__(self, auth: AuthRepository):
        self._auth = auth

    def authenticate(self, username: str, password: str) -> LoginResult:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Please enter both username and password")

        result = self._auth.login(username, password)
        if not result.token:
            raise AuthenticationError("Login failed")
        return result

    def current_user(self) -> CurrentUser:
        return self._auth.current_user()
