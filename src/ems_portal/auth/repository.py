from __future__ import annotations

from typing import Protocol

from .model import CurrentUser, LoginResult


class AuthRepository(Protocol):
    """Login and "who am I" calls against the backend."""

    def login(self, username: str, password: str) -> LoginResult:
        raise NotImplementedError

    def current_user(self) -> CurrentUser:
        raise NotImplementedError
