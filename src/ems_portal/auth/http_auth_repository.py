from __future__ import annotations

from ..api.client import ApiClient
from .model import CurrentUser, LoginResult


class HttpAuthRepository:
    def __init__(self, api: ApiClient):
        self._api = api

    def login(self, username: str, password: str) -> LoginResult:
        data = self._api.post("/api/v1/auth/login", json={"username": username, "password": password})
        return LoginResult.from_api(data)

    def current_user(self) -> CurrentUser:
        return CurrentUser.from_api(self._api.get("/api/v1/users/me"))
