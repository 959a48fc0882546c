from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from ..core.exceptions import (
    ApiError,
    ApiUnavailableError,
    AuthenticationError,
    ConflictError,
    SessionExpiredError,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"


@dataclass
class ApiConfig:
    base_url: str
    timeout_seconds: float = 15.0


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, str) and body:
        return body
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    text = (resp.text or "").strip()
    return text or resp.reason or f"HTTP {resp.status_code}"


class ApiClient:
    """Shared client for the EMS REST backend.

    Attaches the bearer token from the session to every request. A 401 from
    any endpoint other than login clears the local session through
    ``on_unauthorized`` and raises ``SessionExpiredError``; every other error
    status is handed to the caller as an ``ApiError``.
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
    ):
        self._config = config
        self._token_provider = token_provider
        self._on_unauthorized = on_unauthorized
        self._session = session or requests.Session()
        self._session.headers["Accept"] = "application/json"

    @property
    def session(self) -> requests.Session:
        return self._session

    def url_for(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: Any = None,
        files: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        headers = {}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = self._session.request(
                method,
                self.url_for(path),
                json=json,
                data=data,
                files=files,
                params=params,
                headers=headers,
                timeout=self._config.timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("API %s %s failed: %s", method, path, e)
            raise ApiUnavailableError("Network or server error") from e

        if resp.status_code == 401:
            message = _error_message(resp)
            if LOGIN_PATH in path:
                raise AuthenticationError(message)
            logger.info("API %s %s returned 401, clearing local session", method, path)
            if self._on_unauthorized:
                self._on_unauthorized()
            raise SessionExpiredError("Your session has expired. Please log in again.", status_code=401)

        if resp.status_code == 409:
            raise ConflictError(_error_message(resp), status_code=409, payload=resp.text)

        if not resp.ok:
            message = _error_message(resp)
            logger.warning("API %s %s returned %s: %s", method, path, resp.status_code, message)
            raise ApiError(message, status_code=resp.status_code, payload=resp.text)

        return self._decode(resp)

    @staticmethod
    def _decode(resp: requests.Response) -> Any:
        if not resp.content:
            return None
        if "json" in resp.headers.get("Content-Type", ""):
            return resp.json()
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)


def as_list(value: Any) -> list:
    """Backend list endpoints sometimes answer with null or a bare object."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and isinstance(value.get("content"), list):
        return value["content"]
    return [value]
