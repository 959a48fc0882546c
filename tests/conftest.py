from __future__ import annotations

import json
import os
import time
from datetime import datetime, timezone
from urllib.parse import urlparse

import jwt
import pytest
import requests
from requests.adapters import BaseAdapter

os.environ.setdefault("APP_ENV", "testing")

from ems_portal import create_app
from ems_portal.container import build_container

API_BASE = "http://api.test"


def make_token(role="EMPLOYEE", *, exp_in: float = 3600, **claims) -> str:
    payload = {"sub": "user", "exp": int(time.time() + exp_in), **claims}
    if role is not None:
        payload["role"] = role
    return jwt.encode(payload, "secret", algorithm="HS256")


class StubAdapter(BaseAdapter):
    """Answers requests from a (method, path) table; unknown routes get 404."""

    def __init__(self):
        super().__init__()
        self.routes: dict[tuple[str, str], tuple[int, object]] = {}
        self.calls: list[tuple[str, str, requests.PreparedRequest]] = []

    def add(self, method: str, path: str, status: int = 200, body=None) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def paths(self, method: str) -> list[str]:
        return [p for m, p, _ in self.calls if m == method.upper()]

    def send(self, request, **kwargs):
        path = urlparse(request.url).path
        self.calls.append((request.method, path, request))
        status, body = self.routes.get((request.method, path), (404, {"message": "Not found"}))
        if isinstance(body, Exception):
            raise body

        resp = requests.Response()
        resp.status_code = status
        resp.url = request.url
        resp.request = request
        resp.reason = "OK" if status < 400 else "Error"
        resp.encoding = "utf-8"
        if body is None:
            resp._content = b""
        elif isinstance(body, (dict, list)):
            resp._content = json.dumps(body).encode("utf-8")
            resp.headers["Content-Type"] = "application/json"
        else:
            resp._content = str(body).encode("utf-8")
            resp.headers["Content-Type"] = "text/plain"
        return resp

    def close(self):
        pass


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 12, 8, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def api_stub() -> StubAdapter:
    return StubAdapter()


@pytest.fixture
def http_session(api_stub) -> requests.Session:
    s = requests.Session()
    s.mount("http://", api_stub)
    return s


@pytest.fixture
def app(http_session):
    container = build_container(
        api_config={"base_url": API_BASE, "timeout_seconds": 5},
        display_timezone="Asia/Karachi",
        session=http_session,
    )
    app = create_app(container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    def _login(role: str, name: str = "Test User", **token_kwargs) -> str:
        token = make_token(role, **token_kwargs)
        with client.session_transaction() as s:
            s["token"] = token
            s["role"] = role
            s["name"] = name
        return token

    return _login


@pytest.fixture
def token_factory():
    return make_token
