from __future__ import annotations

import pytest
import requests

from ems_portal.api.client import ApiClient, ApiConfig, as_list
from ems_portal.core.exceptions import (
    ApiError,
    ApiUnavailableError,
    AuthenticationError,
    ConflictError,
    SessionExpiredError,
)

BASE = "http://api.test"


@pytest.fixture
def make_client(http_session):
    def _make(token=None, on_unauthorized=None):
        return ApiClient(
            ApiConfig(base_url=BASE + "/"),
            token_provider=lambda: token,
            on_unauthorized=on_unauthorized,
            session=http_session,
        )

    return _make


def test_bearer_header_attached_when_token_present(api_stub, make_client):
    api_stub.add("GET", "/api/v1/users/me", body={"fullName": "Ali"})

    data = make_client(token="abc").get("/api/v1/users/me")

    assert data == {"fullName": "Ali"}
    request = api_stub.calls[-1][2]
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.headers["Accept"] == "application/json"


def test_no_authorization_header_without_token(api_stub, make_client):
    api_stub.add("GET", "/v1/shifts", body=[])
    make_client().get("/v1/shifts")
    assert "Authorization" not in api_stub.calls[-1][2].headers


def test_401_outside_login_clears_session_and_raises(api_stub, make_client):
    cleared = []
    api_stub.add("GET", "/api/v1/employees", status=401, body={"message": "Unauthorized"})

    with pytest.raises(SessionExpiredError) as exc:
        make_client(token="abc", on_unauthorized=lambda: cleared.append(True)).get("/api/v1/employees")

    assert cleared == [True]
    assert exc.value.status_code == 401


def test_401_from_login_is_bad_credentials(api_stub, make_client):
    cleared = []
    api_stub.add("POST", "/api/v1/auth/login", status=401, body="Invalid username or password")

    with pytest.raises(AuthenticationError, match="Invalid username or password"):
        make_client(on_unauthorized=lambda: cleared.append(True)).post(
            "/api/v1/auth/login", json={"username": "a", "password": "b"}
        )
    assert cleared == []


def test_409_is_conflict(api_stub, make_client):
    api_stub.add("POST", "/api/v1/employees", status=409, body={"message": "Username already exists"})

    with pytest.raises(ConflictError) as exc:
        make_client(token="t").post("/api/v1/employees", json={})

    assert exc.value.message == "Username already exists"


def test_other_errors_carry_server_message(api_stub, make_client):
    api_stub.add("DELETE", "/v1/shifts/3", status=500, body={"error": "Shift in use"})

    with pytest.raises(ApiError) as exc:
        make_client(token="t").delete("/v1/shifts/3")

    assert exc.value.status_code == 500
    assert exc.value.message == "Shift in use"
    assert not isinstance(exc.value, SessionExpiredError)


def test_connection_error_is_unavailable(api_stub, make_client):
    api_stub.add("GET", "/api/v1/attendance/my", body=requests.exceptions.ConnectionError("refused"))

    with pytest.raises(ApiUnavailableError, match="Network or server error"):
        make_client(token="t").get("/api/v1/attendance/my")


def test_empty_and_text_bodies(api_stub, make_client):
    api_stub.add("PUT", "/api/leaves/1/approve", body=None)
    api_stub.add("GET", "/v1/employee-shifts/manager/count", body="4")
    client = make_client(token="t")

    assert client.put("/api/leaves/1/approve") is None
    assert client.get("/v1/employee-shifts/manager/count") == 4


def test_as_list_normalises_bodies():
    assert as_list(None) == []
    assert as_list([1, 2]) == [1, 2]
    assert as_list({"content": [{"id": 1}]}) == [{"id": 1}]
    assert as_list({"id": 1}) == [{"id": 1}]
