from __future__ import annotations

from datetime import datetime, timedelta, timezone

import requests

EMPLOYEES = [
    {"id": 1, "fullName": "Ali Khan", "email": "ali@example.com", "department": "IT", "role": "EMPLOYEE", "active": True},
    {"id": 2, "fullName": "Sara Ahmed", "email": "sara@example.com", "department": "HR", "role": "HR", "active": False},
]


def _location(resp) -> str:
    return resp.headers["Location"]


def test_anonymous_user_is_sent_to_login(client):
    resp = client.get("/admin")
    assert resp.status_code == 302
    assert _location(resp).endswith("/login")


def test_employee_cannot_open_admin_route(client, login_as, api_stub):
    login_as("EMPLOYEE")
    resp = client.get("/admin/employees")
    assert resp.status_code == 302
    assert _location(resp).endswith("/login")
    assert api_stub.calls == []


def test_wrong_role_keeps_session_and_json_callers_get_403(client, login_as, api_stub):
    login_as("ADMIN")
    resp = client.get("/me/session/live", headers={"Accept": "application/json"})
    assert resp.status_code == 403
    assert resp.get_json()["redirect"].endswith("/login")
    assert api_stub.calls == []
    with client.session_transaction() as s:
        assert s["role"] == "ADMIN"


def test_expired_token_clears_session(client, login_as):
    login_as("ADMIN", exp_in=-30)
    resp = client.get("/admin")
    assert _location(resp).endswith("/login")
    with client.session_transaction() as s:
        assert "token" not in s


def test_root_and_unknown_paths_go_to_landing(client, login_as):
    login_as("MANAGER")
    assert _location(client.get("/")).endswith("/manager")
    assert _location(client.get("/no/such/page")).endswith("/manager")


def test_login_while_authenticated_redirects(client, login_as):
    login_as("HR")
    assert _location(client.get("/login")).endswith("/hr")


def test_login_success_stores_session(client, api_stub, token_factory):
    api_stub.add("POST", "/api/v1/auth/login", body={"token": token_factory("MANAGER"), "role": "MANAGER", "name": "Sara"})

    resp = client.post("/login", data={"username": "sara", "password": "secret1"})

    assert resp.status_code == 302
    assert _location(resp).endswith("/manager")
    with client.session_transaction() as s:
        assert s["role"] == "MANAGER"
        assert s["name"] == "Sara"


def test_login_shows_server_message(client, api_stub):
    api_stub.add("POST", "/api/v1/auth/login", status=401, body={"message": "Invalid username or password"})
    resp = client.post("/login", data={"username": "sara", "password": "nope"})
    assert resp.status_code == 200
    assert b"Invalid username or password" in resp.data


def test_login_when_backend_down(client, api_stub):
    api_stub.add("POST", "/api/v1/auth/login", body=requests.exceptions.ConnectTimeout("timeout"))
    resp = client.post("/login", data={"username": "sara", "password": "secret1"})
    assert b"Network or server error" in resp.data


def test_login_requires_both_fields(client, api_stub):
    resp = client.post("/login", data={"username": "", "password": ""})
    assert b"Please enter both username and password" in resp.data
    assert api_stub.calls == []


def test_logout(client, login_as):
    login_as("EMPLOYEE")
    assert _location(client.get("/logout")).endswith("/login")
    with client.session_transaction() as s:
        assert "token" not in s


def test_401_from_api_logs_out_even_when_view_does_not_handle_it(client, login_as, api_stub):
    login_as("ADMIN")
    api_stub.add("GET", "/api/v1/employees", status=401, body={"message": "Token expired"})

    resp = client.get("/admin/employees")

    assert resp.status_code == 302
    assert _location(resp).endswith("/login")
    with client.session_transaction() as s:
        assert "token" not in s and "role" not in s


def test_401_on_live_endpoint_answers_json(client, login_as, api_stub):
    login_as("EMPLOYEE")
    api_stub.add("GET", "/api/v1/work-sessions/active", status=401, body=None)

    resp = client.get("/me/session/live", headers={"Accept": "application/json"})

    assert resp.status_code == 401
    assert resp.get_json()["redirect"].endswith("/login")


def test_admin_employee_listing_search_and_export(client, login_as, api_stub):
    login_as("ADMIN", name="Root")
    api_stub.add("GET", "/api/v1/employees", body=EMPLOYEES)

    page = client.get("/admin/employees?q=sara")
    assert page.status_code == 200
    assert b"Sara Ahmed" in page.data
    assert b"Ali Khan" not in page.data

    export = client.get("/admin/employees?export=1&filename=staff%20list")
    assert export.status_code == 200
    assert export.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert "staff list.xlsx" in export.headers["Content-Disposition"]


def test_employee_dashboard_shows_running_session(client, login_as, api_stub):
    login_as("EMPLOYEE", name="Ali")
    clock_in = (datetime.now(timezone.utc) - timedelta(minutes=30)).isoformat()
    api_stub.add("GET", "/api/v1/work-sessions/me", body={"fullName": "Ali Khan", "employeeId": 1, "role": "EMPLOYEE"})
    api_stub.add("GET", "/api/v1/work-sessions/active", body={"id": 9, "employeeId": 1, "clockInTime": clock_in, "breaks": []})
    api_stub.add("GET", "/api/v1/work-sessions/employee/1", body=[])

    resp = client.get("/employee")

    assert resp.status_code == 200
    assert b'data-ticking="true"' in resp.data
    assert b"Clock Out" in resp.data


def test_clock_in_marks_attendance_and_returns(client, login_as, api_stub):
    login_as("EMPLOYEE")
    api_stub.add("GET", "/api/v1/work-sessions/active", body=None)
    api_stub.add("POST", "/api/v1/work-sessions/clock-in", body={"id": 10})
    api_stub.add("POST", "/api/v1/attendance/mark", body="Attendance marked")

    resp = client.post("/me/session/clock-in", data={"next": "/employee"})

    assert _location(resp).endswith("/employee")
    assert "/api/v1/attendance/mark" in api_stub.paths("POST")


def test_leave_status_change_redirects_back(client, login_as, api_stub):
    login_as("MANAGER")
    api_stub.add("PUT", "/api/leaves/4/pending", body=None)

    resp = client.post("/leaves/4/status?status=PENDING&next=/manager/leaves")

    assert _location(resp).endswith("/manager/leaves")
    assert api_stub.paths("PUT") == ["/api/leaves/4/pending"]


def test_month_filter_uses_display_timezone_date(client, login_as, api_stub):
    login_as("ADMIN")
    api_stub.add("GET", "/api/v1/admin/work-sessions/all", body=[
        {"id": 1, "employeeId": 1, "employeeName": "Ali Khan", "clockInTime": "2025-01-31T20:30:00Z",
         "clockOutTime": "2025-02-01T04:30:00Z", "breaks": []},
        {"id": 2, "employeeId": 2, "employeeName": "Sara Ahmed", "clockInTime": "2025-02-28T20:00:00Z",
         "clockOutTime": "2025-03-01T03:00:00Z", "breaks": []},
    ])

    page = client.get("/admin/work-sessions?month=2")

    assert page.status_code == 200
    assert b"Feb 1, 2025" in page.data
    assert b"Mar 1, 2025" not in page.data
