from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from ems_portal.attendance.service import AttendanceService
from ems_portal.auth.model import CurrentUser
from ems_portal.core.enums import Role
from ems_portal.core.exceptions import ApiError, SessionExpiredError, ValidationError
from ems_portal.work_sessions.model import Break, WorkSession
from ems_portal.work_sessions.service import WorkSessionService

NOW = datetime(2025, 12, 8, 6, 0, 0, tzinfo=timezone.utc)


class InMemoryWorkSessions:
    def __init__(self, sessions: Optional[list[WorkSession]] = None):
        self.sessions = list(sessions or [])
        self.calls: list[tuple] = []

    def me(self) -> CurrentUser:
        return CurrentUser(full_name="Ali", role=Role.EMPLOYEE, employee_id=1)

    def list_for_employee(self, employee_id: int):
        return [s for s in self.sessions if s.employee_id == employee_id]

    def active(self):
        return next((s for s in self.sessions if s.clock_out_time is None), None)

    def clock_in(self):
        s = WorkSession(id=len(self.sessions) + 1, employee_id=1, employee_name="Ali", clock_in_time=NOW)
        self.sessions.append(s)
        self.calls.append(("clock_in",))
        return s

    def clock_out(self, session_id: int) -> None:
        self.calls.append(("clock_out", session_id))

    def list_all(self):
        return list(self.sessions)

    def sync_hours(self, session_id: int, payload: dict) -> None:
        self.calls.append(("sync", session_id, payload))

    def list_manager_team(self):
        return list(self.sessions)

    def start_break(self, session_id: int, at: datetime) -> None:
        self.calls.append(("start_break", session_id, at))

    def end_break(self, break_id: int, at: datetime) -> None:
        self.calls.append(("end_break", break_id, at))


class InMemoryAttendance:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.marked = 0

    def mark(self) -> None:
        if self.error:
            raise self.error
        self.marked += 1


class NoShifts:
    def get_mine(self):
        return None


def _service(sessions=None, attendance_error=None):
    repo = InMemoryWorkSessions(sessions)
    attendance = InMemoryAttendance(attendance_error)
    service = WorkSessionService(repo, AttendanceService(attendance, NoShifts()), clock=lambda: NOW)
    return service, repo, attendance


def _open(clock_in_delta=3600, breaks=()):
    return WorkSession(id=5, employee_id=1, employee_name="Ali",
                       clock_in_time=NOW - timedelta(seconds=clock_in_delta), breaks=list(breaks))


def test_clock_in_marks_attendance():
    service, repo, attendance = _service()
    assert service.clock_in() is True
    assert attendance.marked == 1
    assert repo.calls == [("clock_in",)]


def test_clock_in_when_attendance_already_marked():
    service, _, _ = _service(attendance_error=ApiError("Already marked", status_code=400))
    assert service.clock_in() is False


def test_clock_in_keeps_session_when_attendance_fails():
    service, repo, _ = _service(attendance_error=ApiError("boom", status_code=500))
    assert service.clock_in() is False
    assert repo.active() is not None


def test_clock_in_propagates_session_expiry():
    service, _, _ = _service(attendance_error=SessionExpiredError("expired", status_code=401))
    with pytest.raises(SessionExpiredError):
        service.clock_in()


def test_clock_in_twice_is_rejected():
    service, _, _ = _service([_open()])
    with pytest.raises(ValidationError):
        service.clock_in()


def test_clock_out_requires_open_session():
    service, _, _ = _service()
    with pytest.raises(ValidationError):
        service.clock_out()

    service, repo, _ = _service([_open()])
    service.clock_out()
    assert repo.calls == [("clock_out", 5)]


def test_toggle_break_starts_then_ends():
    service, repo, _ = _service([_open()])
    assert service.toggle_break() == "started"
    assert repo.calls[-1] == ("start_break", 5, NOW)

    service, repo, _ = _service([_open(breaks=[Break(9, NOW - timedelta(minutes=5))])])
    assert service.toggle_break() == "ended"
    assert repo.calls[-1] == ("end_break", 9, NOW)


def test_current_snapshot_uses_active_session():
    service, _, _ = _service([_open(clock_in_delta=90)])
    snap = service.current_snapshot()
    assert snap.elapsed == "00:01:30"
    assert snap.ticking is True


def test_history_newest_first_with_limit():
    older = WorkSession(id=1, employee_id=1, employee_name="Ali", clock_in_time=NOW - timedelta(days=2),
                        clock_out_time=NOW - timedelta(days=2) + timedelta(hours=8))
    newer = WorkSession(id=2, employee_id=1, employee_name="Ali", clock_in_time=NOW - timedelta(days=1),
                        clock_out_time=NOW - timedelta(days=1) + timedelta(hours=8))
    service, _, _ = _service([older, newer])
    assert [s.id for s in service.history(1, limit=1)] == [2]
    assert service.history(None) == []


def test_display_totals_live_for_open_and_stored_for_closed():
    closed = WorkSession(id=3, employee_id=1, employee_name="Ali", clock_in_time=NOW - timedelta(hours=9),
                         clock_out_time=NOW - timedelta(hours=1), status="Completed",
                         total_session_hours="PT8H", total_working_hours="PT7H30M", idle_time="PT30M")
    service, _, _ = _service([closed])

    assert service.display_totals(closed) == {"total": "8h 0m", "working": "7h 30m", "idle": "30m 0s"}

    live = WorkSession(id=4, employee_id=1, employee_name="Ali", clock_in_time=NOW - timedelta(minutes=90),
                       status="Working", total_working_hours="PT0S")
    assert service.display_totals(live)["working"] == "1h 30m"


def test_sync_hours_sends_iso_durations():
    closed = WorkSession(id=3, employee_id=1, employee_name="Ali", clock_in_time=NOW - timedelta(hours=2),
                         clock_out_time=NOW,
                         breaks=[Break(1, NOW - timedelta(minutes=60), NOW - timedelta(minutes=45))])
    service, repo, _ = _service([closed])

    payload = service.sync_hours(3)

    assert payload == {"totalSessionHours": "PT2H0M0S", "totalWorkingHours": "PT1H45M0S", "idleTime": "PT0H15M0S"}
    assert repo.calls[-1] == ("sync", 3, payload)


def test_sync_hours_is_stable_for_break_left_open_at_clock_out():
    clock_in = NOW - timedelta(hours=10)
    closed = WorkSession(id=4, employee_id=1, employee_name="Ali", clock_in_time=clock_in,
                         clock_out_time=clock_in + timedelta(hours=8),
                         breaks=[Break(1, clock_in + timedelta(hours=1), None)])
    repo = InMemoryWorkSessions([closed])
    attendance = AttendanceService(InMemoryAttendance(), NoShifts())
    today = WorkSessionService(repo, attendance, clock=lambda: NOW)
    three_days_on = WorkSessionService(repo, attendance, clock=lambda: NOW + timedelta(days=3))

    expected = {"totalSessionHours": "PT8H0M0S", "totalWorkingHours": "PT1H0M0S", "idleTime": "PT7H0M0S"}
    assert today.sync_hours(4) == expected
    assert three_days_on.sync_hours(4) == expected


def test_sync_hours_rejects_open_session():
    service, _, _ = _service([_open()])
    with pytest.raises(ValidationError):
        service.sync_hours(5)
