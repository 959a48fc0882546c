from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from ems_portal.attendance.model import AttendanceRecord
from ems_portal.core.enums import Role
from ems_portal.dashboards.service import DashboardService
from ems_portal.employees.model import Employee
from ems_portal.leaves.model import Leave
from ems_portal.shifts.model import Shift
from ems_portal.work_sessions.model import Break, WorkSession

# 09:00 in Karachi
NOW = datetime(2025, 12, 8, 4, 0, tzinfo=timezone.utc)
TODAY = date(2025, 12, 8)


class Fixed:
    """One fake serving every list endpoint the dashboards read."""

    def __init__(self, **lists):
        self.lists = lists

    def list_all(self):
        return self.lists.get("all", [])

    def list_manager_team(self):
        return self.lists.get("team", [])

    def count_for_manager(self) -> int:
        return self.lists.get("count", 0)


def _present(name, day=TODAY, present=True):
    return AttendanceRecord(employee_name=name, attendance_date=day, attendance_time=None, present=present)


def _leave(leave_id, status):
    return Leave(id=leave_id, employee_id=1, employee_name="Ali", leave_type="CASUAL",
                 start_date=TODAY, end_date=TODAY, duration=1, status=status)


def _service(**repos):
    defaults = dict(
        employees=Fixed(),
        attendance=Fixed(),
        leaves=Fixed(),
        shifts=Fixed(),
        employee_shifts=Fixed(),
        work_sessions=Fixed(),
    )
    defaults.update(repos)
    return DashboardService(tz="Asia/Karachi", clock=lambda: NOW, **defaults)


def test_admin_stats():
    employees = [Employee(1, "Ali", role=Role.EMPLOYEE), Employee(2, "Root", role=Role.ADMIN, active=False)]
    service = _service(
        employees=Fixed(all=employees),
        shifts=Fixed(all=[Shift(1, "Morning", None, None)]),
        leaves=Fixed(all=[_leave(1, "PENDING"), _leave(2, "APPROVED")]),
        attendance=Fixed(all=[_present("Ali"), _present("Old", day=TODAY - timedelta(days=1))]),
    )

    stats = service.admin_stats()

    assert (stats.total_employees, stats.active_employees, stats.total_shifts) == (2, 1, 1)
    assert stats.pending_leaves == 1
    assert stats.present_today == 1


def test_hr_stats_excludes_admins_and_groups_departments():
    employees = [
        Employee(1, "Ali", department="IT", role=Role.EMPLOYEE),
        Employee(2, "Bina", department="IT", role=Role.EMPLOYEE),
        Employee(3, "Hina", department="", role=Role.HR),
        Employee(4, "Root", department="IT", role=Role.ADMIN),
    ]
    pending = [_leave(i, "PENDING") for i in range(1, 8)]
    service = _service(
        employees=Fixed(all=employees),
        leaves=Fixed(all=pending + [_leave(99, "REJECTED")]),
        attendance=Fixed(all=[_present("Ali"), _present("Bina", present=False)]),
    )

    stats = service.hr_stats()

    assert stats.total_employees == 3
    assert stats.present_today == 1
    assert stats.absent_today == 2
    assert stats.pending_leaves == 7
    assert len(stats.recent_pending) == 5
    assert stats.departments == [("IT", 3), ("Unassigned", 1)]


def test_team_stats():
    active = WorkSession(id=1, employee_id=1, employee_name="Ali", clock_in_time=NOW - timedelta(hours=1))
    on_break = WorkSession(id=2, employee_id=2, employee_name="Bina", clock_in_time=NOW - timedelta(minutes=30),
                           breaks=[Break(1, NOW - timedelta(minutes=5))])
    stale = WorkSession(id=3, employee_id=3, employee_name="Chand", clock_in_time=NOW - timedelta(days=2))
    done = WorkSession(id=4, employee_id=1, employee_name="Ali", clock_in_time=NOW - timedelta(days=1),
                       clock_out_time=NOW - timedelta(hours=16))
    service = _service(
        employee_shifts=Fixed(count=4),
        attendance=Fixed(team=[_present("Ali"), _present("Bina")]),
        work_sessions=Fixed(team=[active, on_break, stale, done]),
    )

    stats = service.team_stats()

    assert stats.members == 4
    assert stats.present_today == 2
    assert stats.absent_today == 2
    assert stats.active_now == 2
    assert stats.on_break == 1
    assert [s.id for s in stats.recent_completed] == [4]
