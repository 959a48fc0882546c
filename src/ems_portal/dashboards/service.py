from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc, zone
from ..core.constants import RECENT_HISTORY_LIMIT
from ..core.enums import LeaveStatus, Role
from ..employees.repository import EmployeeRepository
from ..leaves.model import Leave
from ..leaves.repository import LeaveRepository
from ..shifts.repository import EmployeeShiftRepository, ShiftRepository
from ..work_sessions.calculator import current_break
from ..work_sessions.model import WorkSession
from ..work_sessions.repository import WorkSessionRepository


@dataclass(frozen=True)
class AdminStats:
    total_employees: int
    active_employees: int
    total_shifts: int
    pending_leaves: int
    present_today: int


@dataclass(frozen=True)
class HrStats:
    total_employees: int
    present_today: int
    absent_today: int
    pending_leaves: int
    departments: list[tuple[str, int]] = field(default_factory=list)
    recent_pending: list[Leave] = field(default_factory=list)


@dataclass(frozen=True)
class TeamStats:
    members: int
    present_today: int
    on_break: int
    absent_today: int
    active_now: int
    recent_completed: list[WorkSession] = field(default_factory=list)
    active_sessions: list[WorkSession] = field(default_factory=list)


class DashboardService:
    """Counts shown on the role landing pages, computed from already-fetched lists."""

    def __init__(
        self,
        *,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        shifts: ShiftRepository,
        employee_shifts: EmployeeShiftRepository,
        work_sessions: WorkSessionRepository,
        tz=None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._shifts = shifts
        self._employee_shifts = employee_shifts
        self._work_sessions = work_sessions
        self._tz = tz
        self._clock = clock

    def today(self) -> date:
        return self._clock().astimezone(zone(self._tz)).date()

    def _local_date(self, value: datetime) -> date:
        return value.astimezone(zone(self._tz)).date()

    def _present_on(self, records, day: date) -> int:
        return sum(1 for r in records if r.attendance_date == day and r.present)

    def admin_stats(self) -> AdminStats:
        employees = self._employees.list_all()
        leaves = self._leaves.list_all()
        return AdminStats(
            total_employees=len(employees),
            active_employees=sum(1 for e in employees if e.active),
            total_shifts=len(self._shifts.list_all()),
            pending_leaves=sum(1 for lv in leaves if lv.status == LeaveStatus.PENDING.value),
            present_today=self._present_on(self._attendance.list_all(), self.today()),
        )

    def hr_stats(self) -> HrStats:
        employees = self._employees.list_all()
        leaves = self._leaves.list_all()

        total = sum(1 for e in employees if e.role != Role.ADMIN)
        present = self._present_on(self._attendance.list_all(), self.today())
        pending = [lv for lv in leaves if lv.status == LeaveStatus.PENDING.value]
        departments = Counter(e.department or "Unassigned" for e in employees)

        return HrStats(
            total_employees=total,
            present_today=present,
            absent_today=max(0, total - present),
            pending_leaves=len(pending),
            departments=sorted(departments.items(), key=lambda kv: (-kv[1], kv[0])),
            recent_pending=pending[:RECENT_HISTORY_LIMIT],
        )

    def team_stats(self) -> TeamStats:
        today = self.today()
        members = self._employee_shifts.count_for_manager()
        present = self._present_on(self._attendance.list_manager_team(), today)
        sessions = self._work_sessions.list_manager_team()

        active = [
            s for s in sessions
            if s.clock_out_time is None and s.clock_in_time and self._local_date(s.clock_in_time) == today
        ]
        completed = sorted(
            (s for s in sessions if s.clock_out_time is not None),
            key=lambda s: s.clock_out_time,
            reverse=True,
        )

        return TeamStats(
            members=members,
            present_today=present,
            on_break=sum(1 for s in active if current_break(s) is not None),
            absent_today=max(0, members - present),
            active_now=len(active),
            recent_completed=completed[:RECENT_HISTORY_LIMIT],
            active_sessions=active,
        )
