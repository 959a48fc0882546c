from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .api.client import ApiClient, ApiConfig
from .attendance.http_attendance_repository import HttpAttendanceRepository
from .attendance.service import AttendanceService
from .auth.http_auth_repository import HttpAuthRepository
from .auth.service import AuthService
from .auth.session_store import clear_current_session, current_token
from .dashboards.service import DashboardService
from .employees.http_employee_repository import HttpEmployeeRepository
from .employees.service import EmployeeService
from .leaves.http_leave_repository import HttpLeaveRepository
from .leaves.service import LeaveService
from .shifts.http_shift_repository import HttpEmployeeShiftRepository, HttpShiftRepository
from .shifts.service import ShiftService
from .work_sessions.http_work_session_repository import HttpWorkSessionRepository
from .work_sessions.service import WorkSessionService


@dataclass(frozen=True)
class Container:
    api: Optional[ApiClient]

    auth_service: AuthService
    employee_service: EmployeeService
    shift_service: ShiftService
    attendance_service: AttendanceService
    leave_service: LeaveService
    work_session_service: WorkSessionService
    dashboard_service: DashboardService


def build_container(
    *,
    api_config: dict,
    display_timezone: Optional[str] = None,
    token_provider: Callable[[], Optional[str]] = current_token,
    on_unauthorized: Callable[[], None] = clear_current_session,
    session: Optional[requests.Session] = None,
) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout_seconds=float(api_config.get("timeout_seconds", 15)),
    )
    api = ApiClient(config, token_provider=token_provider, on_unauthorized=on_unauthorized, session=session)
    tz = display_timezone

    auth_repo = HttpAuthRepository(api)
    employees_repo = HttpEmployeeRepository(api)
    shifts_repo = HttpShiftRepository(api)
    employee_shifts_repo = HttpEmployeeShiftRepository(api)
    attendance_repo = HttpAttendanceRepository(api, tz)
    leaves_repo = HttpLeaveRepository(api, tz)
    work_sessions_repo = HttpWorkSessionRepository(api, tz)

    attendance_service = AttendanceService(attendance_repo, shifts_repo, tz=tz)

    return Container(
        api=api,
        auth_service=AuthService(auth_repo),
        employee_service=EmployeeService(employees_repo, employee_shifts_repo),
        shift_service=ShiftService(shifts_repo, employee_shifts_repo, employees_repo),
        attendance_service=attendance_service,
        leave_service=LeaveService(leaves_repo),
        work_session_service=WorkSessionService(work_sessions_repo, attendance_service),
        dashboard_service=DashboardService(
            employees=employees_repo,
            attendance=attendance_repo,
            leaves=leaves_repo,
            shifts=shifts_repo,
            employee_shifts=employee_shifts_repo,
            work_sessions=work_sessions_repo,
            tz=tz,
        ),
    )
