from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import parse_api_datetime


@dataclass(frozen=True)
class Break:
    id: Optional[int]
    start_time: Optional[datetime]
    end_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @classmethod
    def from_api(cls, data: dict, tz=None) -> "Break":
        data = data or {}
        bid = data.get("id")
        return cls(
            id=int(bid) if bid not in (None, "") else None,
            start_time=parse_api_datetime(data.get("startTime"), tz),
            end_time=parse_api_datetime(data.get("endTime"), tz),
        )


@dataclass(frozen=True)
class WorkSession:
    id: int
    employee_id: Optional[int]
    employee_name: str
    clock_in_time: Optional[datetime]
    clock_out_time: Optional[datetime] = None
    breaks: list[Break] = field(default_factory=list)
    status: str = ""
    idle_time: Optional[str] = None
    total_session_hours: Optional[str] = None
    total_working_hours: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.clock_out_time is not None

    @classmethod
    def from_api(cls, data: dict, tz=None) -> "WorkSession":
        data = data or {}
        emp_id = data.get("employeeId")
        return cls(
            id=int(data.get("id") or data.get("sessionId") or 0),
            employee_id=int(emp_id) if emp_id not in (None, "") else None,
            employee_name=str(data.get("employeeName") or ""),
            clock_in_time=parse_api_datetime(data.get("clockInTime"), tz),
            clock_out_time=parse_api_datetime(data.get("clockOutTime"), tz),
            breaks=[Break.from_api(b, tz) for b in (data.get("breaks") or [])],
            status=str(data.get("status") or ""),
            idle_time=data.get("idleTime"),
            total_session_hours=data.get("totalSessionHours"),
            total_working_hours=data.get("totalWorkingHours"),
        )
