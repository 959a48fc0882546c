from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import format_shift_time, parse_time_of_day


def _int_or_none(value) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Shift:
    id: int
    shift_name: str
    starts_at: Optional[time]
    ends_at: Optional[time]
    manager_id: Optional[int] = None
    manager_name: str = ""

    @property
    def overnight(self) -> bool:
        return bool(self.starts_at and self.ends_at and self.starts_at.hour > self.ends_at.hour)

    @property
    def label(self) -> str:
        return f"{self.shift_name} ({format_shift_time(self.starts_at)} - {format_shift_time(self.ends_at)})"

    @classmethod
    def from_api(cls, data: dict) -> "Shift":
        data = data or {}
        manager = data.get("manager") or {}
        return cls(
            id=int(data.get("id") or 0),
            shift_name=str(data.get("shiftName") or ""),
            starts_at=parse_time_of_day(data.get("startsAt")),
            ends_at=parse_time_of_day(data.get("endsAt")),
            manager_id=_int_or_none(data.get("managerId") or manager.get("id")),
            manager_name=str(data.get("managerName") or manager.get("fullName") or ""),
        )


@dataclass(frozen=True)
class EmployeeShift:
    """Link between one employee and the shift they work."""

    id: int
    employee_id: Optional[int]
    employee_name: str
    shift_id: Optional[int]
    shift_name: str
    starts_at: Optional[time] = None
    ends_at: Optional[time] = None

    @classmethod
    def from_api(cls, data: dict) -> "EmployeeShift":
        data = data or {}
        return cls(
            id=int(data.get("id") or 0),
            employee_id=_int_or_none(data.get("employeeId")),
            employee_name=str(data.get("empName") or data.get("employeeName") or ""),
            shift_id=_int_or_none(data.get("shiftId")),
            shift_name=str(data.get("shiftName") or ""),
            starts_at=parse_time_of_day(data.get("startsAt")),
            ends_at=parse_time_of_day(data.get("endsAt")),
        )
