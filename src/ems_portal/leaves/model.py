from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_api_date, parse_api_datetime


@dataclass(frozen=True)
class Leave:
    id: int
    employee_id: Optional[int]
    employee_name: str
    leave_type: str
    start_date: Optional[date]
    end_date: Optional[date]
    duration: int
    description: str = ""
    prescription_img: Optional[str] = None
    status: str = "PENDING"
    applied_on: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == "PENDING"

    @property
    def type_label(self) -> str:
        return self.leave_type.replace("_", " ")

    @classmethod
    def from_api(cls, data: dict, tz=None) -> "Leave":
        data = data or {}
        emp_id = data.get("employeeId")
        try:
            duration = int(data.get("duration") or 0)
        except (TypeError, ValueError):
            duration = 0
        return cls(
            id=int(data.get("id") or 0),
            employee_id=int(emp_id) if emp_id not in (None, "") else None,
            employee_name=str(data.get("employeeName") or ""),
            leave_type=str(data.get("leaveType") or ""),
            start_date=parse_api_date(data.get("startDate")),
            end_date=parse_api_date(data.get("endDate")),
            duration=duration,
            description=str(data.get("description") or ""),
            prescription_img=data.get("prescriptionImg") or None,
            status=str(data.get("status") or "PENDING").upper(),
            applied_on=parse_api_datetime(data.get("appliedOn"), tz),
        )


@dataclass(frozen=True)
class LeaveApplication:
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    duration: int
    description: str

    def to_form(self) -> dict:
        return {
            "employeeId": str(self.employee_id),
            "leaveType": self.leave_type,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "duration": str(self.duration),
            "description": self.description,
        }
