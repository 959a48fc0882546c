from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_api_date
from ..core.enums import Role


def _int_or_none(value) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Employee:
    """An employee record as returned by the backend."""

    id: int
    full_name: str
    email: str = ""
    phone: str = ""
    gender: str = ""
    department: str = ""
    designation: str = ""
    role: Optional[Role] = None
    joining_date: Optional[date] = None
    active: bool = True
    username: str = ""
    assigned_shift: str = ""
    shift_id: Optional[int] = None
    employee_shift_id: Optional[int] = None

    @property
    def status_label(self) -> str:
        return "Active" if self.active else "Inactive"

    @property
    def initial(self) -> str:
        return self.full_name[:1].upper() if self.full_name else "?"

    @classmethod
    def from_api(cls, data: dict) -> "Employee":
        data = data or {}
        user = data.get("user") or {}
        active = data.get("active", data.get("isActive", True))
        return cls(
            id=int(data.get("id") or data.get("employeeId") or 0),
            full_name=str(data.get("fullName") or data.get("name") or ""),
            email=str(data.get("email") or ""),
            phone=str(data.get("phone") or ""),
            gender=str(data.get("gender") or ""),
            department=str(data.get("department") or ""),
            designation=str(data.get("designation") or ""),
            role=Role.parse(data.get("role")),
            joining_date=parse_api_date(data.get("joiningDate")),
            active=bool(active),
            username=str(data.get("username") or user.get("username") or ""),
            assigned_shift=str(data.get("assignedShift") or data.get("shiftName") or ""),
            shift_id=_int_or_none(data.get("shiftId")),
            employee_shift_id=_int_or_none(data.get("employeeShiftId")),
        )


@dataclass(frozen=True)
class EmployeeForm:
    """Validated add/edit form, ready to send."""

    full_name: str
    email: str
    phone: str
    gender: str
    department: str
    designation: str
    role: Role
    joining_date: Optional[date]
    active: bool
    username: str
    password: str = ""

    def to_api(self) -> dict:
        payload = {
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "gender": self.gender,
            "department": self.department,
            "designation": self.designation,
            "role": self.role.value,
            "joiningDate": self.joining_date.isoformat() if self.joining_date else None,
            "active": self.active,
            "username": self.username,
        }
        # Blank password on edit keeps the current one
        if self.password:
            payload["password"] = self.password
        return payload
