from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class SessionContext:
    token: str
    role: Role
    display_name: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    role: Optional[str]
    name: str

    @classmethod
    def from_api(cls, data: dict) -> "LoginResult":
        data = data or {}
        return cls(
            token=str(data.get("token") or ""),
            role=data.get("role"),
            name=str(data.get("name") or data.get("fullName") or ""),
        )


@dataclass(frozen=True)
class CurrentUser:
    full_name: str
    role: Optional[Role]
    employee_id: Optional[int]
    username: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "CurrentUser":
        data = data or {}
        emp_id = data.get("employeeId") or data.get("id")
        return cls(
            full_name=str(data.get("fullName") or data.get("name") or ""),
            role=Role.parse(data.get("role")),
            employee_id=int(emp_id) if emp_id is not None else None,
            username=str(data.get("username") or ""),
        )
