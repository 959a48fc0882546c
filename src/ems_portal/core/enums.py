from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the token's ``role`` claim."""

    ADMIN = "ADMIN"
    HR = "HR"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"

    @classmethod
    def parse(cls, value) -> "Role | None":
        if not value:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class AuthState(str, Enum):
    LOADING = "LOADING"
    AUTHENTICATED = "AUTHENTICATED"
    UNAUTHENTICATED = "UNAUTHENTICATED"


class LeaveStatus(str, Enum):
    """Leave status as stored by the backend. Any status may be set from any other."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LeaveType(str, Enum):
    CASUAL = "CASUAL"
    SICK = "SICK"
    ANNUAL = "ANNUAL"
    UNPAID = "UNPAID"


class WorkSessionStatus(str, Enum):
    """Statuses reported by the backend for a work session."""

    WORKING = "Working"
    ON_BREAK = "On Break"
    COMPLETED = "Completed"
    AUTO_CLOCKED_OUT = "Auto Clocked Out"
    INVALID_CLOCKED_OUT = "Invalid Clocked Out"
    EARLY_CLOCKED_OUT = "Early Clocked Out"

    @classmethod
    def is_open(cls, value) -> bool:
        return value in {cls.WORKING.value, cls.ON_BREAK.value, cls.WORKING, cls.ON_BREAK}
