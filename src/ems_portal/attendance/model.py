from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import parse_api_date, parse_api_datetime, parse_time_of_day, shift_day


def beautify_shift(value: str) -> str:
    """``NIGHT_SHIFT`` -> ``Night Shift``."""
    if not value:
        return "--"
    return " ".join(w[:1].upper() + w[1:].lower() for w in str(value).split("_") if w)


@dataclass(frozen=True)
class AttendanceRecord:
    employee_name: str
    attendance_date: Optional[date]
    attendance_time: Optional[str]
    present: bool
    shift: str = ""
    assigned_shift: str = ""
    created_at: Optional[datetime] = None

    @property
    def present_label(self) -> str:
        return "Present" if self.present else "Absent"

    def time_label(self) -> str:
        t = parse_time_of_day(self.attendance_time)
        if t is None and self.created_at is not None:
            t = self.created_at.timetz()
        if t is None:
            return "--"
        hour = t.hour % 12 or 12
        return f"{hour:02d}:{t.minute:02d} {'PM' if t.hour >= 12 else 'AM'}"

    def display_day(self, tz=None) -> Optional[date]:
        """Day the record is grouped under on screen (08:00 to 06:00 window)."""
        if self.created_at is not None:
            return shift_day(self.created_at, tz)
        return self.attendance_date

    @classmethod
    def from_api(cls, data: dict, tz=None) -> "AttendanceRecord":
        data = data or {}
        return cls(
            employee_name=str(data.get("employeeName") or "Unknown"),
            attendance_date=parse_api_date(data.get("attendanceDate")),
            attendance_time=data.get("attendanceTime"),
            present=bool(data.get("present")),
            shift=str(data.get("shift") or ""),
            assigned_shift=str(data.get("assignedShift") or ""),
            created_at=parse_api_datetime(data.get("createdAt"), tz),
        )
