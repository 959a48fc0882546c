from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import business_date, now_utc, zone
from ..core.exceptions import ApiError, SessionExpiredError
from ..shifts.repository import ShiftRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _newest_first(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: r.attendance_date or date.min, reverse=True)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, shifts: ShiftRepository, *, tz=None):
        self._attendance = attendance
        self._shifts = shifts
        self._tz = tz

    def mark_present(self) -> bool:
        """Mark today's attendance. False when the backend says it is already marked (HTTP 400)."""
        try:
            self._attendance.mark()
        except SessionExpiredError:
            raise
        except ApiError as e:
            if e.status_code == 400:
                logger.info("Attendance already marked for today")
                return False
            raise
        return True

    def all_records(self) -> list[AttendanceRecord]:
        return _newest_first(self._attendance.list_all())

    def my_records(self) -> list[AttendanceRecord]:
        return _newest_first(self._attendance.list_mine())

    def team_records(self) -> list[AttendanceRecord]:
        return _newest_first(self._attendance.list_manager_team())

    def current_business_date(self, now: Optional[datetime] = None) -> date:
        """Today's date for the caller's own shift; calendar date if the shift can't be loaded."""
        local_now = (now or now_utc()).astimezone(zone(self._tz))
        try:
            shift = self._shifts.get_mine()
        except SessionExpiredError:
            raise
        except ApiError as e:
            logger.warning("Could not load own shift, using calendar date: %s", e)
            return local_now.date()
        if not shift:
            return local_now.date()
        return business_date(shift.starts_at, shift.ends_at, local_now)

    @staticmethod
    def records_on(records: Sequence[AttendanceRecord], day: date) -> list[AttendanceRecord]:
        return [r for r in records if r.attendance_date == day]

