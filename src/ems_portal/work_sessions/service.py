from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..attendance.service import AttendanceService
from ..auth.model import CurrentUser
from ..common.datetime_utils import format_iso_duration, now_utc, to_iso_duration
from ..core.enums import WorkSessionStatus
from ..core.exceptions import ApiError, SessionExpiredError, ValidationError
from .calculator import SessionSnapshot, SessionTotals, compute_totals, current_break, format_seconds, snapshot
from .model import WorkSession
from .repository import WorkSessionRepository

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _newest_first(sessions) -> list[WorkSession]:
    return sorted(sessions, key=lambda s: s.clock_in_time or _EPOCH, reverse=True)


class WorkSessionService:
    def __init__(
        self,
        sessions: WorkSessionRepository,
        attendance: AttendanceService,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._sessions = sessions
        self._attendance = attendance
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def whoami(self) -> CurrentUser:
        return self._sessions.me()

    def active_session(self) -> Optional[WorkSession]:
        return self._sessions.active()

    def current_snapshot(self, style: str = "hms") -> SessionSnapshot:
        return snapshot(self.active_session(), self.now(), style)

    def clock_in(self) -> bool:
        """Open a session, then mark attendance. Returns whether attendance was newly marked."""
        if self.active_session():
            raise ValidationError("You are already clocked in")
        self._sessions.clock_in()
        try:
            return self._attendance.mark_present()
        except SessionExpiredError:
            raise
        except ApiError as e:
            logger.warning("Clocked in but attendance could not be marked: %s", e)
            return False

    def clock_out(self) -> None:
        session = self.active_session()
        if not session:
            raise ValidationError("You are not clocked in")
        self._sessions.clock_out(session.id)

    def toggle_break(self) -> str:
        session = self.active_session()
        if not session or session.is_closed:
            raise ValidationError("You are not clocked in")
        open_break = current_break(session)
        if open_break is not None:
            self._sessions.end_break(open_break.id, self.now())
            return "ended"
        self._sessions.start_break(session.id, self.now())
        return "started"

    def history(self, employee_id: Optional[int], limit: Optional[int] = None) -> list[WorkSession]:
        if not employee_id:
            return []
        rows = _newest_first(self._sessions.list_for_employee(int(employee_id)))
        return rows[:limit] if limit else rows

    def all_sessions(self) -> list[WorkSession]:
        return _newest_first(self._sessions.list_all())

    def team_sessions(self) -> list[WorkSession]:
        return _newest_first(self._sessions.list_manager_team())

    def totals(self, session: WorkSession) -> SessionTotals:
        return compute_totals(session, self.now())

    def display_totals(self, session: WorkSession, style: str = "hm") -> dict[str, str]:
        """Open sessions are computed live; closed ones use the server's stored durations."""
        if WorkSessionStatus.is_open(session.status) or (not session.is_closed and not session.status):
            t = self.totals(session)
            return {
                "total": format_seconds(t.total_seconds, style),
                "working": format_seconds(t.working_seconds, style),
                "idle": format_seconds(t.break_seconds, style),
            }
        return {
            "total": format_iso_duration(session.total_session_hours),
            "working": format_iso_duration(session.total_working_hours),
            "idle": format_iso_duration(session.idle_time),
        }

    def sync_hours(self, session_id: int) -> dict:
        """Recompute a closed session's durations and store them on the server."""
        session = next((s for s in self._sessions.list_all() if s.id == int(session_id)), None)
        if not session:
            raise ValidationError("Work session not found")
        if not session.is_closed:
            raise ValidationError("Only closed sessions can be synced")

        t = self.totals(session)
        payload = {
            "totalSessionHours": to_iso_duration(t.total_seconds),
            "totalWorkingHours": to_iso_duration(t.working_seconds),
            "idleTime": to_iso_duration(t.break_seconds),
        }
        self._sessions.sync_hours(session.id, payload)
        logger.info("Synced hours for work session %s", session.id)
        return payload

