from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..auth.model import CurrentUser
from .model import WorkSession


class WorkSessionRepository(Protocol):
    """Work-session and break endpoints of the backend."""

    def me(self) -> CurrentUser:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[WorkSession]:
        raise NotImplementedError

    def active(self) -> Optional[WorkSession]:
        raise NotImplementedError

    def clock_in(self) -> Optional[WorkSession]:
        raise NotImplementedError

    def clock_out(self, session_id: int) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[WorkSession]:
        raise NotImplementedError

    def sync_hours(self, session_id: int, payload: dict) -> None:
        raise NotImplementedError

    def list_manager_team(self) -> Sequence[WorkSession]:
        raise NotImplementedError

    def start_break(self, session_id: int, at: datetime) -> None:
        raise NotImplementedError

    def end_break(self, break_id: int, at: datetime) -> None:
        raise NotImplementedError
