from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def mark(self) -> None:
        raise NotImplementedError

    def list_mine(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_manager_team(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
