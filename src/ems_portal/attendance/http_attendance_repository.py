from __future__ import annotations

from typing import Sequence

from ..api.client import ApiClient, as_list
from .model import AttendanceRecord


class HttpAttendanceRepository:
    def __init__(self, api: ApiClient, tz=None):
        self._api = api
        self._tz = tz

    def _records(self, path: str) -> Sequence[AttendanceRecord]:
        return [AttendanceRecord.from_api(d, self._tz) for d in as_list(self._api.get(path))]

    def mark(self) -> None:
        self._api.post("/api/v1/attendance/mark")

    def list_mine(self) -> Sequence[AttendanceRecord]:
        return self._records("/api/v1/attendance/my")

    def list_all(self) -> Sequence[AttendanceRecord]:
        return self._records("/api/v1/attendance/all")

    def list_manager_team(self) -> Sequence[AttendanceRecord]:
        return self._records("/api/v1/attendance/manager")
