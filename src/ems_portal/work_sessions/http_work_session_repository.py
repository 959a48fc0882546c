from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from ..api.client import ApiClient, as_list
from ..auth.model import CurrentUser
from .model import WorkSession


def _iso_utc(at: datetime) -> str:
    return at.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class HttpWorkSessionRepository:
    def __init__(self, api: ApiClient, tz=None):
        self._api = api
        self._tz = tz

    def _sessions(self, path: str) -> Sequence[WorkSession]:
        return [WorkSession.from_api(d, self._tz) for d in as_list(self._api.get(path))]

    def me(self) -> CurrentUser:
        return CurrentUser.from_api(self._api.get("/api/v1/work-sessions/me"))

    def list_for_employee(self, employee_id: int) -> Sequence[WorkSession]:
        return self._sessions(f"/api/v1/work-sessions/employee/{int(employee_id)}")

    def active(self) -> Optional[WorkSession]:
        data = self._api.get("/api/v1/work-sessions/active")
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return WorkSession.from_api(data, self._tz)

    def clock_in(self) -> Optional[WorkSession]:
        data = self._api.post("/api/v1/work-sessions/clock-in")
        return WorkSession.from_api(data, self._tz) if isinstance(data, dict) else None

    def clock_out(self, session_id: int) -> None:
        self._api.put(f"/api/v1/work-sessions/clock-out/{int(session_id)}")

    def list_all(self) -> Sequence[WorkSession]:
        return self._sessions("/api/v1/admin/work-sessions/all")

    def sync_hours(self, session_id: int, payload: dict) -> None:
        self._api.patch(f"/api/v1/admin/work-sessions/{int(session_id)}/sync-hours", json=payload)

    def list_manager_team(self) -> Sequence[WorkSession]:
        return self._sessions("/api/v1/work-sessions/manager")

    def start_break(self, session_id: int, at: datetime) -> None:
        self._api.post("/v1/breaks", json={"workSessionId": int(session_id), "startTime": _iso_utc(at)})

    def end_break(self, break_id: int, at: datetime) -> None:
        self._api.put(f"/v1/breaks/{int(break_id)}", json={"endTime": _iso_utc(at)})
