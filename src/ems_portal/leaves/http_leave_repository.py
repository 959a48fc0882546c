from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient, as_list
from .model import Leave, LeaveApplication


class HttpLeaveRepository:
    def __init__(self, api: ApiClient, tz=None):
        self._api = api
        self._tz = tz

    def _leaves(self, path: str) -> Sequence[Leave]:
        return [Leave.from_api(d, self._tz) for d in as_list(self._api.get(path))]

    def apply(self, application: LeaveApplication, proof: Optional[tuple[str, Any, str]] = None) -> None:
        # Multipart: plain fields plus the optional proof image
        files = {"prescription": proof} if proof else None
        self._api.post("/api/leaves", data=application.to_form(), files=files)

    def approve(self, leave_id: int) -> None:
        self._api.put(f"/api/leaves/{int(leave_id)}/approve")

    def reject(self, leave_id: int) -> None:
        self._api.put(f"/api/leaves/{int(leave_id)}/reject")

    def set_pending(self, leave_id: int) -> None:
        self._api.put(f"/api/leaves/{int(leave_id)}/pending")

    def delete(self, leave_id: int) -> None:
        self._api.delete(f"/api/leaves/{int(leave_id)}")

    def list_all(self) -> Sequence[Leave]:
        return self._leaves("/api/leaves")

    def list_by_employee(self, employee_id: int) -> Sequence[Leave]:
        return self._leaves(f"/api/leaves/employee/{int(employee_id)}")

    def list_by_status(self, status: str) -> Sequence[Leave]:
        return self._leaves(f"/api/leaves/status/{status}")

    def list_manager_team(self) -> Sequence[Leave]:
        return self._leaves("/api/leaves/manager")

    def list_types(self) -> Sequence[str]:
        return [str(t) for t in as_list(self._api.get("/api/leaves/types"))]
