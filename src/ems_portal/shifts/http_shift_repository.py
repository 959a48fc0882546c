from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient, as_list
from ..core.exceptions import ApiError
from .model import EmployeeShift, Shift


class HttpShiftRepository:
    def __init__(self, api: ApiClient):
        self._api = api

    def list_all(self) -> Sequence[Shift]:
        return [Shift.from_api(d) for d in as_list(self._api.get("/v1/shifts"))]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        try:
            data = self._api.get(f"/v1/shifts/{int(shift_id)}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return Shift.from_api(data) if data else None

    def create(self, payload: dict) -> None:
        self._api.post("/v1/shifts", json=payload)

    def update(self, shift_id: int, payload: dict) -> None:
        self._api.put(f"/v1/shifts/{int(shift_id)}", json=payload)

    def delete(self, shift_id: int) -> None:
        self._api.delete(f"/v1/shifts/{int(shift_id)}")

    def get_mine(self) -> Optional[Shift]:
        data = self._api.get("/v1/shifts/my")
        return Shift.from_api(data) if isinstance(data, dict) and data else None


class HttpEmployeeShiftRepository:
    def __init__(self, api: ApiClient):
        self._api = api

    def list_all(self) -> Sequence[EmployeeShift]:
        return [EmployeeShift.from_api(d) for d in as_list(self._api.get("/v1/employee-shifts"))]

    def assign(self, *, employee_id: int, shift_id: int) -> None:
        self._api.post(
            "/v1/employee-shifts/assign",
            json={"employeeId": int(employee_id), "shiftId": int(shift_id)},
        )

    def update(self, *, assignment_id: int, employee_id: int, shift_id: int) -> None:
        self._api.put(
            "/v1/employee-shifts/update",
            json={"id": int(assignment_id), "employeeId": int(employee_id), "shiftId": int(shift_id)},
        )

    def delete(self, assignment_id: int) -> None:
        self._api.delete(f"/v1/employee-shifts/{int(assignment_id)}")

    def count_for_manager(self) -> int:
        data = self._api.get("/v1/employee-shifts/manager/count")
        try:
            return int(data or 0)
        except (TypeError, ValueError):
            return 0
