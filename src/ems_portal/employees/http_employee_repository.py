from __future__ import annotations

from typing import Optional, Sequence

from ..api.client import ApiClient, as_list
from ..core.exceptions import ApiError
from .model import Employee


class HttpEmployeeRepository:
    def __init__(self, api: ApiClient):
        self._api = api

    def list_all(self) -> Sequence[Employee]:
        return [Employee.from_api(d) for d in as_list(self._api.get("/api/v1/employees"))]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        try:
            data = self._api.get(f"/api/v1/employees/{int(employee_id)}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return Employee.from_api(data) if data else None

    def create(self, payload: dict) -> Employee:
        return Employee.from_api(self._api.post("/api/v1/employees", json=payload))

    def update(self, employee_id: int, payload: dict) -> Employee:
        return Employee.from_api(self._api.put(f"/api/v1/employees/{int(employee_id)}", json=payload))

    def delete(self, employee_id: int) -> None:
        self._api.delete(f"/api/v1/employees/{int(employee_id)}")

    def toggle_active(self, employee_id: int) -> None:
        self._api.put(f"/api/v1/employees/toggle-active/{int(employee_id)}")

    def list_roles(self) -> Sequence[str]:
        return [str(r) for r in as_list(self._api.get("/api/v1/roles"))]

    def get_me(self) -> Optional[Employee]:
        data = self._api.get("/api/v1/employees/me")
        return Employee.from_api(data) if data else None

    def list_manager_team(self) -> Sequence[Employee]:
        return [Employee.from_api(d) for d in as_list(self._api.get("/api/v1/employees/manager/team"))]

    def get_username(self, employee_id: int) -> str:
        data = self._api.get(f"/api/v1/users/employee/{int(employee_id)}") or {}
        return str(data.get("username") or "") if isinstance(data, dict) else ""
