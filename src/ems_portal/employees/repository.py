from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Employee endpoints of the backend.

    Services depend on this interface, not on the HTTP implementation.
    """

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, payload: dict) -> Employee:
        raise NotImplementedError

    def update(self, employee_id: int, payload: dict) -> Employee:
        raise NotImplementedError

    def delete(self, employee_id: int) -> None:
        raise NotImplementedError

    def toggle_active(self, employee_id: int) -> None:
        raise NotImplementedError

    def list_roles(self) -> Sequence[str]:
        raise NotImplementedError

    def get_me(self) -> Optional[Employee]:
        raise NotImplementedError

    def list_manager_team(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_username(self, employee_id: int) -> str:
        raise NotImplementedError
