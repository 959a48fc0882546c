from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeeShift, Shift


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def create(self, payload: dict) -> None:
        raise NotImplementedError

    def update(self, shift_id: int, payload: dict) -> None:
        raise NotImplementedError

    def delete(self, shift_id: int) -> None:
        raise NotImplementedError

    def get_mine(self) -> Optional[Shift]:
        raise NotImplementedError


class EmployeeShiftRepository(Protocol):
    def list_all(self) -> Sequence[EmployeeShift]:
        raise NotImplementedError

    def assign(self, *, employee_id: int, shift_id: int) -> None:
        raise NotImplementedError

    def update(self, *, assignment_id: int, employee_id: int, shift_id: int) -> None:
        raise NotImplementedError

    def delete(self, assignment_id: int) -> None:
        raise NotImplementedError

    def count_for_manager(self) -> int:
        raise NotImplementedError
