from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import Leave, LeaveApplication


class LeaveRepository(Protocol):
    def apply(self, application: LeaveApplication, proof: Optional[tuple[str, Any, str]] = None) -> None:
        raise NotImplementedError

    def approve(self, leave_id: int) -> None:
        raise NotImplementedError

    def reject(self, leave_id: int) -> None:
        raise NotImplementedError

    def set_pending(self, leave_id: int) -> None:
        raise NotImplementedError

    def delete(self, leave_id: int) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[Leave]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: int) -> Sequence[Leave]:
        raise NotImplementedError

    def list_by_status(self, status: str) -> Sequence[Leave]:
        raise NotImplementedError

    def list_manager_team(self) -> Sequence[Leave]:
        raise NotImplementedError

    def list_types(self) -> Sequence[str]:
        raise NotImplementedError
