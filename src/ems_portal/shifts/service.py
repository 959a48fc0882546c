from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import parse_time_of_day
from ..common.validators import FieldErrors
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import EmployeeShift, Shift
from .repository import EmployeeShiftRepository, ShiftRepository


class ShiftService:
    def __init__(self, shifts: ShiftRepository, employee_shifts: EmployeeShiftRepository, employees: EmployeeRepository):
        self._shifts = shifts
        self._employee_shifts = employee_shifts
        self._employees = employees

    def list_shifts(self) -> list[Shift]:
        return sorted(self._shifts.list_all(), key=lambda s: s.shift_name.lower())

    def get_shift(self, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise ValidationError("Shift not found")
        return shift

    def list_managers(self) -> list[Employee]:
        managers = [e for e in self._employees.list_all() if e.role == Role.MANAGER]
        return sorted(managers, key=lambda e: e.full_name.lower())

    @staticmethod
    def build_payload(*, shift_name: str, starts_at: str, ends_at: str, manager_id: str = "") -> dict:
        """Check the shift form. Overnight shifts (end before start) are allowed."""
        errors = FieldErrors()
        name = (shift_name or "").strip()
        start = parse_time_of_day(starts_at)
        end = parse_time_of_day(ends_at)

        errors.check(bool(name), "shiftName", "Shift name is required")
        errors.check(start is not None, "startsAt", "Start time is required (HH:MM)")
        errors.check(end is not None, "endsAt", "End time is required (HH:MM)")
        if start and end:
            errors.check(start != end, "endsAt", "End time must differ from start time")
        manager = (manager_id or "").strip()
        errors.check(not manager or manager.isdigit(), "managerId", "Invalid manager")
        errors.raise_if_any()

        return {
            "shiftName": name,
            "startsAt": start.strftime("%H:%M:%S"),
            "endsAt": end.strftime("%H:%M:%S"),
            "managerId": int(manager) if manager else None,
        }

    def create_shift(self, **fields) -> None:
        self._shifts.create(self.build_payload(**fields))

    def update_shift(self, shift_id: int, **fields) -> None:
        self._shifts.update(int(shift_id), self.build_payload(**fields))

    def delete_shift(self, shift_id: int) -> None:
        self._shifts.delete(int(shift_id))

    def list_assignments(self, *, shift_id: Optional[int] = None) -> list[EmployeeShift]:
        rows = self._employee_shifts.list_all()
        if shift_id:
            rows = [r for r in rows if r.shift_id == int(shift_id)]
        return sorted(rows, key=lambda r: (r.shift_name.lower(), r.employee_name.lower()))

    def get_assignment(self, assignment_id: int) -> EmployeeShift:
        for row in self._employee_shifts.list_all():
            if row.id == int(assignment_id):
                return row
        raise ValidationError("Assignment not found")

    def assignable_employees(self) -> list[Employee]:
        """Active EMPLOYEE-role staff without a shift yet."""
        assigned = {r.employee_id for r in self._employee_shifts.list_all()}
        rows = [
            e for e in self._employees.list_all()
            if e.role == Role.EMPLOYEE and e.active and e.id not in assigned
        ]
        return sorted(rows, key=lambda e: e.full_name.lower())

    @staticmethod
    def _require_ids(employee_id, shift_id) -> tuple[int, int]:
        errors = FieldErrors()
        errors.check(str(employee_id or "").isdigit(), "employeeId", "Please select an employee")
        errors.check(str(shift_id or "").isdigit(), "shiftId", "Please select a shift")
        errors.raise_if_any()
        return int(employee_id), int(shift_id)

    def assign(self, *, employee_id, shift_id) -> None:
        emp_id, sh_id = self._require_ids(employee_id, shift_id)
        self._employee_shifts.assign(employee_id=emp_id, shift_id=sh_id)

    def update_assignment(self, assignment_id: int, *, shift_id) -> None:
        current = self.get_assignment(assignment_id)
        emp_id, sh_id = self._require_ids(current.employee_id, shift_id)
        if sh_id == current.shift_id:
            return
        self._employee_shifts.update(assignment_id=current.id, employee_id=emp_id, shift_id=sh_id)

    def delete_assignment(self, assignment_id: int) -> None:
        self._employee_shifts.delete(int(assignment_id))

