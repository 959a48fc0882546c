from __future__ import annotations

from datetime import time

import pytest

from ems_portal.core.enums import Role
from ems_portal.core.exceptions import ValidationError
from ems_portal.employees.model import Employee
from ems_portal.shifts.model import EmployeeShift, Shift
from ems_portal.shifts.service import ShiftService


class InMemoryShifts:
    def __init__(self, shifts):
        self.shifts = {s.id: s for s in shifts}
        self.log: list[tuple] = []

    def list_all(self):
        return list(self.shifts.values())

    def get_by_id(self, shift_id: int):
        return self.shifts.get(shift_id)

    def create(self, payload: dict) -> None:
        self.log.append(("create", payload))

    def update(self, shift_id: int, payload: dict) -> None:
        self.log.append(("update", shift_id, payload))

    def delete(self, shift_id: int) -> None:
        self.log.append(("delete", shift_id))

    def get_mine(self):
        return None


class InMemoryEmployeeShifts:
    def __init__(self, rows):
        self.rows = list(rows)
        self.log: list[tuple] = []

    def list_all(self):
        return list(self.rows)

    def assign(self, *, employee_id: int, shift_id: int) -> None:
        self.log.append(("assign", employee_id, shift_id))

    def update(self, *, assignment_id: int, employee_id: int, shift_id: int) -> None:
        self.log.append(("update", assignment_id, employee_id, shift_id))

    def delete(self, assignment_id: int) -> None:
        self.log.append(("delete", assignment_id))

    def count_for_manager(self) -> int:
        return len(self.rows)


class InMemoryEmployees:
    def __init__(self, employees):
        self.employees = list(employees)

    def list_all(self):
        return list(self.employees)


def _service():
    shifts = InMemoryShifts([
        Shift(1, "Night", time(22, 0), time(6, 0)),
        Shift(2, "morning", time(9, 0), time(17, 0)),
    ])
    links = InMemoryEmployeeShifts([EmployeeShift(10, 1, "Ali", 2, "morning")])
    employees = InMemoryEmployees([
        Employee(1, "Ali", role=Role.EMPLOYEE),
        Employee(2, "Bina", role=Role.EMPLOYEE),
        Employee(3, "Chand", role=Role.EMPLOYEE, active=False),
        Employee(4, "Dawood", role=Role.MANAGER),
    ])
    return ShiftService(shifts, links, employees), shifts, links


def test_build_payload_allows_overnight():
    payload = ShiftService.build_payload(shift_name=" Night ", starts_at="22:00", ends_at="06:00", manager_id="4")
    assert payload == {"shiftName": "Night", "startsAt": "22:00:00", "endsAt": "06:00:00", "managerId": 4}


def test_build_payload_rejects_equal_times_and_blanks():
    with pytest.raises(ValidationError) as exc:
        ShiftService.build_payload(shift_name="", starts_at="09:00", ends_at="09:00")
    assert set(exc.value.field_errors) == {"shiftName", "endsAt"}

    with pytest.raises(ValidationError) as exc:
        ShiftService.build_payload(shift_name="X", starts_at="", ends_at="nine", manager_id="abc")
    assert set(exc.value.field_errors) == {"startsAt", "endsAt", "managerId"}


def test_shift_is_overnight():
    service, _, _ = _service()
    assert service.get_shift(1).overnight is True
    assert service.get_shift(2).overnight is False
    assert service.get_shift(1).label == "Night (10:00 PM - 6:00 AM)"


def test_list_shifts_sorted_by_name_case_insensitive():
    service, _, _ = _service()
    assert [s.shift_name for s in service.list_shifts()] == ["morning", "Night"]


def test_unknown_shift():
    service, _, _ = _service()
    with pytest.raises(ValidationError):
        service.get_shift(99)


def test_assignable_employees_are_active_unassigned_employees():
    service, _, _ = _service()
    assert [e.full_name for e in service.assignable_employees()] == ["Bina"]
    assert [e.full_name for e in service.list_managers()] == ["Dawood"]


def test_assign_requires_both_ids():
    service, _, links = _service()
    with pytest.raises(ValidationError) as exc:
        service.assign(employee_id="", shift_id="1")
    assert set(exc.value.field_errors) == {"employeeId"}

    service.assign(employee_id="2", shift_id="1")
    assert links.log == [("assign", 2, 1)]


def test_update_assignment_moves_employee():
    service, _, links = _service()
    service.update_assignment(10, shift_id="2")
    assert links.log == []
    service.update_assignment(10, shift_id="1")
    assert links.log == [("update", 10, 1, 1)]


def test_list_assignments_filters_by_shift():
    service, _, _ = _service()
    assert [a.id for a in service.list_assignments(shift_id=2)] == [10]
    assert service.list_assignments(shift_id=1) == []
