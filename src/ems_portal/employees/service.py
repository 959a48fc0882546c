from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import parse_form_date
from ..common.validators import (
    FieldErrors,
    is_valid_full_name,
    is_valid_password,
    is_valid_phone,
    is_valid_username,
)
from ..core.enums import Role
from ..core.exceptions import ApiError, ConflictError, PartialUpdateError, SessionExpiredError, ValidationError
from ..shifts.model import EmployeeShift
from ..shifts.repository import EmployeeShiftRepository
from .model import Employee, EmployeeForm
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

STEP_SHIFT_REMOVED = "shift assignment removed"
STEP_EMPLOYEE_UPDATED = "employee updated"
STEP_SHIFT_ASSIGNED = "new shift assigned"


def _conflict_as_field_errors(e: ConflictError) -> Optional[ValidationError]:
    """Turn a duplicate-username/email conflict into per-field messages."""
    msg = (e.message or "").lower()
    errors = {}
    if "username" in msg:
        errors["username"] = "Username already exists"
    if "email" in msg:
        errors["email"] = "Email already exists"
    if not errors:
        return None
    return ValidationError(e.message, field_errors=errors)


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, employee_shifts: EmployeeShiftRepository):
        self._employees = employees
        self._employee_shifts = employee_shifts

    def list_all(self) -> list[Employee]:
        return sorted(self._employees.list_all(), key=lambda e: e.full_name.lower())

    def get(self, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise ValidationError("Employee not found")
        return emp

    def get_for_edit(self, employee_id: int) -> Employee:
        emp = self.get(employee_id)
        if emp.username:
            return emp
        try:
            username = self._employees.get_username(emp.id)
        except SessionExpiredError:
            raise
        except ApiError as e:
            logger.warning("Could not load username for employee %s: %s", emp.id, e)
            return emp
        return replace(emp, username=username)

    def roles(self) -> list[str]:
        roles = [r for r in self._employees.list_roles() if Role.parse(r)]
        return roles or [r.value for r in Role]

    def team(self) -> list[Employee]:
        return sorted(self._employees.list_manager_team(), key=lambda e: e.full_name.lower())

    def profile(self) -> Employee:
        emp = self._employees.get_me()
        if not emp:
            raise ValidationError("Profile not found")
        return emp

    @staticmethod
    def validate(form: Mapping, *, is_new: bool) -> EmployeeForm:
        """Check the add/edit form before anything is sent to the backend."""
        errors = FieldErrors()

        full_name = (form.get("fullName") or "").strip()
        email = (form.get("email") or "").strip()
        phone = (form.get("phone") or "").strip()
        username = (form.get("username") or "").strip()
        password = form.get("password") or ""
        role = Role.parse(form.get("role"))

        errors.check(bool(full_name), "fullName", "Full name is required")
        errors.check(not full_name or is_valid_full_name(full_name), "fullName",
                     "Full name can only contain letters and spaces")
        errors.check("@" in email, "email", "Please enter a valid email")
        if is_new or phone:
            errors.check(is_valid_phone(phone), "phone", "Phone must start with 03 and have 11 digits")
        errors.check(role is not None, "role", "Please select a role")
        errors.check(is_valid_username(username), "username", "Username can only contain letters and numbers")
        if is_new or password:
            errors.check(is_valid_password(password), "password", "Password must be at least 6 characters")

        joining: Optional[date] = None
        raw_joining = (form.get("joiningDate") or "").strip()
        if raw_joining:
            try:
                joining = parse_form_date(raw_joining)
            except ValueError:
                errors.check(False, "joiningDate", "Invalid joining date")

        errors.raise_if_any()

        return EmployeeForm(
            full_name=full_name,
            email=email,
            phone=phone,
            gender=(form.get("gender") or "").strip(),
            department=(form.get("department") or "").strip(),
            designation=(form.get("designation") or "").strip(),
            role=role,
            joining_date=joining,
            active=form.get("active") in ("on", "true", "True", "1", True),
            username=username,
            password=password,
        )

    def create(self, form: Mapping) -> Employee:
        data = self.validate(form, is_new=True)
        try:
            return self._employees.create(data.to_api())
        except ConflictError as e:
            field_error = _conflict_as_field_errors(e)
            if field_error:
                raise field_error from e
            raise

    def current_assignment(self, employee: Employee) -> Optional[EmployeeShift]:
        for row in self._employee_shifts.list_all():
            if (employee.employee_shift_id and row.id == employee.employee_shift_id) or row.employee_id == employee.id:
                return row
        return None

    def update(self, employee_id: int, form: Mapping, *, shift_id: Optional[int] = None) -> list[str]:
        """Update an employee and keep their shift link consistent with the role.

        Steps run in order with no rollback: drop the shift link when the role
        moves away from EMPLOYEE, update the employee, then (for EMPLOYEE) move
        them to ``shift_id`` if it changed. A failure after a completed step
        raises ``PartialUpdateError``.
        """
        data = self.validate(form, is_new=False)
        existing = self.get(employee_id)
        link = self.current_assignment(existing)
        done: list[str] = []

        try:
            if link and existing.role == Role.EMPLOYEE and data.role != Role.EMPLOYEE:
                self._employee_shifts.delete(link.id)
                done.append(STEP_SHIFT_REMOVED)
                link = None

            try:
                self._employees.update(existing.id, data.to_api())
            except ConflictError as e:
                field_error = _conflict_as_field_errors(e)
                if field_error and not done:
                    raise field_error from e
                raise
            done.append(STEP_EMPLOYEE_UPDATED)

            if data.role == Role.EMPLOYEE and shift_id and (not link or link.shift_id != int(shift_id)):
                if link:
                    self._employee_shifts.delete(link.id)
                    done.append(STEP_SHIFT_REMOVED)
                self._employee_shifts.assign(employee_id=existing.id, shift_id=int(shift_id))
                done.append(STEP_SHIFT_ASSIGNED)
        except SessionExpiredError:
            raise
        except (ApiError, ValidationError) as e:
            if not done:
                raise
            logger.warning("Employee %s update partially applied (%s): %s", existing.id, ", ".join(done), e)
            raise PartialUpdateError(
                f"Update partially applied ({', '.join(done)}): {e}",
                completed_steps=done,
                cause=e,
            ) from e

        return done

    def toggle_active(self, employee_id: int) -> None:
        self._employees.toggle_active(int(employee_id))

    def delete(self, employee_id: int) -> None:
        emp = self.get(employee_id)
        if emp.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")
        self._employees.delete(emp.id)
