from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..auth.gate import roles_required
from ..common.datetime_utils import format_shift_time
from ..common.flashing import flash_failure
from ..common.listing import Action, FilterSpec, render_listing
from ..common.table import Column, unique_values
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from .model import Shift

logger = logging.getLogger(__name__)

SHIFT_COLUMNS = [
    Column("sno", "S.No"),
    Column("shiftName", "Shift Name"),
    Column("startsAt", "Start Time"),
    Column("endsAt", "End Time"),
    Column("managerName", "Managed By"),
    Column("actions", "Actions", exportable=False),
]

ASSIGNMENT_COLUMNS = [
    Column("sno", "#"),
    Column("employeeName", "Employee"),
    Column("shiftName", "Shift"),
    Column("time", "Time"),
    Column("actions", "Actions", exportable=False),
]


def _time_value(t) -> str:
    return t.strftime("%H:%M") if t else ""


def _shift_form(s: Shift) -> dict:
    return {
        "shiftName": s.shift_name,
        "startsAt": _time_value(s.starts_at),
        "endsAt": _time_value(s.ends_at),
        "managerId": str(s.manager_id or ""),
    }


def register(app: Flask, container: Container) -> None:
    shifts = container.shift_service

    @app.route("/admin/shifts", endpoint="admin_shifts")
    @roles_required(Role.ADMIN)
    def admin_shifts():
        rows = []
        for s in shifts.list_shifts():
            rows.append({
                "id": s.id,
                "shiftName": s.shift_name,
                "startsAt": format_shift_time(s.starts_at),
                "endsAt": format_shift_time(s.ends_at),
                "managerName": s.manager_name,
                "_actions": [
                    Action("Employees", url_for("admin_employee_shifts", shift_id=s.id), variant="outline-info"),
                    Action("Edit", url_for("edit_shift", shift_id=s.id)),
                    Action("Delete", url_for("delete_shift", shift_id=s.id), method="post",
                           variant="outline-danger", confirm="Delete this shift?"),
                ],
            })
        return render_listing(
            "listing.html",
            title="Shifts",
            rows=rows,
            columns=SHIFT_COLUMNS,
            search_fields=["shiftName", "managerName", "startsAt", "endsAt"],
            filters=[FilterSpec.from_values("managerName", "Manager", unique_values(rows, "managerName"))],
            sort_key=lambda r: (r["shiftName"] or "").lower(),
            sheet_name="Shifts",
            export_name="Shifts_List",
            header_action=Action("Add Shift", url_for("add_shift"), variant="primary"),
            active_page="admin_shifts",
        )

    def shift_form_view(*, title: str, shift_id=None):
        form = _shift_form(shifts.get_shift(shift_id)) if shift_id else {}
        field_errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form.to_dict()
            fields = {
                "shift_name": request.form.get("shiftName", ""),
                "starts_at": request.form.get("startsAt", ""),
                "ends_at": request.form.get("endsAt", ""),
                "manager_id": request.form.get("managerId", ""),
            }
            try:
                if shift_id:
                    shifts.update_shift(shift_id, **fields)
                    flash("Shift updated.", "success")
                else:
                    shifts.create_shift(**fields)
                    flash("Shift added.", "success")
                return redirect(url_for("admin_shifts"))
            except ValidationError as e:
                field_errors = e.field_errors
                flash(str(e), "danger")
            except DomainError as e:
                flash_failure(e)
            except Exception:
                logger.exception("Failed to save shift")
                flash("Error saving shift", "danger")

        return render_template(
            "shifts/form.html",
            title=title,
            form=form,
            field_errors=field_errors,
            managers=shifts.list_managers(),
            active_page="admin_shifts",
        )

    @app.route("/admin/shifts/add", methods=["GET", "POST"], endpoint="add_shift")
    @roles_required(Role.ADMIN)
    def add_shift():
        return shift_form_view(title="Add Shift")

    @app.route("/admin/shifts/edit/<int:shift_id>", methods=["GET", "POST"], endpoint="edit_shift")
    @roles_required(Role.ADMIN)
    def edit_shift(shift_id: int):
        try:
            return shift_form_view(title="Edit Shift", shift_id=shift_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_shifts"))

    @app.route("/admin/shifts/delete/<int:shift_id>", methods=["POST"], endpoint="delete_shift")
    @roles_required(Role.ADMIN)
    def delete_shift(shift_id: int):
        try:
            shifts.delete_shift(shift_id)
            flash("Shift deleted.", "success")
        except DomainError as e:
            flash_failure(e)
        return redirect(url_for("admin_shifts"))

    @app.route("/admin/employee-shifts", endpoint="admin_employee_shifts")
    @roles_required(Role.ADMIN)
    def admin_employee_shifts():
        shift_id = request.args.get("shift_id", type=int)
        rows = []
        for a in shifts.list_assignments(shift_id=shift_id):
            rows.append({
                "id": a.id,
                "employeeName": a.employee_name,
                "shiftName": a.shift_name,
                "time": f"{format_shift_time(a.starts_at)} - {format_shift_time(a.ends_at)}",
                "_actions": [
                    Action("Edit", url_for("edit_employee_shift", assignment_id=a.id)),
                    Action("Delete", url_for("delete_employee_shift", assignment_id=a.id), method="post",
                           variant="outline-danger", confirm="Remove this assignment?"),
                ],
            })
        return render_listing(
            "listing.html",
            title="Employee Shifts",
            rows=rows,
            columns=ASSIGNMENT_COLUMNS,
            search_fields=["employeeName", "shiftName"],
            filters=[FilterSpec.from_values("shiftName", "Shift", unique_values(rows, "shiftName"))],
            sheet_name="EmployeeShifts",
            export_name="Employee_Shifts",
            header_action=Action("Assign Shift", url_for("assign_employee_shift", shift_id=shift_id), variant="primary"),
            active_page="admin_employee_shifts",
        )

    @app.route("/admin/employee-shifts/assign", methods=["GET", "POST"], endpoint="assign_employee_shift")
    @roles_required(Role.ADMIN)
    def assign_employee_shift():
        form = {"shiftId": request.args.get("shift_id", "")}
        field_errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form.to_dict()
            try:
                shifts.assign(employee_id=request.form.get("employeeId"), shift_id=request.form.get("shiftId"))
                flash("Shift assigned.", "success")
                return redirect(url_for("admin_employee_shifts"))
            except ValidationError as e:
                field_errors = e.field_errors
                flash(str(e), "danger")
            except DomainError as e:
                flash_failure(e)

        return render_template(
            "shifts/assign.html",
            title="Assign Shift",
            form=form,
            field_errors=field_errors,
            employees=shifts.assignable_employees(),
            shifts=shifts.list_shifts(),
            assignment=None,
            active_page="admin_employee_shifts",
        )

    @app.route("/admin/employee-shifts/edit/<int:assignment_id>", methods=["GET", "POST"], endpoint="edit_employee_shift")
    @roles_required(Role.ADMIN)
    def edit_employee_shift(assignment_id: int):
        try:
            assignment = shifts.get_assignment(assignment_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_employee_shifts"))

        form = {"shiftId": str(assignment.shift_id or "")}
        field_errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form.to_dict()
            try:
                shifts.update_assignment(assignment_id, shift_id=request.form.get("shiftId"))
                flash("Assignment updated.", "success")
                return redirect(url_for("admin_employee_shifts"))
            except ValidationError as e:
                field_errors = e.field_errors
                flash(str(e), "danger")
            except DomainError as e:
                flash_failure(e)

        return render_template(
            "shifts/assign.html",
            title="Edit Assignment",
            form=form,
            field_errors=field_errors,
            employees=[],
            shifts=shifts.list_shifts(),
            assignment=assignment,
            active_page="admin_employee_shifts",
        )

    @app.route("/admin/employee-shifts/delete/<int:assignment_id>", methods=["POST"], endpoint="delete_employee_shift")
    @roles_required(Role.ADMIN)
    def delete_employee_shift(assignment_id: int):
        try:
            shifts.delete_assignment(assignment_id)
            flash("Assignment removed.", "success")
        except DomainError as e:
            flash_failure(e)
        return redirect(url_for("admin_employee_shifts"))
