from __future__ import annotations

import logging

from flask import Flask, abort, flash, redirect, render_template, request, url_for

from ..auth.gate import roles_required
from ..common.datetime_utils import format_date_dmy
from ..common.flashing import flash_failure
from ..common.listing import Action, FilterSpec, render_listing
from ..common.table import Column, unique_values
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, PartialUpdateError, ValidationError
from .model import Employee

logger = logging.getLogger(__name__)

ADMIN_COLUMNS = [
    Column("sno", "S.No"),
    Column("fullName", "Full Name"),
    Column("email", "Email"),
    Column("phone", "Phone"),
    Column("department", "Department"),
    Column("designation", "Designation"),
    Column("role", "Role"),
    Column("status", "Status"),
    Column("actions", "Actions", exportable=False),
]

TEAM_COLUMNS = [
    Column("sno", "S.No"),
    Column("fullName", "Full Name"),
    Column("email", "Email"),
    Column("designation", "Designation"),
    Column("department", "Department"),
    Column("assignedShift", "Shift"),
    Column("status", "Status"),
    Column("actions", "Actions", exportable=False),
]


def _row(e: Employee) -> dict:
    return {
        "id": e.id,
        "fullName": e.full_name,
        "email": e.email,
        "phone": e.phone,
        "department": e.department,
        "designation": e.designation,
        "role": e.role.value if e.role else "",
        "status": e.status_label,
        "assignedShift": e.assigned_shift,
        "joiningDate": format_date_dmy(e.joining_date),
        "_badges": {"status": "success" if e.active else "secondary"},
    }


def _form_values(e: Employee) -> dict:
    return {
        "fullName": e.full_name,
        "email": e.email,
        "phone": e.phone,
        "gender": e.gender,
        "department": e.department,
        "designation": e.designation,
        "role": e.role.value if e.role else "",
        "joiningDate": e.joining_date.isoformat() if e.joining_date else "",
        "active": e.active,
        "username": e.username,
        "shiftId": "",
    }


def _filters(rows: list[dict], *, with_role: bool) -> list[FilterSpec]:
    filters = [FilterSpec.from_values("department", "Department", unique_values(rows, "department"))]
    if with_role:
        filters.append(FilterSpec.from_values("role", "Role", unique_values(rows, "role")))
    filters.append(FilterSpec.from_values("status", "Status", ["Active", "Inactive"]))
    return filters


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service
    shifts = container.shift_service

    @app.route("/admin/employees", endpoint="admin_employees")
    @roles_required(Role.ADMIN)
    def admin_employees():
        rows = []
        for e in employees.list_all():
            row = _row(e)
            actions = [
                Action("View", url_for("admin_employee_detail", employee_id=e.id), variant="outline-info"),
                Action("Edit", url_for("edit_employee", employee_id=e.id)),
            ]
            if e.role != Role.ADMIN:
                actions += [
                    Action("Deactivate" if e.active else "Activate",
                           url_for("toggle_employee", employee_id=e.id), method="post", variant="outline-warning"),
                    Action("Delete", url_for("delete_employee", employee_id=e.id), method="post",
                           variant="outline-danger", confirm="Are you sure you want to delete this employee?"),
                ]
            row["_actions"] = actions
            rows.append(row)

        return render_listing(
            "listing.html",
            title="All Employees",
            rows=rows,
            columns=ADMIN_COLUMNS,
            search_fields=["fullName", "email", "role", "designation"],
            filters=_filters(rows, with_role=True),
            sheet_name="Employees",
            export_name="Employees_List",
            header_action=Action("Add Employee", url_for("add_employee"), variant="primary"),
            active_page="admin_employees",
        )

    @app.route("/admin/employees/<int:employee_id>", endpoint="admin_employee_detail")
    @roles_required(Role.ADMIN)
    def admin_employee_detail(employee_id: int):
        try:
            emp = employees.get(employee_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_employees"))
        return render_template("employees/detail.html", employee=emp, back_url=url_for("admin_employees"))

    @app.route("/admin/employees/add", methods=["GET", "POST"], endpoint="add_employee")
    @roles_required(Role.ADMIN)
    def add_employee():
        form = {"active": True}
        field_errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form.to_dict()
            try:
                employees.create(request.form)
                flash("Employee added successfully!", "success")
                return redirect(url_for("admin_employees"))
            except ValidationError as e:
                field_errors = e.field_errors
                flash(str(e), "danger")
            except DomainError as e:
                flash_failure(e)
            except Exception:
                logger.exception("Failed to create employee")
                flash("Failed to create employee", "danger")

        return render_template(
            "employees/form.html",
            title="Add Employee",
            form=form,
            field_errors=field_errors,
            roles=employees.roles(),
            shifts=[],
            is_new=True,
            active_page="add_employee",
        )

    @app.route("/admin/employees/edit/<int:employee_id>", methods=["GET", "POST"], endpoint="edit_employee")
    @roles_required(Role.ADMIN)
    def edit_employee(employee_id: int):
        field_errors: dict[str, str] = {}
        try:
            emp = employees.get_for_edit(employee_id)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin_employees"))

        link = employees.current_assignment(emp)
        form = _form_values(emp)
        form["shiftId"] = str(link.shift_id) if link and link.shift_id else ""

        if request.method == "POST":
            form = request.form.to_dict()
            shift_id = (request.form.get("shiftId") or "").strip()
            try:
                employees.update(employee_id, request.form, shift_id=int(shift_id) if shift_id.isdigit() else None)
                flash("Employee updated successfully!", "success")
                return redirect(url_for("admin_employees"))
            except ValidationError as e:
                field_errors = e.field_errors
                flash(str(e), "danger")
            except PartialUpdateError as e:
                flash_failure(e)
                return redirect(url_for("admin_employees"))
            except DomainError as e:
                flash_failure(e)
            except Exception:
                logger.exception("Failed to update employee %s", employee_id)
                flash("Failed to update employee", "danger")

        return render_template(
            "employees/form.html",
            title="Edit Employee",
            form=form,
            field_errors=field_errors,
            roles=employees.roles(),
            shifts=shifts.list_shifts(),
            is_new=False,
            employee=emp,
            active_page="admin_employees",
        )

    @app.route("/admin/employees/toggle/<int:employee_id>", methods=["POST"], endpoint="toggle_employee")
    @roles_required(Role.ADMIN)
    def toggle_employee(employee_id: int):
        try:
            employees.toggle_active(employee_id)
            flash("Employee status updated.", "success")
        except DomainError as e:
            flash_failure(e)
        return redirect(url_for("admin_employees"))

    @app.route("/admin/employees/delete/<int:employee_id>", methods=["POST"], endpoint="delete_employee")
    @roles_required(Role.ADMIN)
    def delete_employee(employee_id: int):
        try:
            employees.delete(employee_id)
            flash("Employee deleted.", "success")
        except DomainError as e:
            flash_failure(e)
        except Exception:
            logger.exception("Failed to delete employee %s", employee_id)
            flash("Failed to delete employee", "danger")
        return redirect(url_for("admin_employees"))

    @app.route("/manager/team", endpoint="manager_team")
    @roles_required(Role.MANAGER)
    def manager_team():
        rows = []
        for e in employees.team():
            row = _row(e)
            row["_actions"] = [Action("View", url_for("manager_team_member", employee_id=e.id), variant="outline-info")]
            rows.append(row)
        return render_listing(
            "listing.html",
            title="My Team",
            rows=rows,
            columns=TEAM_COLUMNS,
            search_fields=["fullName", "email", "designation", "department"],
            filters=_filters(rows, with_role=False),
            default_columns=["sno", "fullName", "email", "designation", "department", "status", "actions"],
            sheet_name="Team",
            export_name="My_Team",
            active_page="manager_team",
        )

    @app.route("/manager/team/<int:employee_id>", endpoint="manager_team_member")
    @roles_required(Role.MANAGER)
    def manager_team_member(employee_id: int):
        emp = next((e for e in employees.team() if e.id == employee_id), None)
        if emp is None:
            abort(404)
        return render_template("employees/detail.html", employee=emp, back_url=url_for("manager_team"))

    @app.route("/employee/profile", endpoint="employee_profile")
    @roles_required(Role.EMPLOYEE)
    def employee_profile():
        return render_template("employees/profile.html", employee=employees.profile(), active_page="employee_profile")
