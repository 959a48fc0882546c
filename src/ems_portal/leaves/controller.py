from __future__ import annotations

import logging

from flask import Flask, current_app, flash, redirect, render_template, request, url_for

from ..auth.gate import current_gate, roles_required
from ..common.datetime_utils import format_date_dmy, zone
from ..common.flashing import flash_failure
from ..common.listing import Action, FilterSpec, render_listing
from ..common.table import Column, unique_values
from ..container import Container
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import DomainError, ValidationError
from .model import Leave

logger = logging.getLogger(__name__)

LEAVE_COLUMNS = [
    Column("sno", "S.No"),
    Column("employeeName", "Employee"),
    Column("leaveType", "Type"),
    Column("startDate", "Start Date"),
    Column("endDate", "End Date"),
    Column("duration", "Days"),
    Column("description", "Description"),
    Column("appliedOn", "Applied On"),
    Column("prescriptionImg", "Prescription", exportable=False),
    Column("status", "Status"),
    Column("actions", "Actions", exportable=False),
]

_STATUS_BADGES = {"APPROVED": "success", "REJECTED": "danger", "PENDING": "warning"}

_LEAVE_ADMINS = (Role.ADMIN, Role.HR, Role.MANAGER)


def register(app: Flask, container: Container) -> None:
    leaves = container.leave_service

    def row(lv: Leave) -> dict:
        applied = lv.applied_on.astimezone(zone(current_app.config["DISPLAY_TIMEZONE"])) if lv.applied_on else None
        return {
            "id": lv.id,
            "employeeName": lv.employee_name or "--",
            "leaveType": lv.type_label,
            "startDate": format_date_dmy(lv.start_date),
            "endDate": format_date_dmy(lv.end_date),
            "duration": lv.duration,
            "description": lv.description or "--",
            "appliedOn": applied.strftime("%d-%m-%Y %H:%M:%S") if applied else "--",
            "prescriptionImg": lv.prescription_img,
            "status": lv.status,
            "startRaw": lv.start_date.isoformat() if lv.start_date else "",
            "_badges": {"status": _STATUS_BADGES.get(lv.status, "secondary")},
            "_links": {"prescriptionImg": lv.prescription_img} if lv.prescription_img else {},
        }

    def status_actions(lv: Leave, targets, back: str) -> list[Action]:
        labels = {LeaveStatus.APPROVED: ("Approve", "outline-success"),
                  LeaveStatus.REJECTED: ("Reject", "outline-danger"),
                  LeaveStatus.PENDING: ("Mark Pending", "outline-warning")}
        out = []
        for target in targets:
            if lv.status == target.value:
                continue
            label, variant = labels[target]
            out.append(Action(label, url_for("set_leave_status", leave_id=lv.id, status=target.value, next=back),
                              method="post", variant=variant))
        return out

    def all_leaves_view(endpoint: str, title: str):
        rows = []
        for lv in leaves.all_leaves():
            r = row(lv)
            r["_actions"] = status_actions(lv, (LeaveStatus.APPROVED, LeaveStatus.REJECTED), url_for(endpoint))
            rows.append(r)
        return render_listing(
            "listing.html",
            title=title,
            rows=rows,
            columns=LEAVE_COLUMNS,
            search_fields=["employeeName", "leaveType", "description", "status"],
            filters=[FilterSpec.from_values("status", "Status", [s.value for s in LeaveStatus])],
            month_field="startRaw",
            sheet_name="Leaves",
            export_name="All_Leaves",
            active_page=endpoint,
        )

    @app.route("/admin/leaves", endpoint="admin_leaves")
    @roles_required(Role.ADMIN)
    def admin_leaves():
        return all_leaves_view("admin_leaves", "All Leaves")

    @app.route("/hr/leaves", endpoint="hr_leaves")
    @roles_required(Role.HR)
    def hr_leaves():
        return all_leaves_view("hr_leaves", "Leave Requests")

    @app.route("/manager/leaves", endpoint="manager_leaves")
    @roles_required(Role.MANAGER)
    def manager_leaves():
        rows = []
        for lv in leaves.team_leaves():
            r = row(lv)
            r["_actions"] = status_actions(lv, tuple(LeaveStatus), url_for("manager_leaves"))
            rows.append(r)
        return render_listing(
            "listing.html",
            title="Team Leave Requests",
            rows=rows,
            columns=LEAVE_COLUMNS,
            search_fields=["employeeName", "leaveType", "description"],
            filters=[
                FilterSpec.from_values("employeeName", "Employee", unique_values(rows, "employeeName")),
                FilterSpec.from_values("status", "Status", [s.value for s in LeaveStatus]),
            ],
            month_field="startRaw",
            sheet_name="TeamLeaves",
            export_name="Team_Leaves",
            active_page="manager_leaves",
        )

    @app.route("/leaves/<int:leave_id>/status", methods=["POST"], endpoint="set_leave_status")
    @roles_required(*_LEAVE_ADMINS)
    def set_leave_status(leave_id: int):
        back = request.args.get("next") or ""
        if not back.startswith("/") or back.startswith("//"):
            back = current_gate().landing_route
        try:
            status = leaves.set_status(leave_id, request.args.get("status") or request.form.get("status", ""))
            flash(f"Leave marked {status.value.lower()}.", "success")
        except DomainError as e:
            flash_failure(e)
        except Exception:
            logger.exception("Failed to update leave %s", leave_id)
            flash("Failed to update leave status", "danger")
        return redirect(back)

    @app.route("/employee/leaves", endpoint="employee_leaves")
    @roles_required(Role.EMPLOYEE)
    def employee_leaves():
        me = container.auth_service.current_user()
        rows = []
        for lv in leaves.my_leaves(me.employee_id):
            r = row(lv)
            if lv.is_pending:
                r["_actions"] = [Action("Delete", url_for("delete_leave", leave_id=lv.id), method="post",
                                        variant="outline-danger",
                                        confirm="Are you sure you want to delete this pending leave?")]
            rows.append(r)
        return render_listing(
            "listing.html",
            title="Leave History",
            rows=rows,
            columns=[c for c in LEAVE_COLUMNS if c.key != "employeeName"],
            search_fields=["leaveType", "status", "description", "startDate", "endDate"],
            filters=[FilterSpec.from_values("status", "Status", [s.value for s in LeaveStatus])],
            month_field="startRaw",
            sheet_name="Leaves",
            export_name="My_Leaves",
            header_action=Action("Apply Leave", url_for("apply_leave"), variant="primary"),
            active_page="employee_leaves",
        )

    @app.route("/employee/leaves/delete/<int:leave_id>", methods=["POST"], endpoint="delete_leave")
    @roles_required(Role.EMPLOYEE)
    def delete_leave(leave_id: int):
        try:
            me = container.auth_service.current_user()
            leaves.delete_pending(employee_id=me.employee_id, leave_id=leave_id)
            flash("Leave deleted.", "success")
        except DomainError as e:
            flash_failure(e)
        except Exception:
            logger.exception("Failed to delete leave %s", leave_id)
            flash("Failed to delete leave.", "danger")
        return redirect(url_for("employee_leaves"))

    @app.route("/employee/leaves/apply", methods=["GET", "POST"], endpoint="apply_leave")
    @roles_required(Role.EMPLOYEE)
    def apply_leave():
        form: dict = {}
        field_errors: dict[str, str] = {}
        if request.method == "POST":
            form = request.form.to_dict()
            try:
                me = container.auth_service.current_user()
                leaves.apply(
                    employee_id=me.employee_id,
                    leave_type=request.form.get("leaveType", ""),
                    start_date=request.form.get("startDate", ""),
                    end_date=request.form.get("endDate", ""),
                    description=request.form.get("description", ""),
                    proof=request.files.get("prescription"),
                )
                flash("Leave applied successfully!", "success")
                return redirect(url_for("employee_leaves"))
            except ValidationError as e:
                field_errors = e.field_errors
                flash(str(e), "danger")
            except DomainError as e:
                flash_failure(e)
            except Exception:
                logger.exception("Failed to apply leave")
                flash("Failed to apply leave", "danger")

        return render_template(
            "leaves/apply.html",
            form=form,
            field_errors=field_errors,
            leave_types=leaves.leave_types(),
            active_page="apply_leave",
        )
