from __future__ import annotations

import logging

from flask import Flask, current_app, flash, jsonify, redirect, request, url_for

from ..auth.gate import current_gate, roles_required
from ..common.datetime_utils import format_date_label, format_time_ampm, zone
from ..common.flashing import flash_failure
from ..common.listing import Action, FilterSpec, render_listing
from ..common.table import Column, unique_values
from ..container import Container
from ..core.enums import Role, WorkSessionStatus
from ..core.exceptions import DomainError
from .calculator import derive_status, format_seconds
from .model import WorkSession

logger = logging.getLogger(__name__)

SESSION_COLUMNS = [
    Column("sno", "S.No"),
    Column("employeeName", "Employee"),
    Column("date", "Date"),
    Column("clockIn", "Clock In"),
    Column("clockOut", "Clock Out"),
    Column("totalHours", "Total Hours"),
    Column("workingHours", "Working Hours"),
    Column("breakHours", "Break Hours"),
    Column("status", "Status"),
]

_STATUS_BADGES = {
    WorkSessionStatus.WORKING.value: "success",
    WorkSessionStatus.ON_BREAK.value: "warning",
    WorkSessionStatus.COMPLETED.value: "secondary",
    WorkSessionStatus.AUTO_CLOCKED_OUT.value: "info",
    WorkSessionStatus.INVALID_CLOCKED_OUT.value: "danger",
    WorkSessionStatus.EARLY_CLOCKED_OUT.value: "danger",
}


def _safe_next(default: str) -> str:
    target = request.form.get("next") or ""
    return target if target.startswith("/") and not target.startswith("//") else default


def register(app: Flask, container: Container) -> None:
    service = container.work_session_service

    def session_row(s: WorkSession, *, stored_totals: bool) -> dict:
        tz = current_app.config["DISPLAY_TIMEZONE"]
        if stored_totals:
            totals = service.display_totals(s)
        else:
            t = service.totals(s)
            totals = {
                "total": format_seconds(t.total_seconds, "hm"),
                "working": format_seconds(t.working_seconds, "hm"),
                "idle": format_seconds(t.break_seconds, "hm"),
            }
        status = s.status or derive_status(s)
        return {
            "id": s.id,
            "employeeName": s.employee_name or "--",
            "date": format_date_label(s.clock_in_time, tz),
            "clockIn": format_time_ampm(s.clock_in_time, tz),
            "clockOut": format_time_ampm(s.clock_out_time, tz),
            "totalHours": totals["total"],
            "workingHours": totals["working"],
            "breakHours": totals["idle"],
            "status": status,
            "clockInRaw": s.clock_in_time.astimezone(zone(tz)).date().isoformat() if s.clock_in_time else "",
            "_badges": {"status": _STATUS_BADGES.get(status, "secondary")},
        }

    @app.route("/me/session/clock-in", methods=["POST"], endpoint="clock_in")
    @roles_required(Role.EMPLOYEE, Role.MANAGER)
    def clock_in():
        try:
            marked = service.clock_in()
            flash("Clocked in. Attendance marked, you are present today!" if marked else "Clocked in.", "success")
        except DomainError as e:
            flash_failure(e)
        except Exception:
            logger.exception("Clock in failed")
            flash("Clock in failed.", "danger")
        return redirect(_safe_next(current_gate().landing_route))

    @app.route("/me/session/clock-out", methods=["POST"], endpoint="clock_out")
    @roles_required(Role.EMPLOYEE, Role.MANAGER)
    def clock_out():
        try:
            service.clock_out()
            flash("Clocked out!", "success")
        except DomainError as e:
            flash_failure(e)
        except Exception:
            logger.exception("Clock out failed")
            flash("Clock out failed.", "danger")
        return redirect(_safe_next(current_gate().landing_route))

    @app.route("/me/session/break", methods=["POST"], endpoint="toggle_break")
    @roles_required(Role.EMPLOYEE, Role.MANAGER)
    def toggle_break():
        try:
            result = service.toggle_break()
            flash("Break started." if result == "started" else "Break ended.", "info")
        except DomainError as e:
            flash_failure(e)
        except Exception:
            logger.exception("Break operation failed")
            flash("Break operation failed.", "danger")
        return redirect(_safe_next(current_gate().landing_route))

    @app.route("/me/session/live", endpoint="session_live")
    @roles_required(Role.EMPLOYEE, Role.MANAGER)
    def session_live():
        return jsonify(service.current_snapshot().as_dict())

    @app.route("/employee/work-sessions", endpoint="employee_work_sessions")
    @roles_required(Role.EMPLOYEE)
    def employee_work_sessions():
        me = service.whoami()
        rows = [session_row(s, stored_totals=False) for s in service.history(me.employee_id)]
        return render_listing(
            "listing.html",
            title="Work Session History",
            rows=rows,
            columns=[c for c in SESSION_COLUMNS if c.key != "employeeName"],
            search_fields=["date", "clockIn", "clockOut", "status"],
            filters=[FilterSpec.from_values("status", "Status", unique_values(rows, "status"))],
            month_field="clockInRaw",
            sheet_name="WorkSessions",
            export_name="My_Work_Sessions",
            active_page="employee_work_sessions",
        )

    @app.route("/admin/work-sessions", endpoint="admin_work_sessions")
    @roles_required(Role.ADMIN)
    def admin_work_sessions():
        rows = []
        for s in service.all_sessions():
            row = session_row(s, stored_totals=False)
            if s.is_closed:
                row["_actions"] = [
                    Action("Sync hours", url_for("sync_session_hours", session_id=s.id), method="post",
                           variant="outline-secondary"),
                ]
            rows.append(row)
        return render_listing(
            "listing.html",
            title="Work Sessions",
            rows=rows,
            columns=SESSION_COLUMNS + [Column("actions", "Actions", exportable=False)],
            search_fields=["employeeName", "status", "date", "clockIn", "clockOut"],
            filters=[FilterSpec.from_values("employeeName", "Employee", unique_values(rows, "employeeName"))],
            month_field="clockInRaw",
            sheet_name="WorkSessions",
            export_name="WorkSessions",
            active_page="admin_work_sessions",
        )

    @app.route("/admin/work-sessions/<int:session_id>/sync-hours", methods=["POST"], endpoint="sync_session_hours")
    @roles_required(Role.ADMIN)
    def sync_session_hours(session_id: int):
        try:
            service.sync_hours(session_id)
            flash("Session hours synced.", "success")
        except DomainError as e:
            flash_failure(e)
        except Exception:
            logger.exception("Sync hours failed for session %s", session_id)
            flash("Could not sync session hours.", "danger")
        return redirect(url_for("admin_work_sessions"))

    @app.route("/manager/work-sessions", endpoint="manager_work_sessions")
    @roles_required(Role.MANAGER)
    def manager_work_sessions():
        rows = [session_row(s, stored_totals=True) for s in service.team_sessions()]
        return render_listing(
            "listing.html",
            title="Team Work Sessions",
            rows=rows,
            columns=SESSION_COLUMNS,
            search_fields=["employeeName", "status", "date"],
            filters=[
                FilterSpec.from_values("employeeName", "Employee", unique_values(rows, "employeeName")),
                FilterSpec.from_values("status", "Status", [s.value for s in WorkSessionStatus]),
            ],
            month_field="clockInRaw",
            sheet_name="TeamWorkSessions",
            export_name="Team_Work_Sessions",
            active_page="manager_work_sessions",
        )
