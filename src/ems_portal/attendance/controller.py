from __future__ import annotations

from flask import Flask, current_app

from ..auth.gate import roles_required
from ..common.datetime_utils import format_date_dmy
from ..common.listing import FilterSpec, render_listing
from ..common.table import Column, unique_values
from ..container import Container
from ..core.enums import Role
from .model import AttendanceRecord, beautify_shift

BASE_COLUMNS = [
    Column("sno", "S.No"),
    Column("employeeName", "Employee"),
    Column("date", "Date"),
    Column("shiftDay", "Shift Day"),
    Column("time", "Time"),
    Column("present", "Status"),
]


def _row(r: AttendanceRecord, tz) -> dict:
    return {
        "employeeName": r.employee_name,
        "date": format_date_dmy(r.attendance_date),
        "shiftDay": format_date_dmy(r.display_day(tz)),
        "time": r.time_label(),
        "present": r.present_label,
        "shift": beautify_shift(r.shift),
        "assignedShift": beautify_shift(r.assigned_shift),
        "rawDate": r.attendance_date.isoformat() if r.attendance_date else "",
        "_badges": {"present": "success" if r.present else "danger"},
    }


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    def rows_for(records) -> list[dict]:
        tz = current_app.config["DISPLAY_TIMEZONE"]
        return [_row(r, tz) for r in records]

    @app.route("/admin/attendance", endpoint="admin_attendance")
    @roles_required(Role.ADMIN)
    def admin_attendance():
        rows = rows_for(attendance.all_records())
        return render_listing(
            "listing.html",
            title="Attendance",
            rows=rows,
            columns=BASE_COLUMNS + [Column("shift", "Shift")],
            search_fields=["employeeName", "date", "time", "present", "shift"],
            filters=[FilterSpec.from_values("employeeName", "Employee", unique_values(rows, "employeeName"))],
            month_field="rawDate",
            sheet_name="Attendance",
            export_name="Attendance",
            active_page="admin_attendance",
        )

    @app.route("/employee/attendance-history", endpoint="employee_attendance")
    @roles_required(Role.EMPLOYEE)
    def employee_attendance():
        rows = rows_for(attendance.my_records())
        return render_listing(
            "listing.html",
            title="Attendance History",
            rows=rows,
            columns=[c for c in BASE_COLUMNS if c.key != "employeeName"],
            search_fields=["date", "time", "present"],
            filters=[FilterSpec.from_values("present", "Status", ["Present", "Absent"])],
            month_field="rawDate",
            sheet_name="Attendance",
            export_name="My_Attendance",
            active_page="employee_attendance",
        )

    @app.route("/manager/attendance", endpoint="manager_attendance")
    @roles_required(Role.MANAGER)
    def manager_attendance():
        records = attendance.team_records()
        today = attendance.current_business_date()
        rows = rows_for(records)
        return render_listing(
            "attendance/team.html",
            title="Team Attendance",
            rows=rows,
            columns=BASE_COLUMNS + [Column("assignedShift", "Assigned Shift")],
            search_fields=["employeeName", "date", "present"],
            filters=[FilterSpec.from_values("employeeName", "Employee", unique_values(rows, "employeeName"))],
            month_field="rawDate",
            sheet_name="Attendance",
            export_name="Team_Attendance",
            business_date=today,
            today_rows=rows_for(attendance.records_on(records, today)),
            active_page="manager_attendance",
        )
