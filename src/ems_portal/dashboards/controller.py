from __future__ import annotations

from flask import Flask, current_app, render_template

from ..auth.gate import roles_required
from ..common.datetime_utils import format_date_label, format_time_ampm
from ..container import Container
from ..core.constants import RECENT_HISTORY_LIMIT
from ..core.enums import Role
from ..work_sessions.calculator import derive_status


def register(app: Flask, container: Container) -> None:
    sessions = container.work_session_service

    def history_rows(items) -> list[dict]:
        tz = current_app.config["DISPLAY_TIMEZONE"]
        rows = []
        for s in items:
            totals = sessions.display_totals(s)
            rows.append({
                "employeeName": s.employee_name,
                "date": format_date_label(s.clock_in_time, tz),
                "clockIn": format_time_ampm(s.clock_in_time, tz),
                "clockOut": format_time_ampm(s.clock_out_time, tz),
                "working": totals["working"],
                "idle": totals["idle"],
                "status": s.status or derive_status(s),
            })
        return rows

    def own_session_context() -> dict:
        me = sessions.whoami()
        return {
            "me": me,
            "snapshot": sessions.current_snapshot(),
            "history": history_rows(sessions.history(me.employee_id, limit=RECENT_HISTORY_LIMIT)),
        }

    @app.route("/admin", endpoint="admin_dashboard")
    @roles_required(Role.ADMIN)
    def admin_dashboard():
        stats = container.dashboard_service.admin_stats()
        return render_template("dashboards/admin.html", stats=stats, active_page="admin_dashboard")

    @app.route("/hr", endpoint="hr_dashboard")
    @roles_required(Role.HR)
    def hr_dashboard():
        stats = container.dashboard_service.hr_stats()
        return render_template("dashboards/hr.html", stats=stats, active_page="hr_dashboard")

    @app.route("/manager", endpoint="manager_dashboard")
    @roles_required(Role.MANAGER)
    def manager_dashboard():
        stats = container.dashboard_service.team_stats()
        return render_template(
            "dashboards/manager.html",
            stats=stats,
            recent_team=history_rows(stats.recent_completed),
            active_team=history_rows(stats.active_sessions),
            active_page="manager_dashboard",
            **own_session_context(),
        )

    @app.route("/employee", endpoint="employee_dashboard")
    @roles_required(Role.EMPLOYEE)
    def employee_dashboard():
        return render_template(
            "dashboards/employee.html",
            active_page="employee_dashboard",
            **own_session_context(),
        )
