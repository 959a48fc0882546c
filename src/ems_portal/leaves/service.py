from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from ..common.datetime_utils import parse_form_date
from ..common.validators import FieldErrors
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError
from .model import Leave, LeaveApplication
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def calculate_duration(start: Optional[date], end: Optional[date]) -> int:
    """Inclusive number of days between two dates; 0 when either is missing."""
    if not start or not end:
        return 0
    return (end - start).days + 1


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _newest_first(leaves) -> list[Leave]:
    return sorted(leaves, key=lambda lv: lv.applied_on or _EPOCH, reverse=True)


class LeaveService:
    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def leave_types(self) -> list[str]:
        types = list(self._leaves.list_types())
        return types or [t.value for t in LeaveType]

    def apply(
        self,
        *,
        employee_id: Optional[int],
        leave_type: str,
        start_date: str,
        end_date: str,
        description: str = "",
        proof: Any = None,
    ) -> LeaveApplication:
        """Validate and submit a leave request. ``proof`` is an uploaded file (werkzeug ``FileStorage``)."""
        if not employee_id:
            raise ValidationError("Could not identify the current employee")

        errors = FieldErrors()
        leave_type = (leave_type or "").strip()
        errors.check(bool(leave_type), "leaveType", "Please select a leave type")

        start = end = None
        try:
            start = parse_form_date((start_date or "").strip())
        except ValueError:
            errors.check(False, "startDate", "Start date is required")
        try:
            end = parse_form_date((end_date or "").strip())
        except ValueError:
            errors.check(False, "endDate", "End date is required")
        if start and end:
            errors.check(end >= start, "endDate", "End date cannot be before start date")
        errors.raise_if_any("Please fill all required fields")

        application = LeaveApplication(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            duration=calculate_duration(start, end),
            description=(description or "").strip(),
        )

        upload = None
        if proof is not None and getattr(proof, "filename", ""):
            upload = (proof.filename, proof.stream, proof.mimetype or "application/octet-stream")

        self._leaves.apply(application, upload)
        logger.info("Leave applied: employee=%s type=%s days=%s", employee_id, leave_type, application.duration)
        return application

    def set_status(self, leave_id: int, status: str) -> LeaveStatus:
        """Move a leave to any status; the backend does not enforce an order."""
        try:
            target = LeaveStatus(str(status).upper())
        except ValueError:
            raise ValidationError("Unknown leave status")

        if target == LeaveStatus.APPROVED:
            self._leaves.approve(int(leave_id))
        elif target == LeaveStatus.REJECTED:
            self._leaves.reject(int(leave_id))
        else:
            self._leaves.set_pending(int(leave_id))
        return target

    def delete_pending(self, *, employee_id: int, leave_id: int) -> None:
        leave = next((lv for lv in self._leaves.list_by_employee(int(employee_id)) if lv.id == int(leave_id)), None)
        if not leave:
            raise ValidationError("Leave not found")
        if not leave.is_pending:
            raise ValidationError("Only pending leaves can be deleted")
        self._leaves.delete(leave.id)

    def my_leaves(self, employee_id: Optional[int]) -> list[Leave]:
        if not employee_id:
            return []
        return _newest_first(self._leaves.list_by_employee(int(employee_id)))

    def all_leaves(self) -> list[Leave]:
        return _newest_first(self._leaves.list_all())

    def team_leaves(self) -> list[Leave]:
        return _newest_first(self._leaves.list_manager_team())

    def pending_leaves(self) -> list[Leave]:
        return _newest_first(self._leaves.list_by_status(LeaveStatus.PENDING.value))
