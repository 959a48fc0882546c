"""Elapsed time and break accounting for a work session.

Pure functions over a session-like object (``clock_in_time``,
``clock_out_time``, ``breaks`` with ``start_time``/``end_time``). The
dashboard card, history tables and team views all read totals from here.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import format_duration_hm, format_hms
from ..core.enums import WorkSessionStatus

INACTIVE = "Inactive"


@dataclass(frozen=True)
class SessionTotals:
    total_seconds: float
    break_seconds: float
    working_seconds: float


def _elapsed(start: Optional[datetime], end: datetime) -> float:
    if start is None:
        return 0.0
    return (end - start).total_seconds()


def current_break(session) -> Optional[Any]:
    for b in getattr(session, "breaks", None) or ():
        if b.end_time is None:
            return b
    return None


def compute_totals(session, now: datetime) -> SessionTotals:
    """Total runs to clock-out (or now). A break with no end stops at the same point."""
    clock_in = getattr(session, "clock_in_time", None)
    if clock_in is None:
        return SessionTotals(0.0, 0.0, 0.0)

    end = session.clock_out_time or now
    total = _elapsed(clock_in, end)
    breaks = sum(_elapsed(b.start_time, b.end_time or end) for b in (session.breaks or ()))
    return SessionTotals(
        total_seconds=total,
        break_seconds=breaks,
        working_seconds=max(0.0, total - breaks),
    )


def derive_status(session) -> str:
    if session is None or getattr(session, "clock_in_time", None) is None:
        return INACTIVE
    if session.clock_out_time is not None:
        return WorkSessionStatus.COMPLETED.value
    if current_break(session) is not None:
        return WorkSessionStatus.ON_BREAK.value
    return WorkSessionStatus.WORKING.value


def format_seconds(seconds: float, style: str = "hms") -> str:
    return format_hms(seconds) if style == "hms" else format_duration_hm(seconds)


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the session card shows at one instant.

    ``ticking`` and ``break_ticking`` tell the page whether its one-second
    timers for the elapsed and break clocks should be running.
    """

    session_id: Optional[int]
    status: str
    total_seconds: float
    break_seconds: float
    working_seconds: float
    elapsed: str
    working: str
    break_total: str
    break_elapsed: str
    open_break_seconds: float
    open_break_id: Optional[int]
    break_started_at: Optional[str]
    clock_in: Optional[str]
    clock_out: Optional[str]
    ticking: bool
    break_ticking: bool

    def as_dict(self) -> dict:
        return asdict(self)


def snapshot(session, now: datetime, style: str = "hms") -> SessionSnapshot:
    totals = compute_totals(session, now)
    status = derive_status(session)
    open_break = current_break(session) if session is not None else None
    clock_in = getattr(session, "clock_in_time", None)
    clock_out = getattr(session, "clock_out_time", None)

    open_seconds = _elapsed(open_break.start_time, clock_out or now) if open_break is not None else 0.0
    ticking = clock_in is not None and clock_out is None
    break_ticking = ticking and open_break is not None

    return SessionSnapshot(
        session_id=getattr(session, "id", None),
        status=status,
        total_seconds=totals.total_seconds,
        break_seconds=totals.break_seconds,
        working_seconds=totals.working_seconds,
        elapsed=format_seconds(totals.total_seconds, style),
        working=format_seconds(totals.working_seconds, style),
        break_total=format_seconds(totals.break_seconds, style),
        break_elapsed=format_seconds(open_seconds, style),
        open_break_seconds=open_seconds,
        open_break_id=getattr(open_break, "id", None),
        break_started_at=open_break.start_time.isoformat() if open_break is not None and open_break.start_time else None,
        clock_in=clock_in.isoformat() if clock_in else None,
        clock_out=clock_out.isoformat() if clock_out else None,
        ticking=ticking,
        break_ticking=break_ticking,
    )
