from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import NamedTuple, Optional, Union
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_DISPLAY_TIMEZONE, SHIFT_DAY_START

TzLike = Union[str, tzinfo, None]

_ISO_DURATION = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)(?:\.\d+)?S)?$")
_DATE_SPACE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}\s")
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


class Duration(NamedTuple):
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds


def zone(tz: TzLike = None) -> tzinfo:
    if tz is None:
        return ZoneInfo(DEFAULT_DISPLAY_TIMEZONE)
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def now_utc() -> datetime:
    """Current instant (aware, UTC).

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def parse_api_datetime(value, tz: TzLike = None) -> Optional[datetime]:
    """Parse a backend timestamp into an aware datetime.

    Values that carry an offset (or ``Z``) are taken as-is. Naive values are
    wall-clock times in the display zone. Returns None instead of raising.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=zone(tz))
    if isinstance(value, date):
        return datetime.combine(value, time(0, 0), tzinfo=zone(tz))

    s = str(value).strip()
    if _DATE_SPACE_TIME.match(s):
        s = s.replace(" ", "T", 1)
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    s = _LONG_FRACTION.sub(r"\1", s)

    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=zone(tz))


def parse_api_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def _hour12(hour: int) -> tuple[int, str]:
    return (hour % 12 or 12), ("PM" if hour >= 12 else "AM")


def format_time_ampm(value, tz: TzLike = None) -> str:
    """``H:MM:SS AM/PM`` in the display zone, ``--`` when missing."""
    d = parse_api_datetime(value, tz)
    if not d:
        return "--"
    local = d.astimezone(zone(tz))
    hour, suffix = _hour12(local.hour)
    return f"{hour}:{local.minute:02d}:{local.second:02d} {suffix}"


def format_date_label(value, tz: TzLike = None) -> str:
    d = parse_api_datetime(value, tz)
    if not d:
        return "--"
    local = d.astimezone(zone(tz))
    return f"{local.strftime('%a, %b')} {local.day}, {local.year}"


def format_date_dmy(value) -> str:
    d = parse_api_date(value)
    return d.strftime("%d-%m-%Y") if d else "--"


def format_shift_time(value) -> str:
    """Time-of-day such as ``16:30`` or ``16:30:00`` as ``4:30 PM``."""
    if value is None or value == "":
        return "--"
    if isinstance(value, time):
        hour, suffix = _hour12(value.hour)
        return f"{hour}:{value.minute:02d} {suffix}"

    s = str(value)
    if "am" in s.lower() or "pm" in s.lower():
        return s
    parts = s.split(":")
    if len(parts) < 2:
        return s
    try:
        hour = int(parts[0])
    except ValueError:
        return s
    hour12, suffix = _hour12(hour)
    return f"{hour12}:{parts[1][:2]} {suffix}"


def parse_time_of_day(value) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError:
        return None


def parse_iso_duration(value) -> Duration:
    """Parse ``PT#H#M#S`` (any subset). Anything else is a zero duration."""
    if not value or not isinstance(value, str):
        return Duration()
    match = _ISO_DURATION.match(value.strip())
    if not match:
        return Duration()
    hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    return Duration(hours, minutes, seconds)


def format_duration_hm(seconds) -> str:
    """``Xh Ym`` rounded to the nearest minute."""
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        return "0h 0m"
    if math.isnan(seconds) or seconds < 0:
        return "0h 0m"
    total_minutes = math.floor(seconds / 60 + 0.5)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def format_iso_duration(value) -> str:
    d = parse_iso_duration(value)
    if d.hours > 0:
        return f"{d.hours}h {d.minutes}m"
    if d.minutes > 0:
        return f"{d.minutes}m {d.seconds}s"
    return f"{d.seconds}s"


def to_iso_duration(seconds) -> str:
    """Whole seconds as ``PT#H#M#S``."""
    try:
        total = max(0, int(seconds))
    except (TypeError, ValueError):
        total = 0
    return f"PT{total // 3600}H{total % 3600 // 60}M{total % 60}S"


def format_hms(seconds) -> str:
    """Zero-padded ``HH:MM:SS``; hours are not wrapped at 24."""
    try:
        total = max(0, int(seconds))
    except (TypeError, ValueError):
        total = 0
    return f"{total // 3600:02d}:{total % 3600 // 60:02d}:{total % 60:02d}"


def shift_day(value, tz: TzLike = None) -> Optional[date]:
    """Attendance day of an instant: anything before 08:00 counts for the previous day."""
    d = parse_api_datetime(value, tz)
    if not d:
        return None
    local = d.astimezone(zone(tz))
    if local.time() < SHIFT_DAY_START:
        return local.date() - timedelta(days=1)
    return local.date()


def business_date(starts_at, ends_at, now: datetime) -> date:
    """Date the current shift belongs to.

    Overnight shifts (start hour after end hour) still belong to yesterday
    until noon.
    """
    start = parse_time_of_day(starts_at)
    end = parse_time_of_day(ends_at)
    today = now.date()
    if start and end and start.hour > end.hour and now.hour < 12:
        return today - timedelta(days=1)
    return today


def parse_form_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()
