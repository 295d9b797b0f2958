from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any, field_name: str) -> date:
    """Accept a date, a datetime (normalised to its UTC calendar day) or an ISO string.

    Timestamps with an offset are moved to UTC before the day is taken; naive
    ones are read as UTC already.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        try:
            if len(raw) == 10:
                return parse_iso_date(raw)
            if len(raw) > 10 and raw[10] in "T ":
                if raw.endswith(("Z", "z")):
                    raw = raw[:-1] + "+00:00"
                return coerce_date(datetime.fromisoformat(raw), field_name)
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be a YYYY-MM-DD date", code="INVALID_DATE", details={"field": field_name})


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def today_utc() -> date:
    return now_utc().date()


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days in ``[start, end]``; 0 when the range is inverted."""

    if end < start:
        return 0
    return (end - start).days + 1


def overlap_days(start: date, end: date, window_start: date, window_end: date) -> int:
    s = max(start, window_start)
    e = min(end, window_end)
    return inclusive_days(s, e)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None
