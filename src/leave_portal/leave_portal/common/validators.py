from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

from ..core.exceptions import ValidationError


def _check_length(value: str, field_name: Optional[str], max_len: Optional[int]) -> str:
    if max_len is not None and len(value) > max_len:
        raise ValidationError(
            f"{field_name or 'text'} must be at most {max_len} characters",
            code="TOO_LONG",
            details={"field": field_name, "maxLength": max_len, "length": len(value)},
        )
    return value


def require_non_empty(value: str, field_name: str, *, max_len: Optional[int] = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", details={"field": field_name})
    return _check_length(value.strip(), field_name, max_len)


def optional_text(value: Optional[str], field_name: Optional[str] = None, *, max_len: Optional[int] = None) -> Optional[str]:
    """Trimmed text or None; blank input counts as absent."""

    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name or 'text'} must be a string", details={"field": field_name})
    return _check_length(value.strip(), field_name, max_len) or None


def require_date_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError(
            "endDate must be on or after startDate",
            code="INVALID_RANGE",
            details={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )


def normalize_ids(values: Optional[Iterable[Any]], field_name: str) -> list[int]:
    """De-duplicate a list of numeric ids, keeping first-seen order."""

    if isinstance(values, (str, bytes)):
        raise ValidationError(f"{field_name} must be a list of ids", details={"field": field_name})
    out: list[int] = []
    seen: set[int] = set()
    for v in values or []:
        if v is None or str(v).strip() == "":
            continue
        try:
            i = int(v)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} contains an invalid id", details={"field": field_name, "value": v})
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out
