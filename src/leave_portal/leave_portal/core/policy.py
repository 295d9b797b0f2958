from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .constants import DEFAULT_BASE_ALLOWANCE, DEFAULT_SENIORITY_BONUS_TABLE
from .enums import CeoLeavePolicy


def parse_bonus_table(value: Any) -> tuple[tuple[int, int], ...]:
    """Accept ``"5:1,10:2"`` strings or sequences of pairs."""

    if value is None or value == "":
        return DEFAULT_SENIORITY_BONUS_TABLE
    if isinstance(value, str):
        pairs = []
        for chunk in value.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            years, _, days = chunk.partition(":")
            pairs.append((int(years), int(days)))
        return tuple(pairs)
    return tuple((int(y), int(d)) for y, d in value)


def parse_leave_types(value: Any) -> Optional[frozenset[str]]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return frozenset(v.strip().upper() for v in value.split(",") if v.strip())
    return frozenset(str(v).upper() for v in value)


@dataclass(frozen=True)
class LeavePolicy:
    """Tunable leave rules, read once from the settings module."""

    seniority_bonus_table: tuple[tuple[int, int], ...] = DEFAULT_SENIORITY_BONUS_TABLE
    default_base_allowance: int = DEFAULT_BASE_ALLOWANCE
    # None: every leave type counts against the annual allowance.
    allowance_leave_types: Optional[frozenset[str]] = None
    ceo_leave_policy: CeoLeavePolicy = CeoLeavePolicy.UNSUPPORTED
    skip_vacant_approver_levels: bool = False

    @classmethod
    def from_settings(cls, settings: Any) -> "LeavePolicy":
        return cls(
            seniority_bonus_table=parse_bonus_table(getattr(settings, "SENIORITY_BONUS_TABLE", None)),
            default_base_allowance=int(getattr(settings, "DEFAULT_BASE_ALLOWANCE", DEFAULT_BASE_ALLOWANCE)),
            allowance_leave_types=parse_leave_types(getattr(settings, "ALLOWANCE_LEAVE_TYPES", None)),
            ceo_leave_policy=CeoLeavePolicy(
                str(getattr(settings, "CEO_LEAVE_POLICY", CeoLeavePolicy.UNSUPPORTED.value)).upper()
            ),
            skip_vacant_approver_levels=bool(getattr(settings, "SKIP_VACANT_APPROVER_LEVELS", False)),
        )
