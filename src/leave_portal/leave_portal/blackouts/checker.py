from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import ranges_overlap
from .model import BlackoutPeriod


@dataclass(frozen=True)
class BlackoutCheck:
    blocked: bool
    conflicts: tuple[BlackoutPeriod, ...] = field(default_factory=tuple)


class BlackoutConflictChecker:
    """Decides whether a candidate range falls into a blackout applying to the requester.

    Only consulted at submission time: periods created later never revoke
    requests that were already granted.
    """

    def applicable(
        self,
        periods: Iterable[BlackoutPeriod],
        *,
        employee_id: int,
        department_id: Optional[int],
    ) -> list[BlackoutPeriod]:
        return [p for p in periods if p.applies_to(employee_id, department_id)]

    def check(
        self,
        start: date,
        end: date,
        *,
        employee_id: int,
        department_id: Optional[int],
        periods: Iterable[BlackoutPeriod],
    ) -> BlackoutCheck:
        conflicts = tuple(
            p
            for p in self.applicable(periods, employee_id=employee_id, department_id=department_id)
            if ranges_overlap(start, end, p.start_date, p.end_date)
        )
        return BlackoutCheck(blocked=bool(conflicts), conflicts=conflicts)
