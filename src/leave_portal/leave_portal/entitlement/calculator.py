from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import inclusive_days, overlap_days, year_bounds
from ..core.enums import LeaveStatus
from ..employees.model import Employee
from .model import Entitlement
from .seniority import SeniorityBonusTable, years_of_service

# Requests in these statuses still hold (or may still hold) their days.
CONSUMING_STATUSES = frozenset({LeaveStatus.SUBMITTED, LeaveStatus.PENDING, LeaveStatus.APPROVED})


def requested_days(start: date, end: date) -> int:
    return inclusive_days(start, end)


def overlap_days_in_year(start: date, end: date, year: int) -> int:
    jan1, dec31 = year_bounds(year)
    return overlap_days(start, end, jan1, dec31)


def years_spanned(start: date, end: date) -> list[int]:
    return list(range(start.year, end.year + 1))


class EntitlementCalculator:
    """Pure annual-balance computation.

    Nothing here touches storage: callers load the employee's requests and pass
    them in. When the result gates a submission the list must be read inside
    the employee's transaction scope.
    """

    def __init__(
        self,
        bonus_table: Optional[SeniorityBonusTable] = None,
        *,
        allowance_leave_types: Optional[frozenset[str]] = None,
    ):
        self._bonus_table = bonus_table or SeniorityBonusTable()
        self._allowance_leave_types = allowance_leave_types

    def counts_against_allowance(self, leave_type: str) -> bool:
        if self._allowance_leave_types is None:
            return True
        return (leave_type or "").upper() in self._allowance_leave_types

    def consumed_days(self, leaves: Iterable, year: int) -> int:
        total = 0
        for leave in leaves:
            if LeaveStatus(leave.status) not in CONSUMING_STATUSES:
                continue
            if not self.counts_against_allowance(leave.leave_type):
                continue
            total += overlap_days_in_year(leave.start_date, leave.end_date, year)
        return total

    def compute(self, employee: Employee, year: int, leaves: Iterable, *, today: date) -> Entitlement:
        hire_date = employee.effective_hire_date
        seniority = years_of_service(hire_date, today)
        bonus = self._bonus_table.bonus_for(seniority)
        base = int(employee.base_allowance)

        # Not yet hired during that year: nothing to take.
        if hire_date is not None and hire_date > year_bounds(year)[1]:
            total = 0
        else:
            total = base + bonus

        consumed = self.consumed_days(leaves, year)
        return Entitlement(
            year=year,
            base_allowance=base,
            seniority_years=seniority,
            seniority_bonus_days=bonus,
            total_annual_allowance=total,
            consumed_days=consumed,
            remaining_days=max(0, total - consumed),
        )
