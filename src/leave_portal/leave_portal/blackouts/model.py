from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class BlackoutPeriod:
    """Date range during which leave cannot be requested.

    Scope is global when neither ``department_id`` nor ``employee_ids`` is set;
    the two are mutually exclusive.
    """

    blackout_id: int
    title: str
    start_date: date
    end_date: date
    reason: Optional[str] = None
    department_id: Optional[int] = None
    employee_ids: frozenset[int] = field(default_factory=frozenset)
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def scope(self) -> str:
        if self.department_id is not None:
            return "DEPARTMENT"
        if self.employee_ids:
            return "EMPLOYEES"
        return "GLOBAL"

    def applies_to(self, employee_id: int, department_id: Optional[int]) -> bool:
        if self.scope == "GLOBAL":
            return True
        if self.department_id is not None:
            return department_id is not None and int(department_id) == self.department_id
        return int(employee_id) in self.employee_ids


@dataclass(frozen=True)
class NewBlackout:
    title: str
    start_date: date
    end_date: date
    reason: Optional[str]
    department_id: Optional[int]
    employee_ids: tuple[int, ...]
    created_by: int
