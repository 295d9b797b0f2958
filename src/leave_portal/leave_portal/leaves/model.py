from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import inclusive_days
from ..core.enums import DecisionType, LeaveStatus, Role


@dataclass(frozen=True)
class LeaveRequest:
    """Thực thể miền: one leave request.

    Only ``status``, ``current_assignee_id``, ``version`` and ``updated_at`` ever
    change after creation; rows are never deleted.
    """

    request_id: int
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    status: LeaveStatus
    current_assignee_id: Optional[int]
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: int = 1

    @property
    def days(self) -> int:
        return inclusive_days(self.start_date, self.end_date)


@dataclass(frozen=True)
class NewLeaveRequest:
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    reason: Optional[str]
    current_assignee_id: int


@dataclass(frozen=True)
class Decision:
    decision_id: int
    request_id: int
    decision_type: DecisionType
    actor_id: int
    target_employee_id: Optional[int] = None
    target_role: Optional[Role] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewDecision:
    request_id: int
    decision_type: DecisionType
    actor_id: int
    target_employee_id: Optional[int] = None
    target_role: Optional[Role] = None
    comment: Optional[str] = None
