from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest, NewLeaveRequest


class LeaveRepository(Protocol):
    """Leave request storage. Rows are created and transitioned, never deleted."""

    def create(self, request: NewLeaveRequest) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        """Every request of the employee, whatever its status."""

        raise NotImplementedError

    def list_mine(self, employee_id: int, *, skip: int, take: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_inbox(self, assignee_id: int, *, skip: int, take: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        start: date,
        end: date,
        *,
        department_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def compare_and_set(
        self,
        request_id: int,
        *,
        expected_version: int,
        expected_status: LeaveStatus,
        new_status: LeaveStatus,
        new_assignee_id: Optional[int],
    ) -> bool:
        """Apply a transition only if nobody else did first. False means the caller lost the race."""

        raise NotImplementedError
