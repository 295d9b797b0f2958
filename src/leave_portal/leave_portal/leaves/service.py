from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

from ..auth.model import Principal
from ..blackouts.checker import BlackoutConflictChecker
from ..blackouts.model import BlackoutPeriod
from ..blackouts.repository import BlackoutRepository
from ..common.datetime_utils import coerce_date, format_date, today_utc
from ..common.pagination import Page, PageRequest
from ..common.validators import optional_text, require_date_range
from ..core.constants import MAX_COMMENT_LENGTH, MAX_REASON_LENGTH
from ..core.enums import CeoLeavePolicy, DecisionType, DepartmentType, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, StateError, ValidationError
from ..core.policy import LeavePolicy
from ..database.transaction_manager import TransactionManager
from ..employees.model import Employee
from ..employees.repository import DepartmentRepository, EmployeeRepository
from ..entitlement.calculator import EntitlementCalculator, overlap_days_in_year, years_spanned
from ..entitlement.leave_types import LeaveTypeCatalog, LeaveTypeOption
from ..entitlement.model import Entitlement
from ..routing.resolver import Assignment, RoutingResolver
from .ledger import DecisionLedger
from .model import Decision, LeaveRequest, NewDecision, NewLeaveRequest
from .repository import LeaveRepository
from .state_machine import LeaveStateMachine

logger = logging.getLogger(__name__)

HISTORY_SCOPES = ("mine", "actor", "all")

# Roles allowed to read someone else's balance.
_BALANCE_READERS = frozenset({Role.CEO, Role.ACCOUNTANT})


@dataclass(frozen=True)
class LeaveRequestDetail:
    request: LeaveRequest
    history: Sequence[Decision]


@dataclass(frozen=True)
class CalendarView:
    start: date
    end: date
    leaves: Sequence[LeaveRequest]
    blackouts: Sequence[BlackoutPeriod]


@dataclass(frozen=True)
class DepartmentVacationCount:
    department_id: int
    department_type: DepartmentType
    department_name: str
    count: int


@dataclass(frozen=True)
class CeoMetrics:
    escalated_pending: int
    decisions_this_month: int
    avg_decision_delay_days: Optional[float]


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        ledger: DecisionLedger,
        employees: EmployeeRepository,
        blackouts: BlackoutRepository,
        resolver: RoutingResolver,
        tx: TransactionManager,
        *,
        departments: DepartmentRepository,
        calculator: Optional[EntitlementCalculator] = None,
        checker: Optional[BlackoutConflictChecker] = None,
        state_machine: Optional[LeaveStateMachine] = None,
        catalog: Optional[LeaveTypeCatalog] = None,
        policy: Optional[LeavePolicy] = None,
        clock: Callable[[], date] = today_utc,
    ):
        self._leaves = leaves
        self._ledger = ledger
        self._employees = employees
        self._blackouts = blackouts
        self._resolver = resolver
        self._tx = tx
        self._calculator = calculator or EntitlementCalculator()
        self._checker = checker or BlackoutConflictChecker()
        self._state_machine = state_machine or LeaveStateMachine()
        self._catalog = catalog or LeaveTypeCatalog()
        self._policy = policy or LeavePolicy()
        self._clock = clock
        self._departments = departments

    # -------- helpers --------
    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if employee is None:
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND", details={"employeeId": int(employee_id)})
        return employee

    def _require_request(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if req is None:
            raise NotFoundError("Leave request not found", code="REQUEST_NOT_FOUND", details={"requestId": int(request_id)})
        return req

    def _is_self_assigned(self, req: LeaveRequest) -> bool:
        return (
            self._policy.ceo_leave_policy == CeoLeavePolicy.SELF_ASSIGN
            and req.current_assignee_id == req.employee_id
        )

    def _first_assignment(self, requester: Employee) -> Assignment:
        if not self._resolver.chain_for(requester):
            if self._policy.ceo_leave_policy == CeoLeavePolicy.SELF_ASSIGN:
                return Assignment(role=requester.role, employee_id=requester.employee_id)
            raise AuthorizationError(
                "Leave requests from the final approver are handled outside this workflow",
                code="CEO_REQUEST_UNSUPPORTED",
            )
        return self._resolver.first_assignee(requester)

    def _check_balance(self, requester: Employee, option: LeaveTypeOption, start: date, end: date) -> None:
        if not self._calculator.counts_against_allowance(option.code):
            return
        # Read inside the employee scope so a concurrent submission is visible.
        existing = self._leaves.list_for_employee(requester.employee_id)
        today = self._clock()
        for year in years_spanned(start, end):
            needed = overlap_days_in_year(start, end, year)
            ent = self._calculator.compute(requester, year, existing, today=today)
            if needed > ent.remaining_days:
                raise ValidationError(
                    f"Not enough leave left for {year}: {needed} requested, {ent.remaining_days} remaining",
                    code="INSUFFICIENT_BALANCE",
                    details={"year": year, "requestedDays": needed, "remainingDays": ent.remaining_days},
                )

    def _check_blackouts(self, requester: Employee, start: date, end: date) -> None:
        result = self._checker.check(
            start,
            end,
            employee_id=requester.employee_id,
            department_id=requester.department_id,
            periods=self._blackouts.list_overlapping(start, end),
        )
        if result.blocked:
            raise ValidationError(
                "The requested dates fall into a blackout period",
                code="BLACKOUT_CONFLICT",
                details={
                    "conflicts": [
                        {
                            "blackoutId": p.blackout_id,
                            "title": p.title,
                            "startDate": format_date(p.start_date),
                            "endDate": format_date(p.end_date),
                        }
                        for p in result.conflicts
                    ]
                },
            )

    # -------- submission --------
    def submit(
        self,
        principal: Principal,
        *,
        leave_type: str,
        start_date: Any,
        end_date: Any,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        start = coerce_date(start_date, "startDate")
        end = coerce_date(end_date, "endDate")
        require_date_range(start, end)
        reason_text = optional_text(reason, "reason", max_len=MAX_REASON_LENGTH)

        requester = self._require_employee(principal.employee_id)
        if not requester.is_active:
            raise AuthorizationError("Inactive employees cannot request leave", code="EMPLOYEE_INACTIVE")
        option = self._catalog.require_offerable(leave_type, requester.gender)

        with self._tx.employee_scope(requester.employee_id):
            assignment = self._first_assignment(requester)
            self._check_balance(requester, option, start, end)
            self._check_blackouts(requester, start, end)

            request_id = self._leaves.create(
                NewLeaveRequest(
                    employee_id=requester.employee_id,
                    leave_type=option.code,
                    start_date=start,
                    end_date=end,
                    reason=reason_text,
                    current_assignee_id=assignment.employee_id,
                )
            )
            self._ledger.append(
                NewDecision(
                    request_id=request_id,
                    decision_type=DecisionType.SUBMIT,
                    actor_id=requester.employee_id,
                    target_employee_id=assignment.employee_id,
                    target_role=assignment.role,
                )
            )
            created = self._require_request(request_id)

        logger.info(
            "Leave request %s submitted by %s (%s %s..%s), assigned to %s (%s)",
            request_id, requester.employee_id, option.code, start, end, assignment.employee_id, assignment.role.value,
        )
        return created

    # -------- decisions --------
    def _decide(
        self,
        principal: Principal,
        request_id: int,
        action: DecisionType,
        *,
        comment: Optional[str] = None,
        to_role: Optional[Role] = None,
    ) -> LeaveRequest:
        note = optional_text(comment, "comment", max_len=MAX_COMMENT_LENGTH)
        with self._tx.request_scope(int(request_id)):
            req = self._require_request(request_id)
            try:
                new_status = self._state_machine.transition(
                    req,
                    action,
                    principal.employee_id,
                    allow_self_decision=self._is_self_assigned(req),
                )
            except (AuthorizationError, StateError) as e:
                logger.warning("Refused %s on request %s by %s: %s", action.value, req.request_id, principal.employee_id, e.code)
                raise

            new_assignee: Optional[int] = None
            target_role: Optional[Role] = None
            if action == DecisionType.ESCALATE:
                requester = self._require_employee(req.employee_id)
                assignee = self._require_employee(req.current_assignee_id)
                target = self._resolver.escalation_target(requester, assignee.role, to_role)
                new_assignee, target_role = target.employee_id, target.role

            ok = self._leaves.compare_and_set(
                req.request_id,
                expected_version=req.version,
                expected_status=req.status,
                new_status=new_status,
                new_assignee_id=new_assignee,
            )
            if not ok:
                logger.warning("Lost race on request %s (%s by %s)", req.request_id, action.value, principal.employee_id)
                raise ConflictError(
                    "The request was changed by someone else; reload it and try again",
                    details={"requestId": req.request_id},
                )

            self._ledger.append(
                NewDecision(
                    request_id=req.request_id,
                    decision_type=action,
                    actor_id=principal.employee_id,
                    target_employee_id=new_assignee,
                    target_role=target_role,
                    comment=note,
                )
            )
            updated = self._require_request(req.request_id)

        logger.info(
            "Leave request %s: %s by %s -> %s%s",
            req.request_id, action.value, principal.employee_id, new_status.value,
            f" (assigned to {new_assignee})" if new_assignee is not None else "",
        )
        return updated

    def approve(self, principal: Principal, request_id: int, *, comment: Optional[str] = None) -> LeaveRequest:
        return self._decide(principal, request_id, DecisionType.APPROVE, comment=comment)

    def reject(self, principal: Principal, request_id: int, *, comment: Optional[str] = None) -> LeaveRequest:
        return self._decide(principal, request_id, DecisionType.REJECT, comment=comment)

    def escalate(
        self,
        principal: Principal,
        request_id: int,
        *,
        to_role: Optional[Any] = None,
        comment: Optional[str] = None,
    ) -> LeaveRequest:
        role: Optional[Role] = None
        if to_role not in (None, ""):
            try:
                role = Role(str(to_role).upper())
            except ValueError:
                raise ValidationError("Unknown role", code="ILLEGAL_ESCALATION", details={"toRole": to_role})
        return self._decide(principal, request_id, DecisionType.ESCALATE, comment=comment, to_role=role)

    def cancel(self, principal: Principal, request_id: int, *, comment: Optional[str] = None) -> LeaveRequest:
        return self._decide(principal, request_id, DecisionType.CANCEL, comment=comment)

    # -------- reads --------
    def get_request(self, principal: Principal, request_id: int) -> LeaveRequestDetail:
        req = self._require_request(request_id)
        history = self._ledger.history_for_request(req.request_id)

        involved = {req.employee_id}
        if req.current_assignee_id is not None:
            involved.add(req.current_assignee_id)
        for d in history:
            involved.add(d.actor_id)
            if d.target_employee_id is not None:
                involved.add(d.target_employee_id)

        if not principal.is_ceo and principal.employee_id not in involved:
            raise AuthorizationError("You cannot view this leave request", details={"requestId": req.request_id})
        return LeaveRequestDetail(request=req, history=history)

    def list_mine(self, principal: Principal, page: PageRequest) -> Page[LeaveRequest]:
        items = self._leaves.list_mine(principal.employee_id, skip=page.skip, take=page.take)
        return Page(items=items, page=page.page, take=page.take)

    def list_inbox(self, principal: Principal, page: PageRequest) -> Page[LeaveRequest]:
        items = self._leaves.list_inbox(principal.employee_id, skip=page.skip, take=page.take)
        return Page(items=items, page=page.page, take=page.take)

    def decision_history(self, principal: Principal, *, scope: str = "mine", page: PageRequest) -> Page[Decision]:
        scope = (scope or "mine").strip().lower()
        if scope == "mine":
            return self._ledger.history_for_owner(principal.employee_id, page)
        if scope == "actor":
            return self._ledger.history_for_actor(principal.employee_id, page)
        if scope == "all":
            if not principal.is_ceo:
                raise AuthorizationError("Only the CEO can read every decision", code="CEO_ONLY")
            return self._ledger.history_all(page)
        raise ValidationError(
            "scope must be one of mine, actor, all",
            code="INVALID_SCOPE",
            details={"scope": scope, "allowed": list(HISTORY_SCOPES)},
        )

    def calendar(self, principal: Principal, *, start: Any, end: Any) -> CalendarView:
        start_d = coerce_date(start, "start")
        end_d = coerce_date(end, "end")
        require_date_range(start_d, end_d)

        periods = self._blackouts.list_overlapping(start_d, end_d)
        if principal.is_ceo:
            return CalendarView(
                start=start_d,
                end=end_d,
                leaves=self._leaves.list_approved_overlapping(start_d, end_d),
                blackouts=periods,
            )

        me = self._require_employee(principal.employee_id)
        if me.department_id is not None:
            leaves = self._leaves.list_approved_overlapping(start_d, end_d, department_id=me.department_id)
        else:
            leaves = [
                r for r in self._leaves.list_approved_overlapping(start_d, end_d) if r.employee_id == me.employee_id
            ]
        return CalendarView(
            start=start_d,
            end=end_d,
            leaves=leaves,
            blackouts=self._checker.applicable(periods, employee_id=me.employee_id, department_id=me.department_id),
        )

    def leave_balance(self, principal: Principal, employee_id: int, *, year: Optional[Any] = None) -> Entitlement:
        if int(employee_id) != principal.employee_id and principal.role not in _BALANCE_READERS:
            raise AuthorizationError("You cannot view another employee's balance", details={"employeeId": int(employee_id)})

        today = self._clock()
        if year in (None, ""):
            target_year = today.year
        else:
            try:
                target_year = int(year)
            except (TypeError, ValueError):
                raise ValidationError("year must be an integer", details={"year": year})
            if not 1900 <= target_year <= 9999:
                raise ValidationError("year is out of range", details={"year": target_year})

        employee = self._require_employee(employee_id)
        return self._calculator.compute(
            employee,
            target_year,
            self._leaves.list_for_employee(employee.employee_id),
            today=today,
        )

    def leave_type_options(self, principal: Principal) -> list[LeaveTypeOption]:
        me = self._require_employee(principal.employee_id)
        return self._catalog.options_for(me.gender)

    # -------- CEO reports --------
    @staticmethod
    def _require_ceo(principal: Principal) -> None:
        if not principal.is_ceo:
            raise AuthorizationError("Only the CEO can read company-wide figures", code="CEO_ONLY")

    def vacation_counts(self, principal: Principal) -> list[DepartmentVacationCount]:
        """Employees on approved leave today, per department (empty departments included)."""

        self._require_ceo(principal)
        today = self._clock()
        on_leave = self._leaves.list_approved_overlapping(today, today)

        per_department: dict[int, set[int]] = {}
        for emp in self._employees.list_by_ids(sorted({r.employee_id for r in on_leave})):
            if emp.department_id is not None:
                per_department.setdefault(emp.department_id, set()).add(emp.employee_id)

        return [
            DepartmentVacationCount(
                department_id=d.department_id,
                department_type=d.type,
                department_name=d.name,
                count=len(per_department.get(d.department_id, ())),
            )
            for d in self._departments.list_all()
        ]

    def ceo_metrics(self, principal: Principal) -> CeoMetrics:
        self._require_ceo(principal)
        today = self._clock()
        month_start = datetime(today.year, today.month, 1)
        if today.month == 12:
            next_month = datetime(today.year + 1, 1, 1)
        else:
            next_month = datetime(today.year, today.month + 1, 1)

        decisions = self._ledger.final_decisions_between(month_start, next_month)
        reached = self._ledger.first_routed_to({d.request_id for d in decisions}, Role.CEO)

        delays = []
        for d in decisions:
            reached_at = reached.get(d.request_id)
            if reached_at is None or d.created_at is None:
                continue
            delta = (d.created_at - reached_at).total_seconds()
            if delta >= 0:
                delays.append(delta / 86400)

        return CeoMetrics(
            escalated_pending=self._ledger.count_awaiting_routed_to(Role.CEO),
            decisions_this_month=len(decisions),
            avg_decision_delay_days=sum(delays) / len(delays) if delays else None,
        )
