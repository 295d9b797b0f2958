from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import StateError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .table import ApproverChain, RoutingTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assignment:
    role: Role
    employee_id: int


class RoutingResolver:
    """Turns the routing table into concrete assignees.

    Holder choice is deterministic: the ACTIVE holder of the role with the
    lowest employee_id, never the requester themself.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        table: Optional[RoutingTable] = None,
        *,
        skip_vacant_levels: bool = False,
    ):
        self._employees = employees
        self._table = table or RoutingTable()
        self._skip_vacant_levels = skip_vacant_levels

    def chain_for(self, requester: Employee) -> ApproverChain:
        return self._table.chain_for(requester.role, requester.department_type)

    def holder_for(self, role: Role, requester: Employee) -> Optional[Employee]:
        department_id = requester.department_id if self._table.is_department_scoped(role) else None
        if self._table.is_department_scoped(role) and department_id is None:
            return None
        for candidate in self._employees.list_active_by_role(role, department_id=department_id):
            if candidate.employee_id != requester.employee_id and candidate.is_active:
                return candidate
        return None

    def require_holder(self, role: Role, requester: Employee) -> Employee:
        holder = self.holder_for(role, requester)
        if holder is None:
            raise StateError(
                f"No active {role.value} can decide on this request",
                code="NO_ELIGIBLE_APPROVER",
                details={"role": role.value, "requesterId": requester.employee_id},
            )
        return holder

    def _first_resolvable(self, roles: ApproverChain, requester: Employee) -> Assignment:
        if not roles:
            raise StateError(
                "No approver chain applies to this requester",
                code="NO_ELIGIBLE_APPROVER",
                details={"requesterId": requester.employee_id},
            )
        if not self._skip_vacant_levels:
            holder = self.require_holder(roles[0], requester)
            return Assignment(role=roles[0], employee_id=holder.employee_id)

        for role in roles:
            holder = self.holder_for(role, requester)
            if holder is not None:
                return Assignment(role=role, employee_id=holder.employee_id)
            logger.info("Approver level %s vacant for employee %s, skipping", role.value, requester.employee_id)

        raise StateError(
            "No active approver found along the approval chain",
            code="NO_ELIGIBLE_APPROVER",
            details={"chain": [r.value for r in roles], "requesterId": requester.employee_id},
        )

    def first_assignee(self, requester: Employee) -> Assignment:
        return self._first_resolvable(self.chain_for(requester), requester)

    def escalation_target(self, requester: Employee, current_role: Role, to_role: Optional[Role] = None) -> Assignment:
        """Next assignee when the holder of ``current_role`` escalates.

        ``to_role`` must sit strictly after ``current_role`` in the requester's
        chain; when omitted the next level is used, or the next staffed one
        when vacant levels may be skipped.
        """

        chain = self.chain_for(requester)
        if current_role not in chain:
            raise ValidationError(
                f"{current_role.value} is not part of this request's approval chain",
                code="ILLEGAL_ESCALATION",
                details={"chain": [r.value for r in chain], "currentRole": current_role.value},
            )
        remaining = chain[chain.index(current_role) + 1:]
        if not remaining:
            raise ValidationError(
                "The final approver cannot escalate further",
                code="ILLEGAL_ESCALATION",
                details={"currentRole": current_role.value},
            )

        if to_role is None:
            return self._first_resolvable(remaining, requester)

        if to_role not in remaining:
            raise ValidationError(
                f"Cannot escalate from {current_role.value} to {to_role.value}",
                code="ILLEGAL_ESCALATION",
                details={
                    "currentRole": current_role.value,
                    "toRole": to_role.value,
                    "allowed": [r.value for r in remaining],
                },
            )
        holder = self.require_holder(to_role, requester)
        return Assignment(role=to_role, employee_id=holder.employee_id)
