from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..core.enums import DepartmentType, Role

ApproverChain = tuple[Role, ...]

# Routes keyed by (requester role, department type). A department type of None
# is the fallback for every department.
DEFAULT_ROUTES: Mapping[tuple[Role, Optional[DepartmentType]], ApproverChain] = {
    (Role.EMPLOYEE, DepartmentType.OPERATIONS): (Role.SERVICE_HEAD, Role.DEPT_HEAD, Role.CEO),
    (Role.EMPLOYEE, DepartmentType.DAF): (Role.ACCOUNTANT, Role.CEO),
    (Role.EMPLOYEE, None): (Role.DEPT_HEAD, Role.CEO),
    (Role.SERVICE_HEAD, None): (Role.DEPT_HEAD, Role.CEO),
    (Role.DEPT_HEAD, None): (Role.CEO,),
    (Role.ACCOUNTANT, None): (Role.CEO,),
    (Role.CEO, None): (),
}

# Holders of these roles are looked up inside the requester's department.
DEPARTMENT_SCOPED_ROLES = frozenset({Role.SERVICE_HEAD, Role.DEPT_HEAD})


@dataclass(frozen=True)
class RoutingTable:
    routes: Mapping[tuple[Role, Optional[DepartmentType]], ApproverChain] = field(
        default_factory=lambda: dict(DEFAULT_ROUTES)
    )

    def chain_for(self, requester_role: Role, department_type: Optional[DepartmentType]) -> ApproverChain:
        chain = self.routes.get((requester_role, department_type))
        if chain is None:
            chain = self.routes.get((requester_role, None))
        if chain is None:
            raise KeyError(f"No approver chain configured for role {requester_role.value}")
        return chain

    @staticmethod
    def is_department_scoped(role: Role) -> bool:
        return role in DEPARTMENT_SCOPED_ROLES
