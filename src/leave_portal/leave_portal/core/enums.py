from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Organisational role carried in the auth token and on the employee record."""

    EMPLOYEE = "EMPLOYEE"
    SERVICE_HEAD = "SERVICE_HEAD"
    DEPT_HEAD = "DEPT_HEAD"
    ACCOUNTANT = "ACCOUNTANT"
    CEO = "CEO"


class DepartmentType(str, Enum):
    DAF = "DAF"
    DSI = "DSI"
    OPERATIONS = "OPERATIONS"
    OTHERS = "OTHERS"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"
    INACTIVE = "INACTIVE"


class Gender(str, Enum):
    FEMALE = "FEMALE"
    MALE = "MALE"


class LeaveStatus(str, Enum):
    """Stored status of a leave request.

    SUBMITTED and PENDING are both "awaiting a decision"; PENDING only tells the
    UI that the request has been escalated at least once.
    """

    SUBMITTED = "SUBMITTED"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class DecisionType(str, Enum):
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    ESCALATE = "ESCALATE"
    CANCEL = "CANCEL"


class CeoLeavePolicy(str, Enum):
    """What happens when the final-authority role submits its own leave."""

    UNSUPPORTED = "UNSUPPORTED"
    SELF_ASSIGN = "SELF_ASSIGN"
