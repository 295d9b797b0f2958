from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_BASE_ALLOWANCE
from ..core.enums import DepartmentType, EmployeeStatus, Gender, Role


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Employee, as read from the HR directory.

    The leave engine never writes employees; account provisioning owns them.
    """

    employee_id: int
    full_name: str
    role: Role
    department_id: Optional[int]
    department_type: Optional[DepartmentType]
    hire_date: Optional[date]
    company_entry_date: Optional[date] = None
    base_allowance: int = DEFAULT_BASE_ALLOWANCE
    gender: Optional[Gender] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def effective_hire_date(self) -> Optional[date]:
        return self.company_entry_date or self.hire_date

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    type: DepartmentType
