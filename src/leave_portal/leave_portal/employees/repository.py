from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Department, Employee


class EmployeeRepository(Protocol):
    """Read-only view over the HR directory.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_ids(self, employee_ids: Sequence[int]) -> Sequence[Employee]:
        raise NotImplementedError

    def list_active_by_role(self, role: Role, *, department_id: Optional[int] = None) -> Sequence[Employee]:
        """Active holders of ``role`` ordered by employee_id ascending."""

        raise NotImplementedError


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        """Every department ordered by department_id."""

        raise NotImplementedError
