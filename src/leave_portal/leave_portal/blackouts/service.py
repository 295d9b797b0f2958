from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..auth.model import Principal
from ..common.validators import normalize_ids, optional_text, require_date_range, require_non_empty
from ..core.constants import MAX_BLACKOUT_REASON_LENGTH, MAX_TITLE_LENGTH
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import DepartmentRepository, EmployeeRepository
from .model import BlackoutPeriod, NewBlackout
from .repository import BlackoutRepository

logger = logging.getLogger(__name__)


class BlackoutService:
    """CEO-managed blackout calendar."""

    def __init__(
        self,
        blackouts: BlackoutRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
    ):
        self._blackouts = blackouts
        self._employees = employees
        self._departments = departments

    @staticmethod
    def _require_ceo(principal: Principal) -> None:
        if not principal.is_ceo:
            raise AuthorizationError("Only the CEO can manage blackout periods", code="CEO_ONLY")

    def create(
        self,
        principal: Principal,
        *,
        title: str,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
        department_id: Optional[Any] = None,
        employee_ids: Optional[Iterable[Any]] = None,
    ) -> BlackoutPeriod:
        self._require_ceo(principal)

        title = require_non_empty(title or "", "title", max_len=MAX_TITLE_LENGTH)
        reason_text = optional_text(reason, "reason", max_len=MAX_BLACKOUT_REASON_LENGTH)
        require_date_range(start_date, end_date)
        ids = normalize_ids(employee_ids, "employeeIds")

        dept_id: Optional[int] = None
        if department_id not in (None, ""):
            try:
                dept_id = int(department_id)
            except (TypeError, ValueError):
                raise ValidationError("departmentId must be an integer", details={"field": "departmentId"})

        if dept_id is not None and ids:
            raise ValidationError(
                "A blackout targets either a department or a list of employees, not both",
                code="INVALID_SCOPE",
            )
        if dept_id is not None and self._departments.get_by_id(dept_id) is None:
            raise NotFoundError("Department not found", code="DEPARTMENT_NOT_FOUND", details={"departmentId": dept_id})
        if ids:
            found = {e.employee_id for e in self._employees.list_by_ids(ids)}
            missing = [i for i in ids if i not in found]
            if missing:
                raise NotFoundError(
                    "Some employees do not exist",
                    code="EMPLOYEE_NOT_FOUND",
                    details={"employeeIds": missing},
                )

        blackout_id = self._blackouts.create(
            NewBlackout(
                title=title,
                start_date=start_date,
                end_date=end_date,
                reason=reason_text,
                department_id=dept_id,
                employee_ids=tuple(ids),
                created_by=principal.employee_id,
            )
        )
        logger.info(
            "Blackout %s created by %s for %s..%s (department=%s, employees=%s)",
            blackout_id, principal.employee_id, start_date, end_date, dept_id, len(ids),
        )
        created = self._blackouts.get_by_id(blackout_id)
        if created is None:
            raise NotFoundError("Blackout period not found", details={"blackoutId": blackout_id})
        return created

    def list(self, principal: Principal) -> Sequence[BlackoutPeriod]:
        self._require_ceo(principal)
        return self._blackouts.list_all()

    def delete(self, principal: Principal, blackout_id: int) -> None:
        self._require_ceo(principal)
        if not self._blackouts.delete(int(blackout_id)):
            raise NotFoundError("Blackout period not found", details={"blackoutId": int(blackout_id)})
        logger.info("Blackout %s deleted by %s", blackout_id, principal.employee_id)
