from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.enums import Gender
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class LeaveTypeOption:
    code: str
    label: str
    allowed_genders: Optional[frozenset[Gender]] = None
    # Hidden codes exist on historical rows but can no longer be requested.
    hidden: bool = False

    def offerable_to(self, gender: Optional[Gender]) -> bool:
        if self.hidden:
            return False
        if self.allowed_genders is None:
            return True
        return gender is not None and gender in self.allowed_genders


_FEMALE_ONLY = frozenset({Gender.FEMALE})

DEFAULT_LEAVE_TYPES: tuple[LeaveTypeOption, ...] = (
    LeaveTypeOption("ANNUAL_PAID", "Annual paid leave"),
    LeaveTypeOption("FAMILY_EXCEPTIONAL", "Exceptional family leave"),
    LeaveTypeOption("MENSTRUAL", "Menstrual leave", allowed_genders=_FEMALE_ONLY),
    LeaveTypeOption("CONGE_M", "Menstrual leave (legacy)", allowed_genders=_FEMALE_ONLY, hidden=True),
    LeaveTypeOption("MATERNITY_PATERNITY", "Maternity / paternity leave"),
    LeaveTypeOption("SICKNESS", "Sick leave"),
    LeaveTypeOption("UNPAID", "Unpaid leave"),
    LeaveTypeOption("TRAINING", "Training leave"),
    LeaveTypeOption("ANNUAL", "Annual leave (legacy)", hidden=True),
    LeaveTypeOption("SICK", "Sick leave (legacy)", hidden=True),
    LeaveTypeOption("OTHER", "Other (legacy)", hidden=True),
)


class LeaveTypeCatalog:
    def __init__(self, options: Sequence[LeaveTypeOption] = DEFAULT_LEAVE_TYPES):
        self._options = {o.code: o for o in options}

    def get(self, code: str) -> Optional[LeaveTypeOption]:
        return self._options.get((code or "").strip().upper())

    def options_for(self, gender: Optional[Gender]) -> list[LeaveTypeOption]:
        return [o for o in self._options.values() if o.offerable_to(gender)]

    def require_offerable(self, code: str, gender: Optional[Gender]) -> LeaveTypeOption:
        option = self.get(code)
        if option is None or option.hidden:
            raise ValidationError(
                "Unknown leave type",
                code="INVALID_LEAVE_TYPE",
                details={"type": code},
            )
        if not option.offerable_to(gender):
            raise ValidationError(
                "This leave type is not available to the employee",
                code="LEAVE_TYPE_NOT_ALLOWED",
                details={"type": option.code},
            )
        return option
