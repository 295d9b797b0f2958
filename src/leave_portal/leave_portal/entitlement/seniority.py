from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..core.constants import DAYS_PER_YEAR, DEFAULT_SENIORITY_BONUS_TABLE


def years_of_service(hire_date: Optional[date], today: date) -> int:
    """Full years of service: floor((today - hire_date) / 365.25 days), never negative."""

    if hire_date is None or hire_date > today:
        return 0
    return max(0, math.floor((today - hire_date).days / DAYS_PER_YEAR))


@dataclass(frozen=True)
class SeniorityBonusTable:
    """Step function years-of-service -> extra leave days.

    Thresholds are ``(min_years, bonus_days)`` pairs; the bonus of the highest
    threshold reached applies.
    """

    thresholds: tuple[tuple[int, int], ...] = DEFAULT_SENIORITY_BONUS_TABLE

    def __post_init__(self):
        ordered = tuple(sorted((int(y), int(d)) for y, d in self.thresholds))
        previous_years = None
        previous_days = 0
        for years, days in ordered:
            if years < 0 or days < 0:
                raise ValueError("Seniority thresholds must be non-negative")
            if years == previous_years:
                raise ValueError(f"Duplicate seniority threshold for {years} years")
            if days < previous_days:
                raise ValueError("Seniority bonus must not decrease with years of service")
            previous_years, previous_days = years, days
        object.__setattr__(self, "thresholds", ordered)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[int, int]]) -> "SeniorityBonusTable":
        return cls(thresholds=tuple(pairs))

    def bonus_for(self, years: int) -> int:
        bonus = 0
        for min_years, days in self.thresholds:
            if years >= min_years:
                bonus = days
            else:
                break
        return bonus
