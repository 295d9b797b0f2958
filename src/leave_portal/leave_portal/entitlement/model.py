from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Entitlement:
    """Annual allowance and balance of one employee for one calendar year."""

    year: int
    base_allowance: int
    seniority_years: int
    seniority_bonus_days: int
    total_annual_allowance: int
    consumed_days: int
    remaining_days: int

    def to_dict(self) -> dict:
        return asdict(self)
