from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import BlackoutPeriod, NewBlackout


class BlackoutRepository(Protocol):
    def create(self, blackout: NewBlackout) -> int:
        raise NotImplementedError

    def get_by_id(self, blackout_id: int) -> Optional[BlackoutPeriod]:
        raise NotImplementedError

    def list_overlapping(self, start: date, end: date) -> Sequence[BlackoutPeriod]:
        """Every period intersecting ``[start, end]``, whatever its scope."""

        raise NotImplementedError

    def list_all(self) -> Sequence[BlackoutPeriod]:
        raise NotImplementedError

    def delete(self, blackout_id: int) -> bool:
        raise NotImplementedError
