from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Protocol, Sequence

from ..core.enums import Role
from .model import Decision, NewDecision


class DecisionRepository(Protocol):
    """Append-only decision storage. No update, no delete."""

    def append(self, decision: NewDecision) -> int:
        raise NotImplementedError

    def list_for_request(self, request_id: int) -> Sequence[Decision]:
        """Oldest first (created_at, then decision_id)."""

        raise NotImplementedError

    def list_by_actor(self, actor_id: int, *, skip: int, take: int) -> Sequence[Decision]:
        raise NotImplementedError

    def list_by_owner(self, employee_id: int, *, skip: int, take: int) -> Sequence[Decision]:
        raise NotImplementedError

    def list_all(self, *, skip: int, take: int) -> Sequence[Decision]:
        raise NotImplementedError

    def list_final_between(self, start: datetime, end: datetime) -> Sequence[Decision]:
        """APPROVE and REJECT decisions created in ``[start, end)``."""

        raise NotImplementedError

    def first_routed_to(self, request_ids: Iterable[int], role: Role) -> Dict[int, datetime]:
        """Earliest time each request was routed to ``role``; unrouted requests are absent."""

        raise NotImplementedError

    def count_awaiting_routed_to(self, role: Role) -> int:
        """Requests still SUBMITTED or PENDING that were routed to ``role`` at least once."""

        raise NotImplementedError
