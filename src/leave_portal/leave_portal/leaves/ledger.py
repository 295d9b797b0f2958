from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence

from ..common.pagination import Page, PageRequest
from ..core.enums import LeaveStatus, Role
from .decision_repository import DecisionRepository
from .model import Decision, NewDecision
from .state_machine import LeaveStateMachine


class DecisionLedger:
    """Audit trail of every decision on every leave request.

    Corrections are new decisions; nothing here edits or removes a row.
    """

    def __init__(self, decisions: DecisionRepository, state_machine: Optional[LeaveStateMachine] = None):
        self._decisions = decisions
        self._state_machine = state_machine or LeaveStateMachine()

    def append(self, decision: NewDecision) -> int:
        return self._decisions.append(decision)

    def history_for_request(self, request_id: int) -> Sequence[Decision]:
        return self._decisions.list_for_request(int(request_id))

    def history_for_actor(self, actor_id: int, page: PageRequest) -> Page[Decision]:
        items = self._decisions.list_by_actor(int(actor_id), skip=page.skip, take=page.take)
        return Page(items=items, page=page.page, take=page.take)

    def history_for_owner(self, employee_id: int, page: PageRequest) -> Page[Decision]:
        items = self._decisions.list_by_owner(int(employee_id), skip=page.skip, take=page.take)
        return Page(items=items, page=page.page, take=page.take)

    def history_all(self, page: PageRequest) -> Page[Decision]:
        items = self._decisions.list_all(skip=page.skip, take=page.take)
        return Page(items=items, page=page.page, take=page.take)

    def final_decisions_between(self, start: datetime, end: datetime) -> Sequence[Decision]:
        return self._decisions.list_final_between(start, end)

    def first_routed_to(self, request_ids: Iterable[int], role: Role) -> Dict[int, datetime]:
        return self._decisions.first_routed_to(request_ids, role)

    def count_awaiting_routed_to(self, role: Role) -> int:
        return self._decisions.count_awaiting_routed_to(role)

    def replay_status(self, request_id: int) -> Optional[LeaveStatus]:
        return self._state_machine.replay(self.history_for_request(request_id))
