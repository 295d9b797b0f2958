from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Serialisation scopes used by the leave workflow.

    ``employee_scope`` serialises submissions of one employee so the balance check
    sees every request already persisted for that employee. ``request_scope``
    makes a status change and its ledger row commit (or roll back) together.
    """

    def employee_scope(self, employee_id: int) -> ContextManager[None]:
        raise NotImplementedError

    def request_scope(self, request_id: int) -> ContextManager[None]:
        raise NotImplementedError
