from __future__ import annotations

from enum import Enum
from typing import Iterable, Mapping, Optional

from ..core.enums import DecisionType, LeaveStatus
from ..core.exceptions import AuthorizationError, StateError
from .model import Decision, LeaveRequest


class Phase(str, Enum):
    """Machine state. SUBMITTED and PENDING are one phase; the difference is a label."""

    AWAITING_DECISION = "AWAITING_DECISION"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


_PHASE_BY_STATUS: Mapping[LeaveStatus, Phase] = {
    LeaveStatus.SUBMITTED: Phase.AWAITING_DECISION,
    LeaveStatus.PENDING: Phase.AWAITING_DECISION,
    LeaveStatus.APPROVED: Phase.APPROVED,
    LeaveStatus.REJECTED: Phase.REJECTED,
    LeaveStatus.CANCELLED: Phase.CANCELLED,
}

TERMINAL_PHASES = frozenset({Phase.APPROVED, Phase.REJECTED, Phase.CANCELLED})

TRANSITIONS: Mapping[tuple[Phase, DecisionType], LeaveStatus] = {
    (Phase.AWAITING_DECISION, DecisionType.APPROVE): LeaveStatus.APPROVED,
    (Phase.AWAITING_DECISION, DecisionType.REJECT): LeaveStatus.REJECTED,
    (Phase.AWAITING_DECISION, DecisionType.ESCALATE): LeaveStatus.PENDING,
    (Phase.AWAITING_DECISION, DecisionType.CANCEL): LeaveStatus.CANCELLED,
}

_LABELS: Mapping[LeaveStatus, str] = {
    LeaveStatus.SUBMITTED: "Submitted",
    LeaveStatus.PENDING: "Escalated",
    LeaveStatus.APPROVED: "Approved",
    LeaveStatus.REJECTED: "Rejected",
    LeaveStatus.CANCELLED: "Cancelled",
}


def phase_of(status: LeaveStatus) -> Phase:
    return _PHASE_BY_STATUS[LeaveStatus(status)]


def is_terminal(status: LeaveStatus) -> bool:
    return phase_of(status) in TERMINAL_PHASES


def display_label(status: LeaveStatus) -> str:
    return _LABELS[LeaveStatus(status)]


class LeaveStateMachine:
    """Legal transitions and who may trigger them.

    Guards run in a fixed order so callers always get the most useful error:
    terminal state, then requester-only cancel, then assignee-only decisions,
    then self-decision.
    """

    def next_status(self, status: LeaveStatus, action: DecisionType) -> LeaveStatus:
        phase = phase_of(status)
        if phase in TERMINAL_PHASES:
            raise StateError(
                f"Request is already {LeaveStatus(status).value}",
                code="TERMINAL_STATE",
                details={"status": LeaveStatus(status).value, "action": DecisionType(action).value},
            )
        target = TRANSITIONS.get((phase, DecisionType(action)))
        if target is None:
            raise StateError(
                f"{DecisionType(action).value} is not allowed while {LeaveStatus(status).value}",
                code="ILLEGAL_TRANSITION",
                details={"status": LeaveStatus(status).value, "action": DecisionType(action).value},
            )
        return target

    def authorize(
        self,
        request: LeaveRequest,
        action: DecisionType,
        actor_id: int,
        *,
        allow_self_decision: bool = False,
    ) -> None:
        if is_terminal(request.status):
            # next_status raises the TERMINAL_STATE error
            self.next_status(request.status, action)

        actor_id = int(actor_id)
        if action == DecisionType.CANCEL:
            if actor_id != request.employee_id:
                raise AuthorizationError(
                    "Only the requester can cancel a leave request",
                    code="NOT_REQUESTER",
                    details={"requestId": request.request_id},
                )
            return

        if request.current_assignee_id is None or actor_id != request.current_assignee_id:
            raise AuthorizationError(
                "Only the current assignee can decide on this request",
                code="NOT_ASSIGNEE",
                details={"requestId": request.request_id, "currentAssigneeId": request.current_assignee_id},
            )
        if actor_id == request.employee_id and not allow_self_decision:
            raise AuthorizationError(
                "You cannot decide on your own leave request",
                code="SELF_DECISION",
                details={"requestId": request.request_id},
            )

    def transition(
        self,
        request: LeaveRequest,
        action: DecisionType,
        actor_id: int,
        *,
        allow_self_decision: bool = False,
    ) -> LeaveStatus:
        self.authorize(request, action, actor_id, allow_self_decision=allow_self_decision)
        return self.next_status(request.status, action)

    def replay(self, decisions: Iterable[Decision]) -> Optional[LeaveStatus]:
        """Fold an ordered decision trail into the status it implies (None for an empty trail)."""

        status: Optional[LeaveStatus] = None
        for d in decisions:
            if d.decision_type == DecisionType.SUBMIT:
                if status is not None:
                    raise StateError("Ledger contains more than one submission", code="CORRUPT_LEDGER",
                                     details={"requestId": d.request_id})
                status = LeaveStatus.SUBMITTED
                continue
            if status is None:
                raise StateError("Ledger decision precedes the submission", code="CORRUPT_LEDGER",
                                 details={"requestId": d.request_id, "decisionId": d.decision_id})
            status = self.next_status(status, d.decision_type)
        return status
