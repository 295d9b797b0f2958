from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Sequence

from ..core.enums import DecisionType, LeaveStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .decision_repository import DecisionRepository
from .model import Decision, NewDecision

_COLUMNS = """
    d.decision_id, d.request_id, d.decision_type, d.actor_id,
    d.target_employee_id, d.target_role, d.comment, d.created_at
"""


def _to_decision(r: dict) -> Decision:
    return Decision(
        decision_id=int(r["decision_id"]),
        request_id=int(r["request_id"]),
        decision_type=DecisionType(r["decision_type"]),
        actor_id=int(r["actor_id"]),
        target_employee_id=int(r["target_employee_id"]) if r.get("target_employee_id") is not None else None,
        target_role=Role(r["target_role"]) if r.get("target_role") else None,
        comment=r.get("comment"),
        created_at=r.get("created_at"),
    )


class MySQLDecisionRepository(DecisionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, decision: NewDecision) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_decisions(
                    request_id, decision_type, actor_id, target_employee_id, target_role, comment
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(decision.request_id),
                    decision.decision_type.value,
                    int(decision.actor_id),
                    decision.target_employee_id,
                    decision.target_role.value if decision.target_role else None,
                    decision.comment,
                ),
            )
            return int(cur.lastrowid)

    def list_for_request(self, request_id: int) -> Sequence[Decision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_decisions d
                WHERE d.request_id=%s
                ORDER BY d.created_at ASC, d.decision_id ASC
                """,
                (int(request_id),),
            )
            return [_to_decision(r) for r in fetchall(cur)]

    def list_by_actor(self, actor_id: int, *, skip: int, take: int) -> Sequence[Decision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_decisions d
                WHERE d.actor_id=%s
                ORDER BY d.created_at DESC, d.decision_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(actor_id), int(take), int(skip)),
            )
            return [_to_decision(r) for r in fetchall(cur)]

    def list_by_owner(self, employee_id: int, *, skip: int, take: int) -> Sequence[Decision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_decisions d
                JOIN leave_requests r ON r.request_id = d.request_id
                WHERE r.employee_id=%s
                ORDER BY d.created_at DESC, d.decision_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(employee_id), int(take), int(skip)),
            )
            return [_to_decision(r) for r in fetchall(cur)]

    def list_all(self, *, skip: int, take: int) -> Sequence[Decision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_decisions d
                ORDER BY d.created_at DESC, d.decision_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(take), int(skip)),
            )
            return [_to_decision(r) for r in fetchall(cur)]

    def list_final_between(self, start: datetime, end: datetime) -> Sequence[Decision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_decisions d
                WHERE d.decision_type IN (%s,%s) AND d.created_at >= %s AND d.created_at < %s
                ORDER BY d.created_at ASC, d.decision_id ASC
                """,
                (DecisionType.APPROVE.value, DecisionType.REJECT.value, start, end),
            )
            return [_to_decision(r) for r in fetchall(cur)]

    def first_routed_to(self, request_ids: Iterable[int], role: Role) -> Dict[int, datetime]:
        ids = sorted({int(i) for i in request_ids})
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT d.request_id, MIN(d.created_at) AS reached_at
                FROM leave_decisions d
                WHERE d.target_role=%s AND d.request_id IN ({in_clause(ids)})
                GROUP BY d.request_id
                """,
                (role.value, *ids),
            )
            return {int(r["request_id"]): r["reached_at"] for r in fetchall(cur)}

    def count_awaiting_routed_to(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT r.request_id) AS total
                FROM leave_requests r
                JOIN leave_decisions d ON d.request_id = r.request_id
                WHERE d.target_role=%s AND r.status IN (%s,%s)
                """,
                (role.value, LeaveStatus.SUBMITTED.value, LeaveStatus.PENDING.value),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0
