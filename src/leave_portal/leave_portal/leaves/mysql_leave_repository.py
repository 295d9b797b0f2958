from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    r.request_id, r.employee_id, r.leave_type, r.start_date, r.end_date, r.reason,
    r.status, r.current_assignee_id, r.created_at, r.updated_at, r.version
"""


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=r["leave_type"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        current_assignee_id=int(r["current_assignee_id"]) if r.get("current_assignee_id") is not None else None,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        version=int(r.get("version") or 1),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: NewLeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type, start_date, end_date, reason,
                    status, current_assignee_id, version
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    int(request.employee_id),
                    request.leave_type,
                    request.start_date,
                    request.end_date,
                    request.reason,
                    LeaveStatus.SUBMITTED.value,
                    int(request.current_assignee_id),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests r WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests r
                WHERE r.employee_id=%s
                ORDER BY r.start_date ASC, r.request_id ASC
                """,
                (int(employee_id),),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_mine(self, employee_id: int, *, skip: int, take: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests r
                WHERE r.employee_id=%s
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(employee_id), int(take), int(skip)),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_inbox(self, assignee_id: int, *, skip: int, take: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests r
                WHERE r.current_assignee_id=%s AND r.status IN (%s,%s)
                ORDER BY r.created_at ASC, r.request_id ASC
                LIMIT %s OFFSET %s
                """,
                (
                    int(assignee_id),
                    LeaveStatus.SUBMITTED.value,
                    LeaveStatus.PENDING.value,
                    int(take),
                    int(skip),
                ),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_approved_overlapping(
        self,
        start: date,
        end: date,
        *,
        department_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["r.status=%s", "r.start_date <= %s", "r.end_date >= %s"]
        params: list[object] = [LeaveStatus.APPROVED.value, end, start]
        if department_id is not None:
            clauses.append("e.department_id=%s")
            params.append(int(department_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests r
                JOIN employees e ON e.employee_id = r.employee_id
                WHERE {where}
                ORDER BY r.start_date ASC, r.request_id ASC
                """,
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def compare_and_set(
        self,
        request_id: int,
        *,
        expected_version: int,
        expected_status: LeaveStatus,
        new_status: LeaveStatus,
        new_assignee_id: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, current_assignee_id=%s, version=version+1, updated_at=UTC_TIMESTAMP()
                WHERE request_id=%s AND version=%s AND status=%s
                """,
                (
                    LeaveStatus(new_status).value,
                    new_assignee_id,
                    int(request_id),
                    int(expected_version),
                    LeaveStatus(expected_status).value,
                ),
            )
            return cur.rowcount == 1
