from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import BlackoutPeriod, NewBlackout
from .repository import BlackoutRepository

_COLUMNS = "blackout_id, title, reason, start_date, end_date, department_id, created_by, created_at"


class MySQLBlackoutRepository(BlackoutRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, blackout: NewBlackout) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_blackouts(title, reason, start_date, end_date, department_id, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    blackout.title,
                    blackout.reason,
                    blackout.start_date,
                    blackout.end_date,
                    blackout.department_id,
                    int(blackout.created_by),
                ),
            )
            blackout_id = int(cur.lastrowid)
            if blackout.employee_ids:
                cur.executemany(
                    "INSERT INTO leave_blackout_employees(blackout_id, employee_id) VALUES(%s,%s)",
                    [(blackout_id, int(eid)) for eid in blackout.employee_ids],
                )
            return blackout_id

    def get_by_id(self, blackout_id: int) -> Optional[BlackoutPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_blackouts WHERE blackout_id=%s", (int(blackout_id),))
            r = fetchone(cur)
            if not r:
                return None
            return self._hydrate(cur, [r])[0]

    def list_overlapping(self, start: date, end: date) -> Sequence[BlackoutPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_blackouts
                WHERE start_date <= %s AND end_date >= %s
                ORDER BY start_date ASC, blackout_id ASC
                """,
                (end, start),
            )
            return self._hydrate(cur, fetchall(cur))

    def list_all(self) -> Sequence[BlackoutPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_blackouts ORDER BY start_date DESC, blackout_id DESC")
            return self._hydrate(cur, fetchall(cur))

    def delete(self, blackout_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_blackout_employees WHERE blackout_id=%s", (int(blackout_id),))
            cur.execute("DELETE FROM leave_blackouts WHERE blackout_id=%s", (int(blackout_id),))
            return cur.rowcount > 0

    @staticmethod
    def _hydrate(cur, rows: list[dict]) -> list[BlackoutPeriod]:
        if not rows:
            return []
        ids = [int(r["blackout_id"]) for r in rows]
        cur.execute(
            f"""
            SELECT blackout_id, employee_id
            FROM leave_blackout_employees
            WHERE blackout_id IN ({in_clause(ids)})
            """,
            tuple(ids),
        )
        members: dict[int, set[int]] = {}
        for m in fetchall(cur):
            members.setdefault(int(m["blackout_id"]), set()).add(int(m["employee_id"]))

        return [
            BlackoutPeriod(
                blackout_id=int(r["blackout_id"]),
                title=r["title"],
                reason=r.get("reason"),
                start_date=r["start_date"],
                end_date=r["end_date"],
                department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
                employee_ids=frozenset(members.get(int(r["blackout_id"]), set())),
                created_by=r.get("created_by"),
                created_at=r.get("created_at"),
            )
            for r in rows
        ]
