from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from .connection import DatabaseConnection
from .mysql_base import db_transaction
from .transaction_manager import TransactionManager


class MySQLTransactionManager(TransactionManager):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def employee_scope(self, employee_id: int) -> Iterator[None]:
        with db_transaction(self._conn_factory) as conn:
            cur = conn.cursor()
            try:
                # Row lock: a second submission by the same employee waits here.
                cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE", (int(employee_id),))
                cur.fetchall()
            finally:
                cur.close()
            yield

    @contextmanager
    def request_scope(self, request_id: int) -> Iterator[None]:
        # Plain reads; the version compare-and-set on the UPDATE is the guard.
        with db_transaction(self._conn_factory, isolation_level="READ COMMITTED"):
            yield
