from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection

# ER_LOCK_DEADLOCK, ER_LOCK_WAIT_TIMEOUT
_RETRYABLE_ERRNOS = frozenset({1213, 1205})

# Connection of the transaction currently open on this thread, if any.
_active = threading.local()


def _active_connection():
    return getattr(_active, "conn", None)


@contextmanager
def db_transaction(conn_factory: DatabaseConnection, *, isolation_level: str = "SERIALIZABLE") -> Iterator[Any]:
    """Open one transaction shared by every ``db_cursor`` call on this thread.

    Nested scopes join the outer transaction; only the outermost one commits.
    """

    existing = _active_connection()
    if existing is not None:
        yield existing
        return

    conn = conn_factory.connect()
    conn.start_transaction(isolation_level=isolation_level)
    _active.conn = conn
    try:
        yield conn
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        if e.errno in _RETRYABLE_ERRNOS:
            raise ConflictError("Concurrent update detected, please retry", details={"errno": e.errno}) from e
        raise
    except Exception:
        conn.rollback()
        raise
    finally:
        _active.conn = None
        conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    shared = _active_connection()
    if shared is not None:
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must not pass an empty sequence."""

    return ",".join(["%s"] * len(values))
