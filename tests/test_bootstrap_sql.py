from __future__ import annotations

from pathlib import Path

from src.leave_portal.leave_portal.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use

DATABASE_DIR = Path(__file__).resolve().parents[1] / "database"


def test_splitter_ignores_semicolons_in_quotes_and_comments():
    sql = """
    -- first; not a statement
    INSERT INTO t (a) VALUES ('x;y');
    INSERT INTO t (a) VALUES ("it's; fine"); -- trailing; comment
    SELECT 1
    """
    stmts = list(_iter_sql_statements(sql))
    assert stmts == [
        "INSERT INTO t (a) VALUES ('x;y')",
        "INSERT INTO t (a) VALUES (\"it's; fine\")",
        "SELECT 1",
    ]


def test_escaped_quote_does_not_end_string():
    stmts = list(_iter_sql_statements("INSERT INTO t VALUES ('a\\';b');SELECT 2;"))
    assert stmts == ["INSERT INTO t VALUES ('a\\';b')", "SELECT 2"]


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE a (id INT);"
    assert [s for s in _iter_sql_statements(_strip_create_db_and_use(sql))] == ["CREATE TABLE a (id INT)"]


def test_schema_defines_every_leave_table():
    sql = _strip_create_db_and_use((DATABASE_DIR / "schema.sql").read_text(encoding="utf-8"))
    stmts = list(_iter_sql_statements(sql))
    created = [s.split("(")[0].split()[-1] for s in stmts if s.upper().startswith("CREATE TABLE")]
    for table in (
        "departments",
        "employees",
        "leave_requests",
        "leave_decisions",
        "leave_blackouts",
        "leave_blackout_employees",
    ):
        assert table in created
    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in stmts)


def test_seed_splits_cleanly():
    sql = _strip_create_db_and_use((DATABASE_DIR / "seed.sql").read_text(encoding="utf-8"))
    stmts = list(_iter_sql_statements(sql))
    assert stmts
    assert all(not s.startswith("--") for s in stmts)
