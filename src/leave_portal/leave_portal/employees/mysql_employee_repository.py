from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_BASE_ALLOWANCE
from ..core.enums import DepartmentType, EmployeeStatus, Gender, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository

_EMPLOYEE_COLUMNS = """
    e.employee_id, e.full_name, e.role, e.department_id, d.type AS department_type,
    e.hire_date, e.company_entry_date, e.base_allowance, e.gender, e.status
"""


def _to_employee(r: dict, default_base_allowance: int = DEFAULT_BASE_ALLOWANCE) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        department_id=r.get("department_id"),
        department_type=DepartmentType(r["department_type"]) if r.get("department_type") else None,
        hire_date=r.get("hire_date"),
        company_entry_date=r.get("company_entry_date"),
        base_allowance=int(r["base_allowance"]) if r.get("base_allowance") is not None else default_base_allowance,
        gender=Gender(r["gender"]) if r.get("gender") else None,
        status=EmployeeStatus(r.get("status") or EmployeeStatus.ACTIVE.value),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_base_allowance: int = DEFAULT_BASE_ALLOWANCE):
        self._conn_factory = conn_factory
        self._default_base_allowance = default_base_allowance

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees e
                LEFT JOIN departments d ON d.department_id = e.department_id
                WHERE e.employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r, self._default_base_allowance) if r else None

    def list_by_ids(self, employee_ids: Sequence[int]) -> Sequence[Employee]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees e
                LEFT JOIN departments d ON d.department_id = e.department_id
                WHERE e.employee_id IN ({in_clause(ids)})
                ORDER BY e.employee_id
                """,
                tuple(ids),
            )
            return [_to_employee(r, self._default_base_allowance) for r in fetchall(cur)]

    def list_active_by_role(self, role: Role, *, department_id: Optional[int] = None) -> Sequence[Employee]:
        clauses = ["e.role=%s", "e.status=%s"]
        params: list[object] = [role.value, EmployeeStatus.ACTIVE.value]
        if department_id is not None:
            clauses.append("e.department_id=%s")
            params.append(int(department_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees e
                LEFT JOIN departments d ON d.department_id = e.department_id
                WHERE {where}
                ORDER BY e.employee_id ASC
                """,
                tuple(params),
            )
            return [_to_employee(r, self._default_base_allowance) for r in fetchall(cur)]


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department_id, name, type FROM departments WHERE department_id=%s",
                (int(department_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Department(department_id=int(r["department_id"]), name=r["name"], type=DepartmentType(r["type"]))

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, name, type FROM departments ORDER BY department_id ASC")
            return [
                Department(department_id=int(r["department_id"]), name=r["name"], type=DepartmentType(r["type"]))
                for r in fetchall(cur)
            ]
