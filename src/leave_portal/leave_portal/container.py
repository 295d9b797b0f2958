from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .auth.provider import AuthProvider, JWTAuthProvider
from .blackouts.checker import BlackoutConflictChecker
from .blackouts.mysql_blackout_repository import MySQLBlackoutRepository
from .blackouts.repository import BlackoutRepository
from .blackouts.service import BlackoutService
from .common.datetime_utils import today_utc
from .core.policy import LeavePolicy
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_transaction_manager import MySQLTransactionManager
from .database.transaction_manager import TransactionManager
from .employees.mysql_employee_repository import MySQLDepartmentRepository, MySQLEmployeeRepository
from .employees.repository import DepartmentRepository, EmployeeRepository
from .entitlement.calculator import EntitlementCalculator
from .entitlement.leave_types import LeaveTypeCatalog
from .entitlement.seniority import SeniorityBonusTable
from .leaves.decision_repository import DecisionRepository
from .leaves.ledger import DecisionLedger
from .leaves.mysql_decision_repository import MySQLDecisionRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .leaves.state_machine import LeaveStateMachine
from .routing.resolver import RoutingResolver


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    policy: LeavePolicy

    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    leaves_repo: LeaveRepository
    decisions_repo: DecisionRepository
    blackouts_repo: BlackoutRepository
    tx: TransactionManager

    auth_provider: AuthProvider
    ledger: DecisionLedger
    leave_service: LeaveService
    blackout_service: BlackoutService


def wire(
    *,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    leaves_repo: LeaveRepository,
    decisions_repo: DecisionRepository,
    blackouts_repo: BlackoutRepository,
    tx: TransactionManager,
    auth_provider: AuthProvider,
    policy: Optional[LeavePolicy] = None,
    clock: Callable[[], date] = today_utc,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    policy = policy or LeavePolicy()

    state_machine = LeaveStateMachine()
    ledger = DecisionLedger(decisions_repo, state_machine)
    calculator = EntitlementCalculator(
        SeniorityBonusTable.from_pairs(policy.seniority_bonus_table),
        allowance_leave_types=policy.allowance_leave_types,
    )
    resolver = RoutingResolver(employees_repo, skip_vacant_levels=policy.skip_vacant_approver_levels)

    leave_service = LeaveService(
        leaves_repo,
        ledger,
        employees_repo,
        blackouts_repo,
        resolver,
        tx,
        calculator=calculator,
        checker=BlackoutConflictChecker(),
        state_machine=state_machine,
        catalog=LeaveTypeCatalog(),
        policy=policy,
        clock=clock,
        departments=departments_repo,
    )
    blackout_service = BlackoutService(blackouts_repo, employees_repo, departments_repo)

    return Container(
        conn=conn,
        policy=policy,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        leaves_repo=leaves_repo,
        decisions_repo=decisions_repo,
        blackouts_repo=blackouts_repo,
        tx=tx,
        auth_provider=auth_provider,
        ledger=ledger,
        leave_service=leave_service,
        blackout_service=blackout_service,
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    policy: Optional[LeavePolicy] = None,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)
    policy = policy or LeavePolicy()

    return wire(
        employees_repo=MySQLEmployeeRepository(conn, default_base_allowance=policy.default_base_allowance),
        departments_repo=MySQLDepartmentRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        decisions_repo=MySQLDecisionRepository(conn),
        blackouts_repo=MySQLBlackoutRepository(conn),
        tx=MySQLTransactionManager(conn),
        auth_provider=JWTAuthProvider(jwt_secret, jwt_algorithm),
        policy=policy,
        conn=conn,
    )
