from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from src.leave_portal.leave_portal.auth.model import Principal
from src.leave_portal.leave_portal.auth.provider import JWTAuthProvider
from src.leave_portal.leave_portal.blackouts.model import BlackoutPeriod
from src.leave_portal.leave_portal.container import wire
from src.leave_portal.leave_portal.core.enums import DecisionType, DepartmentType, EmployeeStatus, Gender, LeaveStatus, Role
from src.leave_portal.leave_portal.core.policy import LeavePolicy
from src.leave_portal.leave_portal.employees.model import Department, Employee
from src.leave_portal.leave_portal.leaves.model import Decision, LeaveRequest

TODAY = date(2025, 6, 1)
JWT_SECRET = "test-jwt-secret"


class FakeEmployeeRepo:
    def __init__(self):
        self._rows: dict[int, Employee] = {}

    def add(self, employee: Employee) -> Employee:
        self._rows[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id):
        return self._rows.get(int(employee_id))

    def list_by_ids(self, employee_ids):
        return [self._rows[i] for i in sorted(set(int(x) for x in employee_ids)) if i in self._rows]

    def list_active_by_role(self, role, *, department_id=None):
        out = [
            e
            for e in self._rows.values()
            if e.role == role
            and e.status == EmployeeStatus.ACTIVE
            and (department_id is None or e.department_id == department_id)
        ]
        return sorted(out, key=lambda e: e.employee_id)


class FakeDepartmentRepo:
    def __init__(self, departments):
        self._rows = {d.department_id: d for d in departments}

    def get_by_id(self, department_id):
        return self._rows.get(int(department_id))

    def list_all(self):
        return [self._rows[k] for k in sorted(self._rows)]


class FakeLeaveRepo:
    def __init__(self, employees: FakeEmployeeRepo):
        self._employees = employees
        self._lock = threading.Lock()
        self._next_id = 1
        self.rows: dict[int, LeaveRequest] = {}

    def create(self, request):
        with self._lock:
            rid = self._next_id
            self._next_id += 1
            self.rows[rid] = LeaveRequest(
                request_id=rid,
                employee_id=request.employee_id,
                leave_type=request.leave_type,
                start_date=request.start_date,
                end_date=request.end_date,
                reason=request.reason,
                status=LeaveStatus.SUBMITTED,
                current_assignee_id=request.current_assignee_id,
                created_at=datetime(2025, 6, 1, 9, 0) + timedelta(minutes=rid),
                version=1,
            )
            return rid

    def get_by_id(self, request_id):
        return self.rows.get(int(request_id))

    def list_for_employee(self, employee_id):
        return [r for r in self.rows.values() if r.employee_id == int(employee_id)]

    def list_mine(self, employee_id, *, skip, take):
        mine = sorted(self.list_for_employee(employee_id), key=lambda r: r.request_id, reverse=True)
        return mine[skip:skip + take]

    def list_inbox(self, assignee_id, *, skip, take):
        inbox = [
            r
            for r in self.rows.values()
            if r.current_assignee_id == int(assignee_id) and r.status in {LeaveStatus.SUBMITTED, LeaveStatus.PENDING}
        ]
        return sorted(inbox, key=lambda r: r.request_id)[skip:skip + take]

    def list_approved_overlapping(self, start, end, *, department_id=None):
        out = []
        for r in sorted(self.rows.values(), key=lambda r: r.request_id):
            if r.status != LeaveStatus.APPROVED or r.start_date > end or r.end_date < start:
                continue
            if department_id is not None and self._employees.get_by_id(r.employee_id).department_id != department_id:
                continue
            out.append(r)
        return out

    def compare_and_set(self, request_id, *, expected_version, expected_status, new_status, new_assignee_id):
        with self._lock:
            cur = self.rows.get(int(request_id))
            if cur is None or cur.version != expected_version or cur.status != expected_status:
                return False
            self.rows[int(request_id)] = LeaveRequest(
                request_id=cur.request_id,
                employee_id=cur.employee_id,
                leave_type=cur.leave_type,
                start_date=cur.start_date,
                end_date=cur.end_date,
                reason=cur.reason,
                status=new_status,
                current_assignee_id=new_assignee_id,
                created_at=cur.created_at,
                updated_at=datetime(2025, 6, 2, 10, 0),
                version=cur.version + 1,
            )
            return True

    # test helper: place a row directly, bypassing submission
    def seed(self, *, employee_id, start_date, end_date, status, leave_type="ANNUAL_PAID", assignee_id=None):
        with self._lock:
            rid = self._next_id
            self._next_id += 1
            self.rows[rid] = LeaveRequest(
                request_id=rid,
                employee_id=employee_id,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                status=status,
                current_assignee_id=assignee_id,
                version=1,
            )
            return rid


class FakeDecisionRepo:
    def __init__(self, leaves: FakeLeaveRepo):
        self._leaves = leaves
        self._lock = threading.Lock()
        self.rows: list[Decision] = []

    def append(self, decision):
        with self._lock:
            did = len(self.rows) + 1
            self.rows.append(
                Decision(
                    decision_id=did,
                    request_id=decision.request_id,
                    decision_type=decision.decision_type,
                    actor_id=decision.actor_id,
                    target_employee_id=decision.target_employee_id,
                    target_role=decision.target_role,
                    comment=decision.comment,
                    created_at=datetime(2025, 6, 1, 12, 0) + timedelta(seconds=did),
                )
            )
            return did

    def list_for_request(self, request_id):
        return sorted(
            (d for d in self.rows if d.request_id == int(request_id)),
            key=lambda d: (d.created_at, d.decision_id),
        )

    def _newest_first(self, rows, skip, take):
        return sorted(rows, key=lambda d: d.decision_id, reverse=True)[skip:skip + take]

    def list_by_actor(self, actor_id, *, skip, take):
        return self._newest_first([d for d in self.rows if d.actor_id == int(actor_id)], skip, take)

    def list_by_owner(self, employee_id, *, skip, take):
        owned = {r.request_id for r in self._leaves.list_for_employee(employee_id)}
        return self._newest_first([d for d in self.rows if d.request_id in owned], skip, take)

    def list_all(self, *, skip, take):
        return self._newest_first(list(self.rows), skip, take)

    def list_final_between(self, start, end):
        final = {DecisionType.APPROVE, DecisionType.REJECT}
        return [d for d in self.rows if d.decision_type in final and start <= d.created_at < end]

    def first_routed_to(self, request_ids, role):
        wanted = {int(i) for i in request_ids}
        out = {}
        for d in self.rows:
            if d.request_id in wanted and d.target_role == role:
                out[d.request_id] = min(out.get(d.request_id, d.created_at), d.created_at)
        return out

    def count_awaiting_routed_to(self, role):
        routed = {d.request_id for d in self.rows if d.target_role == role}
        return sum(
            1
            for rid in routed
            if self._leaves.rows[rid].status in {LeaveStatus.SUBMITTED, LeaveStatus.PENDING}
        )


class FakeBlackoutRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, BlackoutPeriod] = {}

    def create(self, blackout):
        bid = self._next_id
        self._next_id += 1
        self.rows[bid] = BlackoutPeriod(
            blackout_id=bid,
            title=blackout.title,
            reason=blackout.reason,
            start_date=blackout.start_date,
            end_date=blackout.end_date,
            department_id=blackout.department_id,
            employee_ids=frozenset(blackout.employee_ids),
            created_by=blackout.created_by,
        )
        return bid

    def add(self, **kwargs) -> BlackoutPeriod:
        bid = self._next_id
        self._next_id += 1
        period = BlackoutPeriod(blackout_id=bid, **kwargs)
        self.rows[bid] = period
        return period

    def get_by_id(self, blackout_id):
        return self.rows.get(int(blackout_id))

    def list_overlapping(self, start, end):
        return [p for p in self.rows.values() if p.start_date <= end and p.end_date >= start]

    def list_all(self):
        return list(self.rows.values())

    def delete(self, blackout_id):
        return self.rows.pop(int(blackout_id), None) is not None


class FakeTransactionManager:
    """Serialises submissions per employee; request scopes do not lock, like the READ COMMITTED scope."""

    def __init__(self):
        self._locks: dict[int, threading.Lock] = {}
        self._guard = threading.Lock()
        self.entered: list[tuple[str, int]] = []

    @contextmanager
    def employee_scope(self, employee_id):
        with self._guard:
            lock = self._locks.setdefault(int(employee_id), threading.Lock())
        with lock:
            self.entered.append(("employee", int(employee_id)))
            yield

    @contextmanager
    def request_scope(self, request_id):
        self.entered.append(("request", int(request_id)))
        yield


def _employee(employee_id, role, department_id, department_type, *, hire=date(2020, 1, 1), gender=Gender.MALE, **kw):
    return Employee(
        employee_id=employee_id,
        full_name=f"Employee {employee_id}",
        role=role,
        department_id=department_id,
        department_type=department_type,
        hire_date=hire,
        gender=gender,
        **kw,
    )


def build_world(policy: LeavePolicy = None) -> SimpleNamespace:
    departments = [
        Department(1, "Direction", DepartmentType.OTHERS),
        Department(2, "Finance & Administration", DepartmentType.DAF),
        Department(3, "Information Systems", DepartmentType.DSI),
        Department(4, "Field Operations", DepartmentType.OPERATIONS),
    ]
    employees = FakeEmployeeRepo()
    ceo = employees.add(_employee(1, Role.CEO, 1, DepartmentType.OTHERS, hire=date(1990, 1, 1), gender=Gender.FEMALE))
    accountant = employees.add(_employee(2, Role.ACCOUNTANT, 2, DepartmentType.DAF, hire=date(2012, 9, 3)))
    daf_employee = employees.add(_employee(3, Role.EMPLOYEE, 2, DepartmentType.DAF, gender=Gender.FEMALE))
    dsi_head = employees.add(_employee(4, Role.DEPT_HEAD, 3, DepartmentType.DSI, hire=date(2015, 5, 18)))
    dsi_employee = employees.add(_employee(5, Role.EMPLOYEE, 3, DepartmentType.DSI, gender=Gender.FEMALE))
    ops_head = employees.add(_employee(6, Role.DEPT_HEAD, 4, DepartmentType.OPERATIONS, hire=date(2008, 11, 10)))
    ops_service_head = employees.add(_employee(7, Role.SERVICE_HEAD, 4, DepartmentType.OPERATIONS))
    ops_employee = employees.add(_employee(8, Role.EMPLOYEE, 4, DepartmentType.OPERATIONS))

    leaves = FakeLeaveRepo(employees)
    decisions = FakeDecisionRepo(leaves)
    blackouts = FakeBlackoutRepo()
    tx = FakeTransactionManager()
    auth = JWTAuthProvider(JWT_SECRET)

    container = wire(
        employees_repo=employees,
        departments_repo=FakeDepartmentRepo(departments),
        leaves_repo=leaves,
        decisions_repo=decisions,
        blackouts_repo=blackouts,
        tx=tx,
        auth_provider=auth,
        policy=policy or LeavePolicy(),
        clock=lambda: TODAY,
    )

    def principal(employee: Employee) -> Principal:
        return Principal(employee_id=employee.employee_id, role=employee.role)

    return SimpleNamespace(
        container=container,
        service=container.leave_service,
        blackout_service=container.blackout_service,
        employees=employees,
        leaves=leaves,
        decisions=decisions,
        blackouts=blackouts,
        tx=tx,
        auth=auth,
        principal=principal,
        ceo=ceo,
        accountant=accountant,
        daf_employee=daf_employee,
        dsi_head=dsi_head,
        dsi_employee=dsi_employee,
        ops_head=ops_head,
        ops_service_head=ops_service_head,
        ops_employee=ops_employee,
    )


@pytest.fixture()
def world():
    return build_world()


@pytest.fixture()
def make_world():
    return build_world
