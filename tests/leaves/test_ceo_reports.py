from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.leave_portal.leave_portal.core.enums import DepartmentType, LeaveStatus
from src.leave_portal.leave_portal.core.exceptions import AuthorizationError


def _retime(world, decision_id, when):
    idx = decision_id - 1
    world.decisions.rows[idx] = replace(world.decisions.rows[idx], created_at=when)


def _submit(world, employee, start=date(2025, 7, 1), end=date(2025, 7, 2)):
    return world.service.submit(world.principal(employee), leave_type="ANNUAL_PAID", start_date=start, end_date=end)


def test_vacation_counts_cover_today_per_department(world):
    ops = world.ops_employee.employee_id
    world.leaves.seed(employee_id=ops, start_date=date(2025, 5, 30), end_date=date(2025, 6, 2), status=LeaveStatus.APPROVED)
    world.leaves.seed(employee_id=ops, start_date=date(2025, 6, 1), end_date=date(2025, 6, 1), status=LeaveStatus.APPROVED)
    world.leaves.seed(
        employee_id=world.dsi_employee.employee_id,
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 1),
        status=LeaveStatus.APPROVED,
    )
    # not today, or not approved
    world.leaves.seed(
        employee_id=world.daf_employee.employee_id,
        start_date=date(2025, 6, 2),
        end_date=date(2025, 6, 5),
        status=LeaveStatus.APPROVED,
    )
    world.leaves.seed(
        employee_id=world.ops_service_head.employee_id,
        start_date=date(2025, 5, 20),
        end_date=date(2025, 6, 10),
        status=LeaveStatus.PENDING,
        assignee_id=world.ops_head.employee_id,
    )

    counts = world.service.vacation_counts(world.principal(world.ceo))

    assert [(c.department_id, c.count) for c in counts] == [(1, 0), (2, 0), (3, 1), (4, 1)]
    assert counts[3].department_type == DepartmentType.OPERATIONS
    assert counts[3].department_name == "Field Operations"


def test_ceo_metrics(world):
    ceo = world.principal(world.ceo)

    escalated = _submit(world, world.ops_employee)  # decisions 1, 2, 3
    world.service.escalate(world.principal(world.ops_service_head), escalated.request_id, to_role="CEO")
    world.service.approve(ceo, escalated.request_id)
    _retime(world, 2, datetime(2025, 6, 1, 8, 0))
    _retime(world, 3, datetime(2025, 6, 3, 8, 0))

    _submit(world, world.accountant)  # decision 4, awaiting the CEO

    dsi = _submit(world, world.dsi_employee)  # decisions 5, 6
    world.service.reject(world.principal(world.dsi_head), dsi.request_id)

    daf = _submit(world, world.daf_employee)  # decisions 7, 8
    world.service.approve(world.principal(world.accountant), daf.request_id)
    _retime(world, 8, datetime(2025, 5, 31, 23, 0))

    metrics = world.service.ceo_metrics(ceo)
    assert metrics.escalated_pending == 1
    assert metrics.decisions_this_month == 2
    assert metrics.avg_decision_delay_days == pytest.approx(2.0)


def test_ceo_metrics_ignores_decisions_before_reaching_ceo(world):
    ceo = world.principal(world.ceo)
    req = _submit(world, world.ops_employee)
    world.service.escalate(world.principal(world.ops_service_head), req.request_id, to_role="CEO")
    world.service.approve(ceo, req.request_id)
    _retime(world, 2, datetime(2025, 6, 5, 8, 0))
    _retime(world, 3, datetime(2025, 6, 4, 8, 0))

    metrics = world.service.ceo_metrics(ceo)
    assert metrics.escalated_pending == 0
    assert metrics.decisions_this_month == 1
    assert metrics.avg_decision_delay_days is None


@pytest.mark.parametrize("report", ["vacation_counts", "ceo_metrics"])
def test_reports_are_ceo_only(world, report):
    for who in (world.ops_head, world.accountant, world.ops_employee):
        with pytest.raises(AuthorizationError) as e:
            getattr(world.service, report)(world.principal(who))
        assert e.value.code == "CEO_ONLY"
