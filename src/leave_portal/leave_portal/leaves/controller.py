from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.decorators import bearer_required, current_principal
from ..blackouts.controller import blackout_json
from ..common.datetime_utils import format_date
from ..common.http import json_body, page_from_args, page_json
from ..container import Container
from .model import Decision, LeaveRequest
from .state_machine import display_label


def leave_json(r: LeaveRequest) -> dict:
    return {
        "id": r.request_id,
        "employeeId": r.employee_id,
        "type": r.leave_type,
        "startDate": format_date(r.start_date),
        "endDate": format_date(r.end_date),
        "days": r.days,
        "reason": r.reason,
        "status": r.status.value,
        "statusLabel": display_label(r.status),
        "currentAssigneeId": r.current_assignee_id,
        "createdAt": r.created_at.isoformat() if r.created_at else None,
        "updatedAt": r.updated_at.isoformat() if r.updated_at else None,
    }


def decision_json(d: Decision) -> dict:
    return {
        "id": d.decision_id,
        "requestId": d.request_id,
        "type": d.decision_type.value,
        "actorId": d.actor_id,
        "targetEmployeeId": d.target_employee_id,
        "targetRole": d.target_role.value if d.target_role else None,
        "comment": d.comment,
        "createdAt": d.created_at.isoformat() if d.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    auth_required = bearer_required(container.auth_provider)
    service = container.leave_service

    @app.route("/api/leave-requests", methods=["POST"], endpoint="submit_leave")
    @auth_required
    def submit_leave():
        data = json_body()
        created = service.submit(
            current_principal(),
            leave_type=data.get("type") or "",
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            reason=data.get("reason"),
        )
        return jsonify(leave_json(created)), 201

    @app.route("/api/leave-requests/my", methods=["GET"], endpoint="my_leaves")
    @auth_required
    def my_leaves():
        return jsonify(page_json(service.list_mine(current_principal(), page_from_args()), leave_json))

    @app.route("/api/leave-requests/pending", methods=["GET"], endpoint="pending_leaves")
    @auth_required
    def pending_leaves():
        return jsonify(page_json(service.list_inbox(current_principal(), page_from_args()), leave_json))

    @app.route("/api/leave-requests/history", methods=["GET"], endpoint="leave_history")
    @auth_required
    def leave_history():
        page = service.decision_history(
            current_principal(),
            scope=request.args.get("scope", "mine"),
            page=page_from_args(),
        )
        return jsonify(page_json(page, decision_json))

    @app.route("/api/leave-requests/calendar", methods=["GET"], endpoint="leave_calendar")
    @auth_required
    def leave_calendar():
        view = service.calendar(current_principal(), start=request.args.get("start"), end=request.args.get("end"))
        return jsonify(
            {
                "start": format_date(view.start),
                "end": format_date(view.end),
                "leaves": [leave_json(r) for r in view.leaves],
                "blackouts": [blackout_json(b) for b in view.blackouts],
            }
        )

    @app.route("/api/leave-requests/vacation-counts", methods=["GET"], endpoint="vacation_counts")
    @auth_required
    def vacation_counts():
        counts = service.vacation_counts(current_principal())
        return jsonify(
            {
                "counts": [
                    {
                        "departmentId": c.department_id,
                        "departmentType": c.department_type.value,
                        "departmentName": c.department_name,
                        "count": c.count,
                    }
                    for c in counts
                ]
            }
        )

    @app.route("/api/leave-requests/ceo-metrics", methods=["GET"], endpoint="ceo_metrics")
    @auth_required
    def ceo_metrics():
        m = service.ceo_metrics(current_principal())
        return jsonify(
            {
                "escalatedPending": m.escalated_pending,
                "decisionsThisMonth": m.decisions_this_month,
                "avgDecisionDelayDays": m.avg_decision_delay_days,
            }
        )

    @app.route("/api/leave-requests/<int:request_id>", methods=["GET"], endpoint="leave_detail")
    @auth_required
    def leave_detail(request_id: int):
        detail = service.get_request(current_principal(), request_id)
        body = leave_json(detail.request)
        body["history"] = [decision_json(d) for d in detail.history]
        return jsonify(body)

    @app.route("/api/leave-requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @auth_required
    def approve_leave(request_id: int):
        data = json_body()
        return jsonify(leave_json(service.approve(current_principal(), request_id, comment=data.get("comment"))))

    @app.route("/api/leave-requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @auth_required
    def reject_leave(request_id: int):
        data = json_body()
        return jsonify(leave_json(service.reject(current_principal(), request_id, comment=data.get("comment"))))

    @app.route("/api/leave-requests/<int:request_id>/escalate", methods=["POST"], endpoint="escalate_leave")
    @auth_required
    def escalate_leave(request_id: int):
        data = json_body()
        updated = service.escalate(
            current_principal(),
            request_id,
            to_role=data.get("toRole"),
            comment=data.get("comment"),
        )
        return jsonify(leave_json(updated))

    @app.route("/api/leave-requests/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_leave")
    @auth_required
    def cancel_leave(request_id: int):
        data = json_body()
        return jsonify(leave_json(service.cancel(current_principal(), request_id, comment=data.get("comment"))))

    @app.route("/api/leave-types", methods=["GET"], endpoint="leave_types")
    @auth_required
    def leave_types():
        options = service.leave_type_options(current_principal())
        return jsonify([{"code": o.code, "label": o.label} for o in options])

    @app.route("/api/employees/<int:employee_id>/leave-balance", methods=["GET"], endpoint="leave_balance")
    @auth_required
    def leave_balance(employee_id: int):
        ent = service.leave_balance(current_principal(), employee_id, year=request.args.get("year"))
        return jsonify(
            {
                "employeeId": employee_id,
                "year": ent.year,
                "baseAllowance": ent.base_allowance,
                "seniorityYears": ent.seniority_years,
                "seniorityBonusDays": ent.seniority_bonus_days,
                "totalAnnualAllowance": ent.total_annual_allowance,
                "consumedDays": ent.consumed_days,
                "remainingDays": ent.remaining_days,
            }
        )
