from __future__ import annotations

from flask import Flask, jsonify

from ..auth.decorators import bearer_required, current_principal
from ..common.datetime_utils import coerce_date, format_date
from ..common.http import json_body
from ..container import Container
from .model import BlackoutPeriod


def blackout_json(b: BlackoutPeriod) -> dict:
    return {
        "id": b.blackout_id,
        "title": b.title,
        "reason": b.reason,
        "startDate": format_date(b.start_date),
        "endDate": format_date(b.end_date),
        "scope": b.scope,
        "departmentId": b.department_id,
        "employeeIds": sorted(b.employee_ids),
        "createdBy": b.created_by,
        "createdAt": b.created_at.isoformat() if b.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    auth_required = bearer_required(container.auth_provider)
    service = container.blackout_service

    @app.route("/api/leave-blackouts", methods=["GET"], endpoint="list_blackouts")
    @auth_required
    def list_blackouts():
        return jsonify([blackout_json(b) for b in service.list(current_principal())])

    @app.route("/api/leave-blackouts", methods=["POST"], endpoint="create_blackout")
    @auth_required
    def create_blackout():
        data = json_body()
        created = service.create(
            current_principal(),
            title=data.get("title") or "",
            start_date=coerce_date(data.get("startDate"), "startDate"),
            end_date=coerce_date(data.get("endDate"), "endDate"),
            reason=data.get("reason"),
            department_id=data.get("departmentId"),
            employee_ids=data.get("employeeIds"),
        )
        return jsonify(blackout_json(created)), 201

    @app.route("/api/leave-blackouts/<int:blackout_id>", methods=["DELETE"], endpoint="delete_blackout")
    @auth_required
    def delete_blackout(blackout_id: int):
        service.delete(current_principal(), blackout_id)
        return "", 204
