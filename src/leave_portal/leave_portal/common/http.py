from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError
from .pagination import PageRequest

logger = logging.getLogger(__name__)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def page_from_args() -> PageRequest:
    return PageRequest.parse(request.args.get("page"), request.args.get("take"))


def page_json(page, serialize) -> dict:
    return {"items": [serialize(i) for i in page.items], "page": page.page, "take": page.take}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"error": e.to_dict()}), e.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        code = (e.name or "HTTP_ERROR").upper().replace(" ", "_")
        body = {"code": code, "message": e.description, "retryable": False, "details": {}}
        return jsonify({"error": body}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        body = {"code": "INTERNAL_ERROR", "message": "Internal server error", "retryable": False, "details": {}}
        return jsonify({"error": body}), 500
