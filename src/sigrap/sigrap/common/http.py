from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    DomainError,
    InsufficientStockError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import format_iso, now_local
from .logging_utils import get_logger

logger = get_logger("http")

_STATUS_BY_ERROR: list[tuple[type[DomainError], HTTPStatus]] = [
    (NotFoundError, HTTPStatus.NOT_FOUND),
    (InsufficientStockError, HTTPStatus.CONFLICT),
    (InvariantViolationError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (ValidationError, HTTPStatus.BAD_REQUEST),
]


def error_response(status: HTTPStatus, message: str):
    body = {
        "success": False,
        "timestamp": format_iso(now_local()),
        "status": status.value,
        "error": status.phrase,
        "message": message,
    }
    return jsonify(body), status.value


def status_for(error: DomainError) -> HTTPStatus:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return HTTPStatus.BAD_REQUEST


def json_body() -> Any:
    """Parsed JSON request body; malformed or missing JSON is a ValidationError."""
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("Request body must be valid JSON")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        logger.info("%s %s -> %s: %s", request.method, request.path, status.value, e)
        return error_response(status, str(e))

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        status = HTTPStatus(e.code or 500)
        return error_response(status, e.description or status.phrase)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, f"Internal error: {e}")
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
