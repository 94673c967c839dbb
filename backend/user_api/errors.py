"""Failure taxonomy, global HTTP error handling and JSON response helpers."""
from __future__ import annotations

from typing import Any, Iterable, NamedTuple

from flask import Flask, jsonify, request
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from .constants import MSG_UNEXPECTED_ERROR, STATUS_SUCCESS
from .domain.user import format_timestamp, utcnow


class FieldViolation(NamedTuple):
    field: str
    reason: str


class ApiException(Exception):
    """Base class for failures that map onto a fixed HTTP status."""

    status_code = 500
    title = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ApiException):
    status_code = 404
    title = "Not Found"


class ValidationFailedError(ApiException):
    status_code = 400
    title = "Bad Request"

    def __init__(self, violations: Iterable[FieldViolation]) -> None:
        self.violations = list(violations)
        super().__init__(", ".join(f"{v.field}: {v.reason}" for v in self.violations))


class ConstraintViolationError(ApiException):
    status_code = 400
    title = "Bad Request"

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages = list(messages)
        super().__init__(", ".join(self.messages))


class InvalidArgumentError(ApiException):
    status_code = 400
    title = "Bad Request"


class EmailConflictError(ApiException):
    status_code = 409
    title = "Conflict"

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already exists: {email}")


def error_body(status: int, title: str, message: str) -> dict[str, Any]:
    return {
        "timestamp": format_timestamp(utcnow()),
        "status": status,
        "error": title,
        "message": message,
        "path": request.path,
    }


def _violations_from_pydantic(err: PydanticValidationError) -> list[FieldViolation]:
    violations = []
    for item in err.errors():
        field = ".".join(str(p) for p in item.get("loc", ())) or "body"
        violations.append(FieldViolation(field, item.get("msg", "invalid value")))
    return violations


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiException)
    def api_exception(err: ApiException):  # type: ignore[override]
        if isinstance(err, NotFoundError):
            logger.error("Resource not found: {}", err.message)
        else:
            logger.warning("{}: {}", type(err).__name__, err.message)
        return jsonify(error_body(err.status_code, err.title, err.message)), err.status_code

    @app.errorhandler(PydanticValidationError)
    def payload_invalid(err: PydanticValidationError):  # type: ignore[override]
        return api_exception(ValidationFailedError(_violations_from_pydantic(err)))

    @app.errorhandler(HTTPException)
    def http_exception(err: HTTPException):  # type: ignore[override]
        code = err.code or 500
        return jsonify(error_body(code, err.name, err.description or err.name)), code

    @app.errorhandler(Exception)
    def internal(err: Exception):  # type: ignore[override]
        logger.opt(exception=err).error("Unexpected error: {}", err)
        return jsonify(error_body(500, "Internal Server Error", MSG_UNEXPECTED_ERROR)), 500


def ok(data: Any, message: str, status: int = 200, headers: dict[str, str] | None = None):
    body = {"statusCode": status, "status": STATUS_SUCCESS, "message": message, "data": data}
    return jsonify(body), status, headers or {}
