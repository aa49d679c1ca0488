"""Centralized JSON error handling for the API.

Every failure raised while handling a request ends here and is rendered as
the error envelope ``{statusCode, message, success: false}``. Nothing is
allowed to escape as an HTML page or crash the worker.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from channelhub.core.logger import ensure_request_id
from channelhub.services._shared.errors import (
    AuthenticationError,
    ErrorKind,
    ServiceError,
)

log = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.UPSTREAM_FAILURE: HTTPStatus.BAD_GATEWAY,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def status_for(kind: ErrorKind) -> int:
    """Return the HTTP status mirroring an error kind (500 when unmapped)."""
    return int(STATUS_BY_KIND.get(kind, HTTPStatus.INTERNAL_SERVER_ERROR))


def _envelope(
    *,
    status: int,
    message: str,
    errors: Any | None = None,
) -> dict[str, Any]:
    """
    Build the error envelope.

    :param status: HTTP status code, also echoed in the body.
    :param message: Human-readable summary (safe for clients).
    :param errors: Optional structured details (field errors).
    :returns: JSON-ready dictionary.
    """
    body: dict[str, Any] = {
        "statusCode": status,
        "message": message,
        "success": False,
    }
    if errors:
        body["errors"] = errors
    body["request_id"] = ensure_request_id()
    return body


def _error_response(body: dict[str, Any]) -> tuple[Response, int]:
    resp = jsonify(body)
    return resp, int(body["statusCode"])


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - 4xx are logged as warnings, 5xx as errors with ``exc_info``.
    - Authentication failures log their internal reason; the body only
      carries the uniform message.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = status_for(err.kind)
        if isinstance(err, AuthenticationError):
            log.warning(
                "auth.rejected: path=%s reason=%s",
                request.path,
                err.reason,
                extra={"reason": err.reason},
            )
        else:
            level = log.error if status >= 500 else log.warning
            level("ServiceError: kind=%s status=%s msg=%s", err.kind.value, status, err.message)
        return _error_response(_envelope(status=status, message=err.message))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("ValidationError: path=%s", request.path)
        return _error_response(
            _envelope(
                status=HTTPStatus.BAD_REQUEST,
                message="Validation failed",
                errors=err.normalized_messages(),
            )
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError", exc_info=True)
        return _error_response(_envelope(status=HTTPStatus.CONFLICT, message="Resource conflict"))

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError", exc_info=True)
        return _error_response(
            _envelope(
                status=HTTPStatus.SERVICE_UNAVAILABLE,
                message="Service temporarily unavailable",
            )
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = HTTPStatus(status).phrase
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level("HTTPException: status=%s path=%s", status, request.path)
        return _error_response(_envelope(status=status, message=message))

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        log.error("Unhandled exception", exc_info=True)
        return _error_response(
            _envelope(status=HTTPStatus.INTERNAL_SERVER_ERROR, message="Internal server error")
        )
