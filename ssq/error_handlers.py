"""Centralized error handlers.

Every failure leaves the API in the same envelope as ``ok``; see
``ssq.utils.responses.fail``.
"""

from __future__ import annotations

import logging

from flask import Flask
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from ssq.errors import AppError, ConflictError, GenerationExhaustedError, StoreError, ValidationError
from ssq.utils.responses import fail

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    404: ("not_found", "Not found"),
    405: ("method_not_allowed", "Method not allowed"),
}


def _respond(exc: AppError):
    return fail(exc.code, exc.message, exc.status_code, exc.details)


def register_error_handlers(app: Flask) -> None:
    """Map domain, schema, database and HTTP errors onto the JSON envelope."""

    @app.errorhandler(GenerationExhaustedError)
    def _handle_exhausted(exc: GenerationExhaustedError):
        logger.warning(
            "Generation gave up on combination %s after %s attempts (%s accepted before)",
            exc.index,
            exc.max_attempts,
            len(exc.partial),
        )
        return _respond(exc)

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s: %s %s", exc.code, exc.message, exc.details or "")
        return _respond(exc)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        return _respond(ValidationError(message="Invalid query parameters", details=exc.messages))

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        # Only reachable when a write escapes the repository's own handling.
        logger.info("Integrity error", exc_info=exc)
        return _respond(ConflictError(details=str(exc.orig) if exc.orig else str(exc)))

    @app.errorhandler(SQLAlchemyError)
    def _handle_database_error(exc: SQLAlchemyError):
        logger.exception("Database error")
        return _respond(StoreError(message="Database unavailable"))

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(exc.code or 500)
        if status in _HTTP_CODES:
            code, message = _HTTP_CODES[status]
            return fail(code, message, status)
        return fail("http_error", exc.description or "HTTP error", status, details={"name": exc.name})

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception")
        return fail("internal_error", "Internal server error", 500)
