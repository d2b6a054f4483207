"""Centralized error handlers."""

from __future__ import annotations

import logging

from flask import Flask, render_template
from marshmallow import ValidationError as MarshmallowValidationError
from pymongo.errors import DuplicateKeyError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from rifazo.errors import AppError, ConflictError, ValidationError
from rifazo.utils.responses import fail, fail_from, wants_json

logger = logging.getLogger(__name__)


def _page(status: int, title: str, message: str):  # type: ignore[no-untyped-def]
    return render_template("error.html", status=status, title=title, message=message), status


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if not wants_json():
            return _page(exc.status_code, exc.code, exc.message)
        return fail_from(exc)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        # exc.messages is a dict of field -> list[str]
        return fail_from(ValidationError(details=exc.messages))

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        logger.info("Integrity error", exc_info=exc)
        return fail_from(ConflictError(details=str(exc.orig) if exc.orig else str(exc)))

    @app.errorhandler(DuplicateKeyError)
    def _handle_duplicate_key(exc: DuplicateKeyError):
        logger.info("Duplicate key", exc_info=exc)
        return fail_from(ConflictError(details=(exc.details or {}).get("keyValue")))

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(getattr(exc, "code", 500) or 500)
        if not wants_json():
            return _page(status, getattr(exc, "name", "Error"), getattr(exc, "description", ""))
        if status == 404:
            return fail("not_found", "Not found", 404)

        return fail(
            "http_error",
            getattr(exc, "description", "HTTP error"),
            status,
            details={"name": getattr(exc, "name", "HTTPException")},
        )

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception")
        return fail("internal_error", "Internal server error", 500)
