"""Helpers for the JSON envelope shared by every API response."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify, request

from rifazo.errors import AppError

# Paths answered with the JSON envelope; everything else is an HTML page.
JSON_PREFIXES = ("/api/", "/health")


def ok(data: Any, status_code: int = 200) -> tuple[Response, int]:
    """Success response."""

    return jsonify({"success": True, "data": data, "error": None}), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> tuple[Response, int]:
    """Error response."""

    return (
        jsonify(
            {
                "success": False,
                "data": None,
                "error": {"code": code, "message": message, "details": details},
            }
        ),
        status_code,
    )


def fail_from(exc: AppError) -> tuple[Response, int]:
    return fail(exc.code, exc.message, exc.status_code, exc.details)


def wants_json() -> bool:
    path = request.path or ""
    return path.startswith(JSON_PREFIXES) or request.is_json
