"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class ConflictError(AppError):
    """Conflict (e.g., duplicate username)."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class UnauthorizedError(AppError):
    """Authentication required."""

    def __init__(self, message: str = "Authentication required", details: Any | None = None) -> None:
        super().__init__(code="unauthorized", message=message, status_code=401, details=details)


class ForbiddenError(AppError):
    """Authenticated but not allowed."""

    def __init__(self, message: str = "Forbidden", details: Any | None = None) -> None:
        super().__init__(code="forbidden", message=message, status_code=403, details=details)


class PlanLimitError(AppError):
    """The organizer's plan does not allow the operation."""

    def __init__(self, message: str = "Plan limit reached", details: Any | None = None) -> None:
        super().__init__(code="plan_limit", message=message, status_code=403, details=details)
