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


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class BoundsError(ValidationError):
    """Requested generation count outside the allowed range."""

    def __init__(self, count: int, low: int, high: int) -> None:
        super().__init__(
            message="Invalid count",
            details={"count": [f"Must be within {low}..{high} (got {count})"]},
        )
        self.code = "bounds_error"


class UnauthorizedError(AppError):
    """Missing or wrong credentials for a guarded endpoint."""

    def __init__(self, message: str = "Unauthorized", details: Any | None = None) -> None:
        super().__init__(code="unauthorized", message=message, status_code=401, details=details)


class ConflictError(AppError):
    """Conflict (e.g., unique constraint)."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class StoreError(AppError):
    """Persistence failed for a reason other than a uniqueness conflict."""

    def __init__(self, message: str = "Store error", details: Any | None = None) -> None:
        super().__init__(code="store_error", message=message, status_code=500, details=details)


class GenerationExhaustedError(AppError):
    """Retry budget ran out while generating combination ``index`` (1-based).

    ``partial`` holds the combinations accepted before the failure and
    ``warnings`` the save failures among them.
    """

    def __init__(
        self,
        index: int,
        max_attempts: int,
        partial: list[Any] | None = None,
        warnings: list[str] | None = None,
    ) -> None:
        self.index = index
        self.max_attempts = max_attempts
        self.partial = list(partial or [])
        self.warnings = list(warnings or [])
        super().__init__(
            code="generation_exhausted",
            message=f"Failed to generate combination {index} within retry limit ({max_attempts})",
            status_code=503,
            details={
                "index": index,
                "max_attempts": max_attempts,
                "partial": self.partial,
                "warnings": self.warnings,
            },
        )
