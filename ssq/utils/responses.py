"""Helpers for consistent JSON response schema."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def ok(data: Any, status_code: int = 200, warnings: list[str] | None = None) -> Response:
    """Success response.

    ``warnings`` carries non-fatal failures of best-effort side operations.
    """

    body: dict[str, Any] = {"success": True, "data": data, "error": None}
    if warnings:
        body["warnings"] = list(warnings)
    return jsonify(body), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> Response:
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
