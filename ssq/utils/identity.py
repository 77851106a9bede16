"""Caller identity handed over by the authentication layer."""

from __future__ import annotations

from flask import current_app, request

from ssq.errors import ValidationError

USER_ID_HEADER = "X-User-Id"


def current_user_id() -> int:
    """User id set by the upstream auth proxy, else DEFAULT_USER_ID."""

    raw = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not raw:
        return int(current_app.config.get("DEFAULT_USER_ID", 1))
    try:
        user_id = int(raw)
    except ValueError as exc:
        raise ValidationError(f"{USER_ID_HEADER} must be an integer") from exc
    if user_id < 1:
        raise ValidationError(f"{USER_ID_HEADER} must be positive")
    return user_id
