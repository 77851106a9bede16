"""Health check routes."""

from __future__ import annotations

from flask import Blueprint

from ssq.db import get_session
from ssq.repositories.history_repository import HistoryRepository
from ssq.utils.responses import ok

health_bp = Blueprint("health", __name__)

_repo = HistoryRepository()


@health_bp.get("/health")
def health_check():
    """Liveness plus a cheap read of the history table."""

    session = get_session()
    return ok({"status": "ok", "draws": _repo.count(session), "latest_issue": _repo.latest_issue(session)})
