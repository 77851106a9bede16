"""History routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from ssq.db import get_session
from ssq.repositories.history_repository import HistoryRepository
from ssq.schemas.draw import (
    DrawRecordSchema,
    GeneratedCombinationSchema,
    GeneratedQuerySchema,
    HistoryQuerySchema,
)
from ssq.utils.identity import current_user_id
from ssq.utils.responses import ok

history_bp = Blueprint("history", __name__)

_repo = HistoryRepository()
_query_schema = HistoryQuerySchema()
_draws_schema = DrawRecordSchema(many=True)
_generated_query_schema = GeneratedQuerySchema()
_generated_schema = GeneratedCombinationSchema(many=True)


@history_bp.get("/history")
def list_history():
    """Stored draws, newest issue first."""

    args = _query_schema.load(request.args)
    records = _repo.list_history(get_session(), limit=args["limit"], offset=args["offset"])
    return ok({"numbers": _draws_schema.dump(records), "limit": args["limit"], "offset": args["offset"]})


@history_bp.get("/generated")
def list_generated():
    """The caller's own generated combinations, newest first."""

    args = _generated_query_schema.load(request.args)
    rows = _repo.list_generated(get_session(), current_user_id(), limit=args["limit"])
    return ok({"numbers": _generated_schema.dump(rows)})
