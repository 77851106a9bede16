"""Generation routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from ssq.db import get_session
from ssq.schemas.draw import GenerateQuerySchema, GenerateResponseSchema
from ssq.services.generation_service import GenerationService
from ssq.utils.identity import current_user_id
from ssq.utils.responses import ok

generate_bp = Blueprint("generate", __name__)

_query_schema = GenerateQuerySchema()
_response_schema = GenerateResponseSchema()


@generate_bp.get("/generate")
def generate_numbers():
    args = _query_schema.load(request.args)
    service = GenerationService(max_attempts=int(current_app.config["GENERATION_MAX_ATTEMPTS"]))

    result = service.generate(get_session(), count=int(args["count"]), user_id=current_user_id())
    payload = {
        "count": len(result.combinations),
        "combinations": result.combinations,
        "attempts_per_combination": result.attempts_per_combination,
    }
    return ok(_response_schema.dump(payload), warnings=result.warnings)
