"""Administrative ingestion trigger."""

from __future__ import annotations

import hmac
from contextlib import closing

from flask import Blueprint, current_app, request

from ssq.db import get_session
from ssq.errors import UnauthorizedError
from ssq.schemas.ingestion import IngestionSummarySchema
from ssq.services.ingestion_service import IngestionService, pipeline_from_config
from ssq.utils.responses import ok

crawl_bp = Blueprint("crawl", __name__)

INGEST_TOKEN_HEADER = "X-Ingest-Token"

_summary_schema = IngestionSummarySchema()


def _check_token() -> None:
    expected = current_app.config.get("INGEST_TOKEN")
    if not expected:
        return
    given = request.headers.get(INGEST_TOKEN_HEADER) or ""
    if not hmac.compare_digest(given.encode(), str(expected).encode()):
        raise UnauthorizedError("Invalid ingest token")


@crawl_bp.post("/crawl")
def crawl_history():
    _check_token()

    # A fresh pipeline per run: no fetch state is shared between requests.
    with closing(pipeline_from_config(current_app.config)) as pipeline:
        summary = IngestionService(pipeline).run_ingestion(get_session())
    return ok(_summary_schema.dump(summary))
