"""Run one ingestion pass; meant to be invoked by cron or another scheduler.

The draw schedule is Tuesday, Thursday and Sunday evenings, so a morning run
on Monday, Wednesday and Friday picks up each new issue:

  0 10 * * 1,3,5  python scripts/run_ingestion.py

Exit code is 0 whenever the run completed, even on synthetic fallback.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from collections.abc import Sequence
from contextlib import closing

from _common import get_database_url

from ssq.config import get_config
from ssq.db import create_app_engine, create_session_factory, session_scope
from ssq.logging_config import LOG_FORMAT
from ssq.models.base import Base
from ssq.services.ingestion_service import IngestionService, pipeline_from_config


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch the newest draw and store it")
    parser.add_argument("--database-url", dest="database_url", type=str, default=None)
    parser.add_argument("--timeout", dest="timeout_seconds", type=float, default=None)
    parser.add_argument("--retries", dest="retries", type=int, default=None)
    parser.add_argument("--no-synthetic", action="store_true", help="Do not fall back to synthetic draws")
    parser.add_argument("--log-level", dest="log_level", type=str, default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format=LOG_FORMAT)

    config_cls = get_config()
    config = {name: getattr(config_cls, name) for name in dir(config_cls) if name.isupper()}
    if args.timeout_seconds is not None:
        config["FETCH_TIMEOUT_SECONDS"] = args.timeout_seconds
    if args.retries is not None:
        config["FETCH_RETRIES"] = args.retries
    if args.no_synthetic:
        config["SYNTHETIC_FALLBACK_ENABLED"] = False

    engine = create_app_engine(get_database_url(args.database_url))
    Base.metadata.create_all(bind=engine)

    with closing(pipeline_from_config(config)) as pipeline, session_scope(create_session_factory(engine)) as session:
        summary = IngestionService(pipeline).run_ingestion(session)

    print(json.dumps(dataclasses.asdict(summary), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
