"""Backfill draw history from a CSV export of the official spreadsheet.

Columns: issue, date, red1..red6 (draw order), blue, [prize_pool,
first_prize_count, first_prize_amount]. The first row is a header.
Issues already stored are skipped, so the import can be re-run.

Usage:
  python scripts/import_history.py data/ssq_history.csv [--database-url ...]
"""

from __future__ import annotations

import argparse
import csv
import logging
import pathlib
from collections.abc import Sequence

from _common import get_database_url
from tqdm import tqdm

from ssq.db import create_app_engine, create_session_factory, session_scope
from ssq.logging_config import LOG_FORMAT
from ssq.models.base import Base
from ssq.services.history_import import import_rows

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import historical draws from CSV")
    parser.add_argument("csv_path", type=pathlib.Path)
    parser.add_argument("--database-url", dest="database_url", type=str, default=None)
    parser.add_argument("--encoding", dest="encoding", type=str, default="utf-8-sig")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    if not args.csv_path.exists():
        raise SystemExit(f"{args.csv_path} does not exist")

    engine = create_app_engine(get_database_url(args.database_url))
    Base.metadata.create_all(bind=engine)

    with args.csv_path.open("r", encoding=args.encoding, newline="") as f:
        reader = csv.reader(f)
        next(reader, None)
        rows = [row for row in reader if row]

    with session_scope(create_session_factory(engine)) as session:
        report = import_rows(session, tqdm(rows, desc="Importing"))

    logger.info(
        "Imported %s draws (%s already stored, %s synthetic replaced, %s invalid rows, %s failures)",
        report.inserted,
        report.skipped_existing,
        report.replaced_synthetic,
        report.invalid,
        report.failures,
    )
    return 0 if report.failures == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
