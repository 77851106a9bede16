"""Bulk import of historical draws from a spreadsheet export (CSV).

Expected columns, header row first:
  issue, date, red1..red6 (draw order), blue[, prize_pool, first_prize_count, first_prize_amount]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from ssq.errors import AppError, ConflictError
from ssq.repositories.history_repository import HistoryRepository
from ssq.services.extractors import ExtractionResult, build_result
from ssq.services.ingestion_service import build_draw_record

logger = logging.getLogger(__name__)

IMPORT_SOURCE = "import"


@dataclass(frozen=True)
class ImportedRow:
    draw: ExtractionResult
    prize_pool: str | None
    first_prize_count: int | None
    first_prize_amount: str | None


@dataclass(frozen=True)
class ImportReport:
    inserted: int
    skipped_existing: int
    replaced_synthetic: int
    invalid: int
    failures: int


def _optional_int(raw: str) -> int | None:
    raw = raw.replace(",", "").strip()
    if not raw:
        return None
    try:
        return int(float(raw))
    except ValueError:
        return None


def parse_history_row(row: Sequence[str]) -> ImportedRow | None:
    cells = [str(c).strip() for c in row]
    if len(cells) < 9:
        return None
    try:
        numbers = [int(c) for c in cells[2:9]]
    except ValueError:
        return None

    draw = build_result(cells[0], cells[1], numbers)
    if draw is None:
        return None

    extra = cells[9:12] + [""] * (3 - len(cells[9:12]))
    return ImportedRow(
        draw=draw,
        prize_pool=extra[0] or None,
        first_prize_count=_optional_int(extra[1]),
        first_prize_amount=extra[2] or None,
    )


def import_rows(
    session: Session,
    rows: Iterable[Sequence[str]],
    repository: HistoryRepository | None = None,
) -> ImportReport:
    repo = repository or HistoryRepository()
    inserted = skipped = replaced = invalid = failures = 0

    for line_no, row in enumerate(rows, start=2):
        parsed = parse_history_row(row)
        if parsed is None:
            invalid += 1
            logger.debug("Line %s: invalid row %r", line_no, list(row))
            continue

        try:
            replaced += repo.discard_synthetic(session, parsed.draw.issue, parsed.draw.draw_date)
        except AppError:
            failures += 1
            logger.exception("Line %s: failed to replace synthetic draws for issue %s", line_no, parsed.draw.issue)
            continue

        if repo.exists_issue(session, parsed.draw.issue):
            skipped += 1
            continue

        record = build_draw_record(
            parsed.draw,
            IMPORT_SOURCE,
            prize_pool=parsed.prize_pool,
            first_prize_count=parsed.first_prize_count,
            first_prize_amount=parsed.first_prize_amount,
        )
        try:
            repo.insert(session, record)
        except ConflictError:
            skipped += 1
        except AppError:
            failures += 1
            logger.exception("Line %s: failed to store issue %s", line_no, parsed.draw.issue)
        else:
            inserted += 1

    return ImportReport(
        inserted=inserted,
        skipped_existing=skipped,
        replaced_synthetic=replaced,
        invalid=invalid,
        failures=failures,
    )
