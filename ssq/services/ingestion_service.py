"""Ingestion use-case: run the fallback pipeline and store new draws."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from ssq.errors import AppError, ConflictError
from ssq.models.draw_record import DrawRecord
from ssq.repositories.history_repository import HistoryRepository
from ssq.services.extractors import ExtractionResult
from ssq.services.fetcher import SourceFetcher, build_http_session
from ssq.services.pipeline import FallbackPipeline, default_stages
from ssq.services.synthetic import SyntheticDrawGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionSummary:
    total_parsed: int
    new_records: int
    skipped_existing: int
    replaced_synthetic: int
    conflicts: int
    failures: int
    synthetic: bool
    source: str | None
    latest_issue: str | None


def build_draw_record(
    result: ExtractionResult,
    source: str,
    *,
    prize_pool: str | None = None,
    first_prize_count: int | None = None,
    first_prize_amount: str | None = None,
) -> DrawRecord:
    reds = result.canonical_numbers
    order = result.reveal_order_numbers
    return DrawRecord(
        issue_number=result.issue,
        red_1=reds[0],
        red_2=reds[1],
        red_3=reds[2],
        red_4=reds[3],
        red_5=reds[4],
        red_6=reds[5],
        red_1_order=order[0],
        red_2_order=order[1],
        red_3_order=order[2],
        red_4_order=order[3],
        red_5_order=order[4],
        red_6_order=order[5],
        blue=result.special_number,
        draw_date=result.draw_date,
        prize_pool=prize_pool,
        first_prize_count=first_prize_count,
        first_prize_amount=first_prize_amount,
        source=source,
    )


def pipeline_from_config(config: Mapping[str, Any]) -> FallbackPipeline:
    """Wire a fresh pipeline; fetchers keep per-run header rotation state."""

    http = build_http_session(
        retries=int(config.get("FETCH_RETRIES", 2)),
        backoff_factor=float(config.get("FETCH_BACKOFF", 0.3)),
    )
    fetcher = SourceFetcher(
        http,
        timeout_seconds=float(config.get("FETCH_TIMEOUT_SECONDS", 10.0)),
        delay_range=(float(config.get("FETCH_DELAY_MIN", 0.5)), float(config.get("FETCH_DELAY_MAX", 1.5))),
    )
    synthetic = None
    if config.get("SYNTHETIC_FALLBACK_ENABLED", True):
        synthetic = SyntheticDrawGenerator(int(config.get("SYNTHETIC_FALLBACK_COUNT", 10)))
    return FallbackPipeline(fetcher, default_stages(), synthetic)


class IngestionService:
    """Drive one pipeline pass and persist the draws not yet stored."""

    def __init__(self, pipeline: FallbackPipeline, repository: HistoryRepository | None = None) -> None:
        self._pipeline = pipeline
        self._repo = repository or HistoryRepository()

    def run_ingestion(self, session: Session) -> IngestionSummary:
        result = self._pipeline.run()
        source = result.source or "unknown"

        new_records = skipped = replaced = conflicts = failures = 0
        for record in result.records:
            if not result.synthetic:
                try:
                    replaced += self._repo.discard_synthetic(session, record.issue, record.draw_date)
                except AppError:
                    failures += 1
                    logger.exception("Failed to replace synthetic draws for issue %s", record.issue)
                    continue

            if self._repo.exists_issue(session, record.issue):
                skipped += 1
                continue

            try:
                self._repo.insert(session, build_draw_record(record, source))
            except ConflictError:
                # Another run stored it between the check and the insert.
                conflicts += 1
                logger.info("Issue %s stored concurrently; skipped", record.issue)
            except AppError:
                failures += 1
                logger.exception("Failed to store issue %s", record.issue)
            else:
                new_records += 1

        summary = IngestionSummary(
            total_parsed=len(result.records),
            new_records=new_records,
            skipped_existing=skipped,
            replaced_synthetic=replaced,
            conflicts=conflicts,
            failures=failures,
            synthetic=result.synthetic,
            source=result.source,
            latest_issue=self._repo.latest_issue(session),
        )
        logger.info(
            "Ingestion from %s: parsed=%s new=%s skipped=%s replaced_synthetic=%s conflicts=%s failures=%s synthetic=%s",
            summary.source,
            summary.total_parsed,
            summary.new_records,
            summary.skipped_existing,
            summary.replaced_synthetic,
            summary.conflicts,
            summary.failures,
            summary.synthetic,
        )
        return summary
