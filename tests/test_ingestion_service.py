import random
from datetime import date

from factories import make_draw
from fakes import LISTING_17500, FakeHttp, FakeResponse

from ssq.errors import StoreError
from ssq.repositories.history_repository import HistoryRepository
from ssq.services.extractors import default_strategies
from ssq.services.fetcher import SourceEndpoint, SourceFetcher
from ssq.rules import nominal_issue
from ssq.services.ingestion_service import IngestionService, pipeline_from_config
from ssq.services.pipeline import FallbackPipeline, Stage
from ssq.services.synthetic import SyntheticDrawGenerator

LISTING = Stage(SourceEndpoint("17500_history", "https://listing.test/ssq"), tuple(default_strategies()))


def _pipeline(responses, synthetic=None):
    fetcher = SourceFetcher(FakeHttp(responses), delay_range=(0.0, 0.0), rng=random.Random(0), sleep=lambda _: None)
    return FallbackPipeline(fetcher, [LISTING], synthetic)


def test_new_draw_is_stored_then_skipped_on_rerun(session, repo):
    service = IngestionService(_pipeline({LISTING.endpoint.url: FakeResponse(text=LISTING_17500)}))

    first = service.run_ingestion(session)
    second = service.run_ingestion(session)

    assert (first.total_parsed, first.new_records, first.skipped_existing) == (1, 1, 0)
    assert first.source == "17500_history"
    assert first.latest_issue == "2025141"
    assert not first.synthetic
    assert (second.new_records, second.skipped_existing) == (0, 1)

    stored = repo.list_history(session)[0]
    assert stored.source == "17500_history"
    assert stored.draw_date == date(2025, 12, 7)


def test_synthetic_batch_is_stored_with_provenance(session, repo):
    synthetic = SyntheticDrawGenerator(4, rng=random.Random(9), today=lambda: date(2025, 12, 8))
    summary = IngestionService(_pipeline({}, synthetic)).run_ingestion(session)

    assert summary.synthetic
    assert summary.source == "synthetic"
    assert summary.new_records == 4
    assert {r.source for r in repo.list_history(session)} == {"synthetic"}


def test_nothing_to_store_when_every_source_fails(session):
    summary = IngestionService(_pipeline({})).run_ingestion(session)

    assert summary.total_parsed == 0
    assert summary.new_records == 0
    assert summary.source is None
    assert summary.latest_issue is None


class _RacingRepository(HistoryRepository):
    """First existence check misses a row another writer just committed."""

    def __init__(self):
        self.checks = 0

    def exists_issue(self, session, issue):
        self.checks += 1
        if self.checks == 1:
            return False
        return super().exists_issue(session, issue)


class _FailingRepository(HistoryRepository):
    def insert(self, session, record):
        raise StoreError(message="disk full")


def test_concurrent_insert_is_counted_as_conflict(session, repo):
    repo.insert(session, make_draw("2025141", [2, 4, 5, 10, 12, 13], 6))
    pipeline = _pipeline({LISTING.endpoint.url: FakeResponse(text=LISTING_17500)})

    summary = IngestionService(pipeline, _RacingRepository()).run_ingestion(session)

    assert summary.conflicts == 1
    assert summary.new_records == 0
    assert repo.count(session) == 1


def test_store_failure_is_counted_not_raised(session):
    pipeline = _pipeline({LISTING.endpoint.url: FakeResponse(text=LISTING_17500)})

    summary = IngestionService(pipeline, _FailingRepository()).run_ingestion(session)

    assert summary.failures == 1
    assert summary.new_records == 0


def test_pipeline_from_config_respects_synthetic_switch(monkeypatch):
    unreachable = FakeHttp()
    monkeypatch.setattr("ssq.services.ingestion_service.build_http_session", lambda **kwargs: unreachable)
    config = {"FETCH_DELAY_MIN": 0.0, "FETCH_DELAY_MAX": 0.0, "SYNTHETIC_FALLBACK_COUNT": 3}

    enabled = pipeline_from_config({**config, "SYNTHETIC_FALLBACK_ENABLED": True}).run()
    disabled = pipeline_from_config({**config, "SYNTHETIC_FALLBACK_ENABLED": False}).run()

    assert enabled.synthetic
    assert len(enabled.records) == 3
    assert not disabled.synthetic
    assert disabled.records == []
    assert len(unreachable.calls) == 8


def _ingest_synthetic_outage(session):
    synthetic = SyntheticDrawGenerator(10, rng=random.Random(9), today=lambda: date(2025, 12, 8))
    return IngestionService(_pipeline({}, synthetic)).run_ingestion(session)


def test_real_draw_replaces_synthetic_row_with_same_issue(session, repo):
    _ingest_synthetic_outage(session)
    # Holiday breaks leave real issues behind the nominal sequence.
    issue = nominal_issue(date(2025, 12, 7))
    assert repo.exists_issue(session, issue)

    listing = f"<div>2025-12-18 第 {issue} 期 01 03 07 15 20 22 10</div>"
    summary = IngestionService(_pipeline({LISTING.endpoint.url: FakeResponse(text=listing)})).run_ingestion(session)

    assert summary.new_records == 1
    assert summary.replaced_synthetic == 1
    stored = next(r for r in repo.list_history(session) if r.issue_number == issue)
    assert stored.source == "17500_history"
    assert stored.draw_date == date(2025, 12, 18)
    assert stored.red_numbers == [1, 3, 7, 15, 20, 22]
    assert stored.blue == 10


def test_real_draw_replaces_synthetic_rows_for_its_date(session, repo):
    _ingest_synthetic_outage(session)
    superseded = [
        r for r in repo.list_history(session) if r.issue_number == "2025141" or r.draw_date == date(2025, 12, 7)
    ]

    summary = IngestionService(_pipeline({LISTING.endpoint.url: FakeResponse(text=LISTING_17500)})).run_ingestion(
        session
    )

    assert summary.new_records == 1
    assert summary.replaced_synthetic == len(superseded)
    rows = repo.list_history(session, limit=500)
    assert [r.source for r in rows if r.draw_date == date(2025, 12, 7)] == ["17500_history"]
    assert repo.count(session) == 10 - len(superseded) + 1


def test_synthetic_batch_never_replaces_stored_rows(session, repo):
    _ingest_synthetic_outage(session)

    summary = _ingest_synthetic_outage(session)

    assert summary.replaced_synthetic == 0
    assert summary.new_records == 0
    assert summary.skipped_existing == 10
