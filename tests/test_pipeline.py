import random
from datetime import date

from fakes import CWL_NOTICE_JSON, CWL_TABLE, LISTING_17500, FakeHttp, FakeResponse

from ssq.services.extractors import AnchorWindowExtractor, JsonNoticeExtractor, TableRowExtractor, default_strategies
from ssq.services.fetcher import FetchStatus, SourceEndpoint, SourceFetcher
from ssq.services.pipeline import SYNTHETIC_SOURCE, FallbackPipeline, Stage, default_stages
from ssq.services.synthetic import SyntheticDrawGenerator

OFFICIAL = Stage(SourceEndpoint("official", "https://official.test/ssq"), tuple(default_strategies()))
MIRROR = Stage(SourceEndpoint("mirror", "https://mirror.test/ssq"), tuple(default_strategies()))
ARCHIVE = Stage(SourceEndpoint("archive", "https://archive.test/ssq"), tuple(default_strategies()))


def _fetcher(http: FakeHttp) -> SourceFetcher:
    return SourceFetcher(http, delay_range=(0.0, 0.0), rng=random.Random(0), sleep=lambda _: None)


def _synthetic(count: int = 5) -> SyntheticDrawGenerator:
    return SyntheticDrawGenerator(count, rng=random.Random(3), today=lambda: date(2025, 12, 8))


def test_first_successful_stage_wins_and_later_stages_are_not_fetched():
    http = FakeHttp(
        {
            OFFICIAL.endpoint.url: FakeResponse(text=LISTING_17500),
            MIRROR.endpoint.url: FakeResponse(text=CWL_TABLE),
        }
    )
    result = FallbackPipeline(_fetcher(http), [OFFICIAL, MIRROR], _synthetic()).run()

    assert result.source == "official"
    assert not result.synthetic
    assert [r.issue for r in result.records] == ["2025141"]
    assert http.urls() == [OFFICIAL.endpoint.url]


def test_transport_failure_falls_through_to_next_stage():
    http = FakeHttp(
        {
            OFFICIAL.endpoint.url: FakeResponse(status_code=503, text="busy"),
            MIRROR.endpoint.url: FakeResponse(text=CWL_TABLE),
        }
    )
    result = FallbackPipeline(_fetcher(http), [OFFICIAL, MIRROR], _synthetic()).run()

    assert result.source == "mirror"
    assert result.records[0].reveal_order_numbers == (13, 2, 10, 5, 4, 12)
    assert result.attempts[0].fetch_status is FetchStatus.TRANSPORT_FAILURE
    assert result.attempts[1].strategy == "table_row"


def test_document_without_draws_advances_to_next_stage():
    http = FakeHttp(
        {
            OFFICIAL.endpoint.url: FakeResponse(text="<html><body>维护中</body></html>"),
            MIRROR.endpoint.url: FakeResponse(text=""),
            ARCHIVE.endpoint.url: FakeResponse(text=LISTING_17500),
        }
    )
    result = FallbackPipeline(_fetcher(http), [OFFICIAL, MIRROR, ARCHIVE], _synthetic()).run()

    assert result.source == "archive"
    assert [a.fetch_status for a in result.attempts] == [FetchStatus.OK, FetchStatus.EMPTY, FetchStatus.OK]
    assert not result.attempts[0].succeeded
    assert result.attempts[2].succeeded


def test_all_stages_failing_yields_flagged_synthetic_batch():
    http = FakeHttp()
    result = FallbackPipeline(_fetcher(http), [OFFICIAL, MIRROR], _synthetic(5)).run()

    assert result.synthetic
    assert result.source == SYNTHETIC_SOURCE
    assert len(result.records) == 5
    assert http.urls() == [OFFICIAL.endpoint.url, MIRROR.endpoint.url]


def test_all_stages_failing_without_synthetic_is_empty():
    result = FallbackPipeline(_fetcher(FakeHttp()), [OFFICIAL, MIRROR], None).run()

    assert result.records == []
    assert result.source is None
    assert not result.synthetic


def test_strategies_run_in_declared_order():
    doc = (
        "<table><tr><td>2025140</td><td>2025-12-04</td><td>01 03 04 12 18 24 05</td></tr></table>"
        "<div>2025-12-07 第 2025141 期 02 04 05 10 12 13 06</div>"
    )
    table_first = Stage(OFFICIAL.endpoint, (TableRowExtractor(), AnchorWindowExtractor()))
    anchor_first = Stage(OFFICIAL.endpoint, (AnchorWindowExtractor(), TableRowExtractor()))

    http = FakeHttp({OFFICIAL.endpoint.url: FakeResponse(text=doc)})
    first = FallbackPipeline(_fetcher(http), [table_first]).run()
    second = FallbackPipeline(_fetcher(http), [anchor_first]).run()

    assert (first.attempts[0].strategy, first.records[0].issue) == ("table_row", "2025140")
    assert (second.attempts[0].strategy, second.records[0].issue) == ("anchor_window", "2025141")


def test_notice_api_stage_reads_json():
    stages = default_stages()
    api = stages[0]
    http = FakeHttp({api.endpoint.url: FakeResponse(text=CWL_NOTICE_JSON)})

    result = FallbackPipeline(_fetcher(http), stages).run()

    assert result.source == "cwl_notice_api"
    assert result.records[0].issue == "2025141"
    assert http.calls[0]["params"] == {"name": "ssq", "issueCount": "30"}


def test_default_stage_order():
    stages = default_stages()

    assert [s.name for s in stages] == ["cwl_notice_api", "cwl_history", "17500_history", "500_history"]
    assert isinstance(stages[0].strategies[0], JsonNoticeExtractor)
    assert [s.name for s in stages[1].strategies] == ["table_row", "anchor_window", "class_attribute"]


def test_close_releases_fetcher_connections():
    http = FakeHttp()
    FallbackPipeline(_fetcher(http), [OFFICIAL]).close()
    assert http.closed
