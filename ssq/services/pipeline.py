"""Fallback chain over draw sources.

Stages run in declared order. A stage fails over to the next one when the
fetch fails, the body is empty, or none of its strategies extracts a draw. The
first stage that produces a draw wins and no later stage runs. When every
stage fails the synthetic generator supplies the batch, flagged as such.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ssq.models.draw_record import SYNTHETIC_SOURCE
from ssq.services.extractors import (
    ExtractionResult,
    ExtractionStrategy,
    JsonNoticeExtractor,
    default_strategies,
)
from ssq.services.fetcher import FetchStatus, SourceEndpoint, SourceFetcher
from ssq.services.synthetic import SyntheticDrawGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    endpoint: SourceEndpoint
    strategies: tuple[ExtractionStrategy, ...]

    @property
    def name(self) -> str:
        return self.endpoint.name


@dataclass(frozen=True)
class StageAttempt:
    stage: str
    fetch_status: FetchStatus
    strategy: str | None = None
    issue: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.issue is not None


@dataclass(frozen=True)
class PipelineResult:
    records: list[ExtractionResult]
    source: str | None
    synthetic: bool
    attempts: list[StageAttempt] = field(default_factory=list)


def default_stages() -> list[Stage]:
    """Official notice API first, then the history pages it mirrors."""

    html = tuple(default_strategies())
    return [
        Stage(
            SourceEndpoint(
                name="cwl_notice_api",
                url="https://www.cwl.gov.cn/cwl_admin/front/cwlkj/search/kjxx/findDrawNotice",
                referer="https://www.cwl.gov.cn/ygkj/wqkjgg/",
                params={"name": "ssq", "issueCount": "30"},
            ),
            (JsonNoticeExtractor(),),
        ),
        Stage(SourceEndpoint(name="cwl_history", url="https://www.cwl.gov.cn/ygkj/wqkjgg/"), html),
        Stage(SourceEndpoint(name="17500_history", url="https://www.17500.cn/ssq/awardlist.php"), html),
        Stage(SourceEndpoint(name="500_history", url="https://datachart.500.com/ssq/history/history.shtml"), html),
    ]


class FallbackPipeline:
    def __init__(
        self,
        fetcher: SourceFetcher,
        stages: Sequence[Stage],
        synthetic: SyntheticDrawGenerator | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._stages = list(stages)
        self._synthetic = synthetic

    def close(self) -> None:
        """Release the fetcher's HTTP connections."""

        self._fetcher.close()

    def run(self) -> PipelineResult:
        attempts: list[StageAttempt] = []

        for i, stage in enumerate(self._stages, start=1):
            logger.info("Trying stage %s/%s: %s", i, len(self._stages), stage.name)
            outcome = self._fetcher.fetch(stage.endpoint)
            if outcome.status is not FetchStatus.OK:
                attempts.append(StageAttempt(stage.name, outcome.status))
                continue

            for strategy in stage.strategies:
                record = strategy.extract(outcome.text)
                if record is None:
                    continue
                logger.info("Stage %s extracted issue %s via %s", stage.name, record.issue, strategy.name)
                attempts.append(StageAttempt(stage.name, outcome.status, strategy.name, record.issue))
                return PipelineResult(records=[record], source=stage.name, synthetic=False, attempts=attempts)

            logger.info("Stage %s: no strategy matched the document", stage.name)
            attempts.append(StageAttempt(stage.name, outcome.status))

        if self._synthetic is None:
            logger.error("All %s stages failed and synthetic fallback is disabled", len(self._stages))
            return PipelineResult(records=[], source=None, synthetic=False, attempts=attempts)

        records = self._synthetic.generate()
        logger.warning("All %s stages failed; using %s synthetic draws", len(self._stages), len(records))
        return PipelineResult(records=records, source=SYNTHETIC_SOURCE, synthetic=True, attempts=attempts)
