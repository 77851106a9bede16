"""Business logic for generating combinations that never appeared in history."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from ssq.errors import BoundsError, GenerationExhaustedError, StoreError
from ssq.repositories.history_repository import HistoryRepository
from ssq.rules import BLUE_MAX, RED_COUNT, RED_MAX, RedTuple, canonical_reds

logger = logging.getLogger(__name__)

Sampler = Callable[[], tuple[RedTuple, int]]

MIN_COUNT = 1
MAX_COUNT = 10


@dataclass(frozen=True)
class Combination:
    reds: RedTuple
    blue: int
    attempts: int

    def as_dict(self) -> dict:
        return {"red": list(self.reds), "blue": self.blue, "attempts": self.attempts}


@dataclass
class GenerationResult:
    combinations: list[Combination]
    warnings: list[str] = field(default_factory=list)

    @property
    def attempts_per_combination(self) -> list[int]:
        return [c.attempts for c in self.combinations]


class GenerationService:
    """Draw random combinations, rejecting any already drawn in history.

    Each combination gets its own retry budget. Running out of budget fails
    the whole request; the combinations accepted so far travel with the error.
    Storing an accepted combination is best-effort and only produces a
    warning when it fails.
    """

    def __init__(
        self,
        max_attempts: int = 1000,
        *,
        rng: random.Random | None = None,
        sampler: Sampler | None = None,
        repository: HistoryRepository | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._max_attempts = max_attempts
        self._rng = rng or random.Random()
        self._sampler = sampler or self._sample
        self._repo = repository or HistoryRepository()

    def _sample(self) -> tuple[RedTuple, int]:
        reds = canonical_reds(self._rng.sample(range(1, RED_MAX + 1), RED_COUNT))
        return reds, self._rng.randint(1, BLUE_MAX)

    def _next_unique(self, session: Session, index: int, taken: set[tuple[RedTuple, int]]) -> Combination | None:
        for attempt in range(1, self._max_attempts + 1):
            reds, blue = self._sampler()
            reds = canonical_reds(reds)
            if (reds, blue) in taken:
                continue
            if self._repo.exists_combination(session, reds, blue):
                logger.debug("Combination %s: %s+%s already drawn, retrying", index, reds, blue)
                continue
            return Combination(reds=reds, blue=int(blue), attempts=attempt)
        return None

    def generate(self, session: Session, count: int, user_id: int) -> GenerationResult:
        """Generate ``count`` combinations (1..10) owned by ``user_id``."""

        if count < MIN_COUNT or count > MAX_COUNT:
            raise BoundsError(count, MIN_COUNT, MAX_COUNT)

        result = GenerationResult(combinations=[])
        taken: set[tuple[RedTuple, int]] = set()

        for index in range(1, count + 1):
            combo = self._next_unique(session, index, taken)
            if combo is None:
                logger.error("Combination %s/%s exhausted %s attempts", index, count, self._max_attempts)
                raise GenerationExhaustedError(
                    index,
                    self._max_attempts,
                    partial=[c.as_dict() for c in result.combinations],
                    warnings=result.warnings,
                )

            taken.add((combo.reds, combo.blue))
            result.combinations.append(combo)

            try:
                self._repo.insert_generated(session, user_id, combo.reds, combo.blue)
            except StoreError as exc:
                logger.warning("Generated combination %s not saved: %s", index, exc.message)
                result.warnings.append(f"Combination {index} was generated but could not be saved")

        return result
