"""Placeholder draws used only when every real source failed."""

from __future__ import annotations

import random
from collections.abc import Callable
from datetime import date

from ssq.rules import BLUE_MAX, RED_COUNT, RED_MAX, canonical_reds, latest_draw_day, nominal_issue, previous_draw_day
from ssq.services.extractors import ExtractionResult


class SyntheticDrawGenerator:
    """Backfill ``count`` draws on the Tue/Thu/Sun cadence ending at today.

    Volume and dates are deterministic for a given clock; only the numbers are
    random.
    """

    def __init__(
        self,
        count: int = 10,
        *,
        rng: random.Random | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        self._count = count
        self._rng = rng or random.Random()
        self._today = today

    def generate(self) -> list[ExtractionResult]:
        out: list[ExtractionResult] = []
        day = latest_draw_day(self._today())
        for _ in range(self._count):
            reveal = self._rng.sample(range(1, RED_MAX + 1), RED_COUNT)
            out.append(
                ExtractionResult(
                    issue=nominal_issue(day),
                    draw_date=day,
                    canonical_numbers=canonical_reds(reveal),
                    reveal_order_numbers=tuple(reveal),
                    special_number=self._rng.randint(1, BLUE_MAX),
                )
            )
            day = previous_draw_day(day)
        return out
