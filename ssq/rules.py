"""Double Color Ball rules: number ranges, issue format and draw schedule."""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Iterable

RED_COUNT = 6
RED_MAX = 33
BLUE_MAX = 16
ISSUE_LENGTH = 7

# date.weekday(): Tuesday=1, Thursday=3, Sunday=6
DRAW_WEEKDAYS = frozenset({1, 3, 6})

RedTuple = tuple[int, int, int, int, int, int]

_ISSUE_RE = re.compile(rf"^\d{{{ISSUE_LENGTH}}}$")


def is_valid_issue(issue: str) -> bool:
    return bool(_ISSUE_RE.match(issue or ""))


def is_draw_day(day: date) -> bool:
    return day.weekday() in DRAW_WEEKDAYS


def canonical_reds(numbers: Iterable[int]) -> RedTuple:
    """Validate six red numbers and return them sorted ascending.

    Raises:
        ValueError: wrong count, duplicates, or a number outside 1..33.
    """

    nums = [int(n) for n in numbers]
    if len(nums) != RED_COUNT:
        raise ValueError(f"Expected {RED_COUNT} red numbers, got {len(nums)}")
    if len(set(nums)) != RED_COUNT:
        raise ValueError(f"Red numbers must be distinct: {nums}")
    if any(n < 1 or n > RED_MAX for n in nums):
        raise ValueError(f"Red number out of range 1..{RED_MAX}: {nums}")
    s = sorted(nums)
    return (s[0], s[1], s[2], s[3], s[4], s[5])


def validate_blue(number: int) -> int:
    n = int(number)
    if n < 1 or n > BLUE_MAX:
        raise ValueError(f"Blue number out of range 1..{BLUE_MAX}: {n}")
    return n


def latest_draw_day(on_or_before: date) -> date:
    day = on_or_before
    while not is_draw_day(day):
        day -= timedelta(days=1)
    return day


def previous_draw_day(before: date) -> date:
    return latest_draw_day(before - timedelta(days=1))


def nominal_issue(day: date) -> str:
    """Issue number for ``day`` assuming no draw in the year was skipped.

    Real issues drift behind this around holiday breaks; it is only used to
    label synthetic data.
    """

    if not is_draw_day(day):
        raise ValueError(f"{day.isoformat()} is not a draw day")
    start = date(day.year, 1, 1)
    seq = sum(1 for offset in range((day - start).days + 1) if is_draw_day(start + timedelta(days=offset)))
    return f"{day.year}{seq:03d}"
