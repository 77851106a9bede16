from datetime import date

import pytest

from ssq.rules import (
    canonical_reds,
    is_draw_day,
    is_valid_issue,
    latest_draw_day,
    nominal_issue,
    previous_draw_day,
    validate_blue,
)


def test_canonical_reds_sorts():
    assert canonical_reds([13, 2, 10, 5, 4, 12]) == (2, 4, 5, 10, 12, 13)


@pytest.mark.parametrize(
    "numbers",
    [
        [1, 2, 3, 4, 5],
        [1, 2, 3, 4, 5, 5],
        [0, 2, 3, 4, 5, 6],
        [1, 2, 3, 4, 5, 34],
    ],
)
def test_canonical_reds_rejects_bad_input(numbers):
    with pytest.raises(ValueError):
        canonical_reds(numbers)


def test_validate_blue_range():
    assert validate_blue(16) == 16
    with pytest.raises(ValueError):
        validate_blue(17)
    with pytest.raises(ValueError):
        validate_blue(0)


def test_issue_format():
    assert is_valid_issue("2025141")
    assert not is_valid_issue("202514")
    assert not is_valid_issue("20251411")
    assert not is_valid_issue("2025a41")


def test_draw_schedule_is_tue_thu_sun():
    assert is_draw_day(date(2025, 12, 2))  # Tuesday
    assert is_draw_day(date(2025, 12, 4))  # Thursday
    assert is_draw_day(date(2025, 12, 7))  # Sunday
    assert not is_draw_day(date(2025, 12, 8))  # Monday


def test_latest_and_previous_draw_day():
    assert latest_draw_day(date(2025, 12, 8)) == date(2025, 12, 7)
    assert latest_draw_day(date(2025, 12, 7)) == date(2025, 12, 7)
    assert previous_draw_day(date(2025, 12, 7)) == date(2025, 12, 4)


def test_nominal_issue_counts_draw_days_in_year():
    # 2025-01-01 is a Wednesday: draws on Jan 2 (Thu), Jan 5 (Sun), Jan 7 (Tue).
    assert nominal_issue(date(2025, 1, 2)) == "2025001"
    assert nominal_issue(date(2025, 1, 7)) == "2025003"
    with pytest.raises(ValueError):
        nominal_issue(date(2025, 1, 1))
