from datetime import date

from factories import make_draw

from ssq.services.history_import import IMPORT_SOURCE, import_rows, parse_history_row


def test_parse_row_with_prize_fields():
    row = ["2025141", "2025-12-07", "13", "02", "10", "05", "04", "12", "06", "2,345,678,901", "1,234", "5,000,000"]

    parsed = parse_history_row(row)

    assert parsed.draw.issue == "2025141"
    assert parsed.draw.draw_date == date(2025, 12, 7)
    assert parsed.draw.reveal_order_numbers == (13, 2, 10, 5, 4, 12)
    assert parsed.draw.canonical_numbers == (2, 4, 5, 10, 12, 13)
    assert parsed.prize_pool == "2,345,678,901"
    assert parsed.first_prize_count == 1234
    assert parsed.first_prize_amount == "5,000,000"


def test_parse_row_without_prize_fields():
    parsed = parse_history_row(["2025140", "2025-12-04", "1", "3", "4", "12", "18", "24", "5"])

    assert parsed.draw.special_number == 5
    assert parsed.prize_pool is None
    assert parsed.first_prize_count is None


def test_parse_rejects_bad_rows():
    assert parse_history_row(["2025141", "2025-12-07", "1", "2"]) is None
    assert parse_history_row(["2025141", "2025-12-07", "a", "2", "3", "4", "5", "6", "7"]) is None
    assert parse_history_row(["2025141", "2025-12-07", "1", "1", "3", "4", "5", "6", "7"]) is None
    assert parse_history_row(["2025142", "2025-12-08", "1", "2", "3", "4", "5", "6", "7"]) is None


def test_import_counts_each_outcome(session, repo):
    repo.insert(session, make_draw("2025139", [2, 5, 17, 22, 30, 33], 6, date(2025, 12, 2)))
    rows = [
        ["2025141", "2025-12-07", "13", "02", "10", "05", "04", "12", "06"],
        ["2025140", "2025-12-04", "01", "03", "04", "12", "18", "24", "05"],
        ["2025139", "2025-12-02", "02", "05", "17", "22", "30", "33", "06"],
        ["garbage"],
    ]

    report = import_rows(session, rows, repo)

    assert (report.inserted, report.skipped_existing, report.invalid, report.failures) == (2, 1, 1, 0)
    assert [r.issue_number for r in repo.list_history(session)] == ["2025141", "2025140", "2025139"]
    assert repo.list_history(session)[0].source == IMPORT_SOURCE


def test_import_replaces_synthetic_row_for_same_issue(session, repo):
    repo.insert(session, make_draw("2025141", [4, 5, 9, 16, 25, 33], 15, date(2025, 12, 2), source="synthetic"))

    report = import_rows(session, [["2025141", "2025-12-07", "13", "02", "10", "05", "04", "12", "06"]], repo)

    assert (report.inserted, report.replaced_synthetic, report.skipped_existing) == (1, 1, 0)
    stored = repo.list_history(session)[0]
    assert stored.source == IMPORT_SOURCE
    assert stored.blue == 6
