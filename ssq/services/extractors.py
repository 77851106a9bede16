"""Draw extraction strategies for scraped documents.

Every strategy turns raw text (HTML, JSON, or whatever a source returned) into
at most one draw: the validated candidate with the greatest issue number.
Strategies differ only in how they find candidates; validation and selection
are shared.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date

from bs4 import BeautifulSoup, Tag

from ssq.rules import RedTuple, canonical_reds, is_draw_day, is_valid_issue, validate_blue

logger = logging.getLogger(__name__)

# Whitespace and markup allowed between tokens of one draw.
_GAP = r"(?:\s|&nbsp;|<[^>]*>)*"
_SEP = r"(?:[\s,|+]|&nbsp;|<[^>]*>)+"
_TOKEN = r"(?<!\d)(\d{1,2})(?!\d)"

_SEVEN_NUMBERS = re.compile(_TOKEN + "".join(_SEP + _TOKEN for _ in range(6)))
_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")

DEFAULT_WINDOW = 200

# (issue, date text, seven numbers in draw order: six red then blue)
Candidate = tuple[str, str, list[int]]


@dataclass(frozen=True)
class ExtractionResult:
    issue: str
    draw_date: date
    canonical_numbers: RedTuple
    reveal_order_numbers: tuple[int, ...]
    special_number: int


def parse_draw_date(text: str) -> date | None:
    m = _DATE.search(text or "")
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def scan_seven_numbers(segment: str) -> list[int] | None:
    """First run of seven 1-2 digit tokens separated only by spacing/markup."""

    m = _SEVEN_NUMBERS.search(segment)
    if not m:
        return None
    return [int(g) for g in m.groups()]


def build_result(issue: str, date_text: str, numbers: list[int]) -> ExtractionResult | None:
    """Validate one candidate; ``None`` when any field is unusable."""

    issue = (issue or "").strip()
    if not is_valid_issue(issue):
        logger.debug("Skipping candidate with malformed issue %r", issue)
        return None

    if len(numbers) != 7:
        logger.debug("Skipping issue %s: expected 7 numbers, got %s", issue, len(numbers))
        return None

    try:
        canonical = canonical_reds(numbers[:6])
        blue = validate_blue(numbers[6])
    except ValueError as exc:
        logger.debug("Skipping issue %s: %s", issue, exc)
        return None

    drawn_on = parse_draw_date(date_text)
    if drawn_on is None:
        logger.debug("Skipping issue %s: unparseable date %r", issue, date_text)
        return None
    if not is_draw_day(drawn_on):
        logger.debug("Skipping issue %s: %s is not a draw day", issue, drawn_on.isoformat())
        return None

    return ExtractionResult(
        issue=issue,
        draw_date=drawn_on,
        canonical_numbers=canonical,
        reveal_order_numbers=tuple(numbers[:6]),
        special_number=blue,
    )


class ExtractionStrategy(ABC):
    """Uniform ``text -> ExtractionResult | None`` contract."""

    name = "base"

    @abstractmethod
    def candidates(self, text: str) -> Iterable[Candidate]:
        """Yield raw candidates in document order."""

    def extract(self, text: str) -> ExtractionResult | None:
        if not text or not text.strip():
            return None

        best: ExtractionResult | None = None
        seen = 0
        for issue, date_text, numbers in self.candidates(text):
            seen += 1
            result = build_result(issue, date_text, numbers)
            if result is None:
                continue
            if best is None or int(result.issue) > int(best.issue):
                best = result

        logger.debug(
            "%s: %s candidates, selected %s",
            self.name,
            seen,
            best.issue if best else None,
        )
        return best


class _AnchorWindowBase(ExtractionStrategy):
    """Anchor regex followed by a bounded scan for the seven numbers.

    The window never crosses into the next anchor, so a row without numbers
    cannot borrow its neighbour's.
    """

    anchor: re.Pattern[str]

    def __init__(self, window: int = DEFAULT_WINDOW) -> None:
        self._window = window

    @abstractmethod
    def _fields(self, match: re.Match[str]) -> tuple[str, str]:
        """(issue, date text) from an anchor match."""

    def candidates(self, text: str) -> Iterator[Candidate]:
        anchors = list(self.anchor.finditer(text))
        for i, match in enumerate(anchors):
            stop = match.end() + self._window
            if i + 1 < len(anchors):
                stop = min(stop, anchors[i + 1].start())

            numbers = scan_seven_numbers(text[match.end():stop])
            issue, date_text = self._fields(match)
            if numbers is None:
                logger.debug("%s: no numbers after anchor for issue %s", self.name, issue)
                continue
            yield issue, date_text, numbers


class AnchorWindowExtractor(_AnchorWindowBase):
    """``2025-12-07 第 2025141 期 02 04 05 10 12 13 06`` style listings."""

    name = "anchor_window"
    anchor = re.compile(
        r"(\d{4}-\d{1,2}-\d{1,2})(?:\([^)]{0,8}\))?" + _GAP + "第" + _GAP + r"(\d+)" + _GAP + "期"
    )

    def _fields(self, match: re.Match[str]) -> tuple[str, str]:
        return match.group(2), match.group(1)


class TableRowExtractor(_AnchorWindowBase):
    """``<tr><td>2025141</td><td>2025-12-07(日)</td><td>02 04 ...</td>`` rows."""

    name = "table_row"
    anchor = re.compile(
        r"<td[^>]*>" + _GAP + r"(\d+)" + _GAP + r"</td>\s*<td[^>]*>" + _GAP
        + r"(\d{4}-\d{1,2}-\d{1,2})(?:\s*\([^)]{0,8}\))?" + _GAP + r"</td>",
        re.IGNORECASE,
    )

    def _fields(self, match: re.Match[str]) -> tuple[str, str]:
        return match.group(1), match.group(2)


class JsonNoticeExtractor(ExtractionStrategy):
    """Official draw notice API: ``{"result": [{"code", "date", "red", "blue"}]}``."""

    name = "json_notice"

    def candidates(self, text: str) -> Iterator[Candidate]:
        try:
            payload = json.loads(text)
        except ValueError:
            return

        if not isinstance(payload, dict):
            return
        items = payload.get("result") or payload.get("data")
        if not isinstance(items, list):
            return

        for item in items:
            if not isinstance(item, dict):
                continue
            issue = str(item.get("code") or item.get("issue") or "")
            reds = re.findall(r"\d+", str(item.get("red") or ""))
            blues = re.findall(r"\d+", str(item.get("blue") or ""))
            if not blues:
                continue
            yield issue, str(item.get("date") or ""), [int(n) for n in reds] + [int(blues[0])]


def _class_matcher(*names: str) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(n) for n in names)
    return re.compile(rf"(?:^|[-_])(?:{alternatives})(?:[-_]|$)", re.IGNORECASE)


class ClassAttributeExtractor(ExtractionStrategy):
    """Heuristics over class attributes for markup the regex anchors miss.

    A number group is an element with at least six ``red`` classed children,
    or a ``numbers`` classed element holding the seven numbers as text. Its
    issue and date come from the closest enclosing element that holds exactly
    one ``issue`` classed element, else from the nearest preceding
    ``date 第 issue 期`` text.
    """

    name = "class_attribute"

    _red = _class_matcher("red", "redball", "ball_red")
    _blue = _class_matcher("blue", "blueball", "ball_blue")
    _numbers = _class_matcher("numbers", "number", "balls", "haoma")
    _issue = _class_matcher("issue", "qihao", "period")
    _date = _class_matcher("date", "kjdate")
    _anchor_text = re.compile(r"(\d{4}-\d{1,2}-\d{1,2}).{0,40}?第\s*(\d+)\s*期", re.DOTALL)

    def __init__(self, max_depth: int = 3) -> None:
        self._max_depth = max_depth

    def _is_group(self, tag: Tag) -> bool:
        if len(tag.find_all(class_=self._red, recursive=False)) >= 6:
            return True
        return self._has_class(tag, self._numbers) and tag.find(class_=self._numbers) is None

    @staticmethod
    def _has_class(tag: Tag, pattern: re.Pattern[str]) -> bool:
        return any(pattern.search(c) for c in (tag.get("class") or []))

    def _numbers_of(self, group: Tag) -> list[int]:
        reds = group.find_all(class_=self._red, recursive=False)
        if len(reds) >= 6:
            blues = group.find_all(class_=self._blue, recursive=False)
            tokens = [r.get_text(strip=True) for r in reds] + [b.get_text(strip=True) for b in blues[:1]]
            return [int(t) for t in tokens if t.isdigit()]
        return scan_seven_numbers(group.get_text(" ", strip=True)) or []

    def _context_of(self, group: Tag) -> tuple[str, str] | None:
        for depth, parent in enumerate(group.parents):
            if depth >= self._max_depth or parent.name == "[document]":
                break
            issues = parent.find_all(class_=self._issue)
            if len(issues) != 1:
                if len(issues) > 1:
                    break
                continue
            date_el = parent.find(class_=self._date)
            date_text = date_el.get_text(" ", strip=True) if date_el else parent.get_text(" ", strip=True)
            digits = re.findall(r"\d+", issues[0].get_text(" ", strip=True))
            return (digits[0] if digits else ""), date_text

        previous = group.find_previous(string=self._anchor_text)
        if previous is None:
            return None
        m = self._anchor_text.search(str(previous))
        if m is None:
            return None
        return m.group(2), m.group(1)

    def candidates(self, text: str) -> Iterator[Candidate]:
        soup = BeautifulSoup(text, "html.parser")
        for group in soup.find_all(self._is_group):
            context = self._context_of(group)
            if context is None:
                logger.debug("%s: number group without issue/date context", self.name)
                continue
            issue, date_text = context
            yield issue, date_text, self._numbers_of(group)


def default_strategies() -> list[ExtractionStrategy]:
    """Declared order tried against every HTML source."""

    return [TableRowExtractor(), AnchorWindowExtractor(), ClassAttributeExtractor()]
