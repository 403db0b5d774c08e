"""PaginationStrategy: line-range pages and two-page book spreads."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from sheetstand.errors import LayoutConfigError
from sheetstand.layout import Line, break_lines, tokenize
from sheetstand.sheet_models import BookSpread, LineRange, Measure, PageSpread, SheetPage

#: Pages shown side by side in the open-book display.
PAGES_PER_SPREAD = 2


class PaginationMode(str, Enum):
    LINE_RANGE = "line-range"
    BOOK_SPREAD = "book-spread"


def _check_lines_per_page(lines_per_page: int) -> None:
    if isinstance(lines_per_page, bool) or not isinstance(lines_per_page, int):
        raise LayoutConfigError(f"lines_per_page must be a positive integer, got {lines_per_page!r}.")
    if lines_per_page <= 0:
        raise LayoutConfigError(f"lines_per_page must be a positive integer, got {lines_per_page}.")


def paginate_lines(lines: list[Line], lines_per_page: int) -> list[LineRange]:
    """
    Chunk the line array into consecutive ``[start, end)`` windows.

    Every window holds ``lines_per_page`` lines except possibly the last.
    No lines yields no pages.

    Raises:
        LayoutConfigError: If ``lines_per_page`` is not a positive integer.
    """
    _check_lines_per_page(lines_per_page)
    line_count = len(lines)
    return [
        LineRange(
            start=start,
            end=min(start + lines_per_page, line_count),
            page_number=start // lines_per_page + 1,
        )
        for start in range(0, line_count, lines_per_page)
    ]


def page_spread(current_page: int) -> PageSpread:
    """Return the spread that shows line-range page ``current_page`` (0-indexed)."""
    spread_index = max(0, current_page) // PAGES_PER_SPREAD
    left_page_index = spread_index * PAGES_PER_SPREAD
    return PageSpread(
        left_page_index=left_page_index,
        right_page_index=left_page_index + 1,
        spread_index=spread_index,
    )


def paginate_spreads(page_ranges: list[LineRange]) -> list[BookSpread]:
    """Pair line-range pages two at a time; a trailing odd page has no right side."""
    spreads: list[BookSpread] = []
    for left_index in range(0, len(page_ranges), PAGES_PER_SPREAD):
        right_index = left_index + 1
        spreads.append(
            BookSpread(
                spread_index=left_index // PAGES_PER_SPREAD,
                left=page_ranges[left_index],
                right=page_ranges[right_index] if right_index < len(page_ranges) else None,
            )
        )
    return spreads


def create_pages(
    measures: list[Measure],
    max_chars_per_line: int = 35,
    lines_per_page: int = 8,
) -> list[SheetPage]:
    """
    Build ``SheetPage`` records for a measure list.

    Every page carries all measures; its ``line_range`` tells the display
    which lines to show. An empty song still gets one empty page.
    """
    lines = break_lines(tokenize(measures), max_chars_per_line)
    pages = [
        SheetPage(measures=measures, page_number=line_range.page_number, line_range=line_range)
        for line_range in paginate_lines(lines, lines_per_page)
    ]
    if not pages:
        pages.append(SheetPage(measures=measures, page_number=1, line_range=LineRange(0, 0, 1)))
    return pages


# ── Strategies ───────────────────────────────────────────────────────────────

class PaginationStrategy(ABC):
    """
    Abstract Strategy for grouping broken lines into displayable pages.

    Both concrete strategies read the same line breaker output but keep their
    own numbering; neither depends on the other.
    """

    mode: PaginationMode

    @abstractmethod
    def paginate(self, lines: list[Line], lines_per_page: int) -> list:
        """Group ``lines`` into the strategy's page units."""

    @abstractmethod
    def locate(self, current_page: int) -> int:
        """Map ``PlaybackState.current_page`` to an index into ``paginate()``'s output."""


class LineRangePaginator(PaginationStrategy):
    """Fixed-size line windows for the single-page notation display."""

    mode = PaginationMode.LINE_RANGE

    def paginate(self, lines: list[Line], lines_per_page: int) -> list[LineRange]:
        return paginate_lines(lines, lines_per_page)

    def locate(self, current_page: int) -> int:
        return current_page


class BookSpreadPaginator(PaginationStrategy):
    """
    Open-book display: line-range pages consumed two at a time.

    ``current_page`` still counts line-range pages, so the spread index is
    ``current_page // 2``.
    """

    mode = PaginationMode.BOOK_SPREAD

    def paginate(self, lines: list[Line], lines_per_page: int) -> list[BookSpread]:
        return paginate_spreads(paginate_lines(lines, lines_per_page))

    def locate(self, current_page: int) -> int:
        return page_spread(current_page).spread_index


def get_paginator(mode: PaginationMode | str) -> PaginationStrategy:
    """Return the PaginationStrategy for ``mode``."""
    if PaginationMode(mode) is PaginationMode.BOOK_SPREAD:
        return BookSpreadPaginator()
    return LineRangePaginator()
