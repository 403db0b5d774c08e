"""Unit tests for line-range and book-spread pagination."""

import math

import pytest

from sheetstand.errors import LayoutConfigError
from sheetstand.layout import break_lines, tokenize
from sheetstand.pagination import (
    BookSpreadPaginator,
    LineRangePaginator,
    PaginationMode,
    create_pages,
    get_paginator,
    page_spread,
    paginate_lines,
    paginate_spreads,
)
from sheetstand.sheet_models import LineRange, Measure, Note


def _lines(count: int) -> list:
    """``count`` single-token lines."""
    measures = [Measure.from_notes([Note(key=f"K{i}") for i in range(count)])]
    return break_lines(tokenize(measures), 1)


def test_paginate_lines_example() -> None:
    pages = paginate_lines(_lines(2), 1)
    assert [(p.start, p.end) for p in pages] == [(0, 1), (1, 2)]
    assert [p.page_number for p in pages] == [1, 2]


@pytest.mark.parametrize(
    ("line_count", "per_page"),
    [(0, 3), (1, 1), (5, 2), (6, 3), (7, 6), (13, 4)],
)
def test_paginate_lines_covers_all_lines(line_count: int, per_page: int) -> None:
    pages = paginate_lines(_lines(line_count), per_page)
    assert len(pages) == math.ceil(line_count / per_page)
    covered = [i for p in pages for i in range(p.start, p.end)]
    assert covered == list(range(line_count))
    assert all(0 < len(p) <= per_page for p in pages)


def test_paginate_lines_short_last_page() -> None:
    pages = paginate_lines(_lines(5), 2)
    assert pages[-1] == LineRange(start=4, end=5, page_number=3)


@pytest.mark.parametrize("per_page", [0, -1])
def test_paginate_lines_rejects_non_positive_height(per_page: int) -> None:
    with pytest.raises(LayoutConfigError):
        paginate_lines(_lines(3), per_page)


def test_page_spread_example() -> None:
    spread = page_spread(1)
    assert spread.spread_index == 0
    assert spread.left_page_index == 0
    assert spread.right_page_index == 1


def test_page_spread_later_pages() -> None:
    assert page_spread(4).spread_index == 2
    assert page_spread(5).left_page_index == 4
    assert page_spread(5).right_page_index == 5


def test_paginate_spreads_pairs_pages() -> None:
    spreads = paginate_spreads(paginate_lines(_lines(2), 1))
    assert len(spreads) == 1
    assert spreads[0].left == LineRange(0, 1, 1)
    assert spreads[0].right == LineRange(1, 2, 2)
    assert not spreads[0].is_right_empty


def test_paginate_spreads_odd_page_count_leaves_right_empty() -> None:
    spreads = paginate_spreads(paginate_lines(_lines(5), 2))
    assert len(spreads) == 2
    assert spreads[1].left == LineRange(4, 5, 3)
    assert spreads[1].right is None
    assert spreads[1].is_right_empty


def test_paginate_spreads_empty() -> None:
    assert paginate_spreads([]) == []


def test_get_paginator_by_mode() -> None:
    assert isinstance(get_paginator(PaginationMode.LINE_RANGE), LineRangePaginator)
    assert isinstance(get_paginator("book-spread"), BookSpreadPaginator)


def test_strategies_share_line_breaker_output() -> None:
    lines = _lines(7)
    ranges = LineRangePaginator().paginate(lines, 2)
    spreads = BookSpreadPaginator().paginate(lines, 2)
    assert len(ranges) == 4
    assert [s.left for s in spreads] == [ranges[0], ranges[2]]
    assert [s.right for s in spreads] == [ranges[1], ranges[3]]


def test_strategies_locate_current_page() -> None:
    assert LineRangePaginator().locate(3) == 3
    assert BookSpreadPaginator().locate(3) == 1


def test_create_pages_carries_line_ranges() -> None:
    measures = [Measure.from_notes([Note(key="C4"), Note(key="D4"), Note(key="E4")])]
    pages = create_pages(measures, max_chars_per_line=3, lines_per_page=2)
    assert [p.page_number for p in pages] == [1, 2]
    assert [p.line_range for p in pages] == [LineRange(0, 2, 1), LineRange(2, 3, 2)]
    assert all(p.measures == measures for p in pages)


def test_create_pages_empty_song_has_one_empty_page() -> None:
    pages = create_pages([])
    assert len(pages) == 1
    assert pages[0].page_number == 1
    assert pages[0].line_range == LineRange(0, 0, 1)
