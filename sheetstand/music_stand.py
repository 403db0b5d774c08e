"""MusicStand: runs the layout pipeline for a sheet and caches it per layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sheetstand.config import LayoutConfig
from sheetstand.cursor import page_index_for_line, resolve
from sheetstand.layout import Line, break_lines, tokenize, validate_tokens
from sheetstand.pagination import BookSpreadPaginator, PaginationMode, get_paginator, page_spread
from sheetstand.sheet_models import (
    BookSpread,
    CursorPosition,
    LineRange,
    Measure,
    MusicSheet,
    PageSpread,
    PlaybackState,
    Token,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StandLayout:
    """Tokens, lines, line-range pages and book spreads for one (measures, layout) pair."""

    tokens: list[Token]
    lines: list[Line]
    page_ranges: list[LineRange]
    spreads: list[BookSpread]

    @property
    def total_pages(self) -> int:
        return len(self.page_ranges)


@dataclass(frozen=True)
class StandView:
    """
    Everything a renderer needs for one frame.

    Attributes:
        sheet:        The sheet being shown.
        layout:       Derived tokens, lines and pages.
        cursor:       Resolved cursor, relative to the full line array.
        spread:       Left/right page indices for ``playback.current_page``.
        playback:     The playback state the view was built from.
    """

    sheet: MusicSheet
    layout: StandLayout
    cursor: CursorPosition
    spread: PageSpread
    playback: PlaybackState

    @property
    def total_pages(self) -> int:
        return self.layout.total_pages

    def page_range(self, page_index: int) -> LineRange | None:
        """Line range of page ``page_index``, or None past the end of the sheet."""
        if 0 <= page_index < self.layout.total_pages:
            return self.layout.page_ranges[page_index]
        return None

    @property
    def book_spread(self) -> BookSpread | None:
        """Spread holding ``playback.current_page``, or None past the end of the sheet."""
        spread_index = BookSpreadPaginator().locate(self.playback.current_page)
        if spread_index < len(self.layout.spreads):
            return self.layout.spreads[spread_index]
        return None

    @property
    def left_page(self) -> LineRange | None:
        spread = self.book_spread
        return spread.left if spread is not None else None

    @property
    def right_page(self) -> LineRange | None:
        spread = self.book_spread
        return spread.right if spread is not None else None

    def is_active_page(self, page_index: int) -> bool:
        return self.playback.current_page == page_index

    def page_lines(self, page_index: int) -> list[Line]:
        line_range = self.page_range(page_index)
        if line_range is None:
            return []
        return self.range_lines(line_range)

    def range_lines(self, line_range: LineRange) -> list[Line]:
        return self.layout.lines[line_range.start:line_range.end]


class MusicStand:
    """
    Holds a sheet and a layout and re-derives pagination only when either changes.

    The cache is keyed on the measure list and both layout numbers, so a
    layout change mid-playback never leaves stale page boundaries behind.

    Usage:

        stand = MusicStand(sheet, LayoutConfig(45, 6))
        view = stand.view(playback)
    """

    def __init__(self, sheet: MusicSheet, layout: LayoutConfig | None = None) -> None:
        self.sheet = sheet
        self.layout_config = layout if layout is not None else LayoutConfig()
        self._cache_key: tuple[list[Measure], int, int] | None = None
        self._cached: StandLayout | None = None

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _key(self) -> tuple[list[Measure], int, int]:
        return (
            self.sheet.measures,
            self.layout_config.max_chars_per_line,
            self.layout_config.lines_per_page,
        )

    def _compute(self, key: tuple[list[Measure], int, int]) -> StandLayout:
        measures, max_chars_per_line, lines_per_page = key
        tokens = tokenize(measures)
        validate_tokens(tokens, measures)
        lines = break_lines(tokens, max_chars_per_line)
        page_ranges = get_paginator(PaginationMode.LINE_RANGE).paginate(lines, lines_per_page)
        spreads = get_paginator(PaginationMode.BOOK_SPREAD).paginate(lines, lines_per_page)
        logger.debug(
            "Laid out sheet %s: %d tokens, %d lines, %d pages (width=%d, height=%d)",
            self.sheet.id,
            len(tokens),
            len(lines),
            len(page_ranges),
            max_chars_per_line,
            lines_per_page,
        )
        return StandLayout(tokens=tokens, lines=lines, page_ranges=page_ranges, spreads=spreads)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load_sheet(self, sheet: MusicSheet) -> None:
        self.sheet = sheet
        self.invalidate()

    def set_layout(self, layout: LayoutConfig) -> None:
        layout.validate()
        self.layout_config = layout

    def invalidate(self) -> None:
        self._cache_key = None
        self._cached = None

    @property
    def layout(self) -> StandLayout:
        key = self._key()
        if self._cached is None or self._cache_key != key:
            self._cached = self._compute(key)
            self._cache_key = key
        return self._cached

    @property
    def total_pages(self) -> int:
        return self.layout.total_pages

    def view(self, playback: PlaybackState) -> StandView:
        layout = self.layout
        return StandView(
            sheet=self.sheet,
            layout=layout,
            cursor=resolve(layout.tokens, layout.lines, playback),
            spread=page_spread(playback.current_page),
            playback=playback,
        )

    def cursor_page(self, playback: PlaybackState) -> int:
        """Line-range page holding the sounding note, or -1 when nothing sounds."""
        layout = self.layout
        cursor = resolve(layout.tokens, layout.lines, playback)
        return page_index_for_line(layout.page_ranges, cursor.current_line_index)

    def auto_scroll_page(self, playback: PlaybackState) -> int:
        """
        Page the stand should show for ``playback``.

        With auto-scroll on, follows the sounding note; otherwise, or when
        nothing is sounding, keeps ``playback.current_page``.
        """
        if not playback.auto_scroll:
            return playback.current_page
        page = self.cursor_page(playback)
        return page if page >= 0 else playback.current_page
