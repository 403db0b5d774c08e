"""Cursor resolution: map the playback position to a token, a line and a page."""

from __future__ import annotations

import logging

from sheetstand.layout import Line
from sheetstand.sheet_models import CursorPosition, LineRange, PlaybackState, Token

logger = logging.getLogger(__name__)

NO_POSITION = CursorPosition(current_token_global_index=-1, current_line_index=-1)


def find_token(tokens: list[Token], measure_index: int, note_index: int) -> Token | None:
    """
    Return the first token for ``(measure_index, note_index)``, or None.

    Tokens are 1:1 with notes, so a second match means the token list is
    corrupt; it is logged and the first match wins.
    """
    found: Token | None = None
    for token in tokens:
        if token.measure_index != measure_index or token.note_index != note_index:
            continue
        if found is None:
            found = token
        else:
            logger.warning(
                "Duplicate token for measure %d note %d (global indices %d and %d)",
                measure_index,
                note_index,
                found.global_index,
                token.global_index,
            )
            break
    return found


def find_line_index(lines: list[Line], global_index: int) -> int:
    """Index of the line holding the token with ``global_index``, or -1."""
    for line_index, line in enumerate(lines):
        if any(token.global_index == global_index for token in line):
            return line_index
    return -1


def resolve(
    tokens: list[Token],
    lines: list[Line],
    playback: PlaybackState,
    line_range: LineRange | None = None,
) -> CursorPosition:
    """
    Resolve the sounding token and its line for the current playback state.

    Nothing is highlighted unless playback is running. A cursor that points
    past the end of the sheet resolves to ``-1`` rather than failing.

    The returned line index is always relative to the full line array, even
    when ``line_range`` is given; use ``is_current_line`` to compare against
    the lines of one page.
    """
    if not playback.is_playing:
        return NO_POSITION

    token = find_token(tokens, playback.current_measure, playback.current_note_index)
    if token is None:
        return NO_POSITION

    return CursorPosition(
        current_token_global_index=token.global_index,
        current_line_index=find_line_index(lines, token.global_index),
    )


def is_current_line(cursor: CursorPosition, line_range: LineRange | None, line_idx: int) -> bool:
    """True if the ``line_idx``-th line shown on a page is the cursor line."""
    if cursor.current_line_index < 0:
        return False
    start = line_range.start if line_range is not None else 0
    return line_idx + start == cursor.current_line_index


def is_current_token(cursor: CursorPosition, token: Token) -> bool:
    return cursor.current_token_global_index >= 0 and (
        token.global_index == cursor.current_token_global_index
    )


def page_index_for_line(page_ranges: list[LineRange], line_index: int) -> int:
    """Index of the line-range page containing ``line_index``, or -1."""
    if line_index < 0:
        return -1
    for page_index, line_range in enumerate(page_ranges):
        if line_index in line_range:
            return page_index
    return -1
