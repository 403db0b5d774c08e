"""Tokenizer and greedy line breaker for the music stand text layout."""

from __future__ import annotations

from sheetstand.errors import LayoutConfigError
from sheetstand.sheet_models import MEASURE_SEPARATOR, Measure, Token

#: Appended to every token so line widths include inter-token spacing.
TOKEN_SEPARATOR = " "

Line = list[Token]


def tokenize(measures: list[Measure]) -> list[Token]:
    """
    Flatten measures into display tokens, one per note, in source order.

    Each token's text is the note's display text plus a trailing space.
    ``global_index`` counts up from 0 over the whole output.
    """
    tokens: list[Token] = []
    for measure_index, measure in enumerate(measures):
        for note_index, note in enumerate(measure.notes):
            tokens.append(
                Token(
                    text=note.display_text + TOKEN_SEPARATOR,
                    measure_index=measure_index,
                    note_index=note_index,
                    is_measure_separator=note.original_notation == MEASURE_SEPARATOR,
                    global_index=len(tokens),
                )
            )
    return tokens


def break_lines(tokens: list[Token], max_chars_per_line: int) -> list[Line]:
    """
    Pack tokens greedily into lines of at most ``max_chars_per_line`` characters.

    A token that does not fit starts a new line, unless the current line is
    empty: an over-long token is placed alone rather than split or dropped.

    Raises:
        LayoutConfigError: If ``max_chars_per_line`` is not a positive integer.
    """
    if isinstance(max_chars_per_line, bool) or not isinstance(max_chars_per_line, int):
        raise LayoutConfigError(
            f"max_chars_per_line must be a positive integer, got {max_chars_per_line!r}."
        )
    if max_chars_per_line <= 0:
        raise LayoutConfigError(
            f"max_chars_per_line must be a positive integer, got {max_chars_per_line}."
        )

    lines: list[Line] = []
    current_line: Line = []
    current_length = 0

    for token in tokens:
        if current_length + len(token) > max_chars_per_line and current_line:
            lines.append(current_line)
            current_line = []
            current_length = 0
        current_line.append(token)
        current_length += len(token)

    if current_line:
        lines.append(current_line)

    return lines


def line_length(line: Line) -> int:
    return sum(len(token) for token in line)


def line_text(line: Line) -> str:
    """Concatenated token text of a line, without trailing padding."""
    return "".join(token.text for token in line).rstrip()


def validate_tokens(tokens: list[Token], measures: list[Measure]) -> None:
    """
    Check that tokens refer back to real notes and are numbered in order.

    A failure here is a tokenizer bug, not bad user input.
    """
    for position, token in enumerate(tokens):
        assert token.global_index == position, (
            f"token {position} has global_index {token.global_index}"
        )
        assert 0 <= token.measure_index < len(measures), (
            f"token {position} references measure {token.measure_index} "
            f"of {len(measures)}"
        )
        notes = measures[token.measure_index].notes
        assert 0 <= token.note_index < len(notes), (
            f"token {position} references note {token.note_index} "
            f"of measure {token.measure_index}"
        )
