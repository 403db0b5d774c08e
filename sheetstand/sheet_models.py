"""Data models for sheet music notation, layout and playback state."""

from __future__ import annotations

from dataclasses import dataclass, field

#: Literal bar-line marker that carries no pitch.
MEASURE_SEPARATOR = "|"


@dataclass(frozen=True)
class Note:
    """
    One playable event (or rest) in a measure.

    Attributes:
        key:               Pitch identifier, e.g. "C4" or "D#5".
        duration:          Length in beats (1 = quarter note).
        rest:              True for pauses.
        chord:             Simultaneous pitches when the note is a chord.
        original_notation: Literal source token text, e.g. "t" or "|".
    """

    key: str
    duration: float = 1.0
    rest: bool = False
    chord: list[str] | None = None
    original_notation: str | None = None

    @property
    def display_text(self) -> str:
        """Text shown on the stand: the source notation, falling back to the key."""
        return self.original_notation or self.key


@dataclass(frozen=True)
class Measure:
    """An ordered group of notes plus its total duration in beats."""

    notes: list[Note]
    duration: float = 0.0

    @classmethod
    def from_notes(cls, notes: list[Note]) -> Measure:
        return cls(notes=list(notes), duration=sum(note.duration for note in notes))


@dataclass(frozen=True)
class LineRange:
    """Half-open window ``[start, end)`` over the line array, with its 1-indexed page number."""

    start: int
    end: int
    page_number: int = 1

    def __len__(self) -> int:
        return self.end - self.start

    def __contains__(self, line_index: object) -> bool:
        return isinstance(line_index, int) and self.start <= line_index < self.end


@dataclass(frozen=True)
class SheetPage:
    """A page of measures. Carries metadata only; pagination is always re-derived."""

    measures: list[Measure]
    page_number: int = 1
    line_range: LineRange | None = None


@dataclass(frozen=True)
class MusicSheet:
    """Complete sheet as delivered by the sheet library loader."""

    id: str
    title: str
    artist: str = ""
    difficulty: str = "easy"
    tempo: int = 120
    time_signature: str = "4/4"
    pages: list[SheetPage] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    notation: str = ""
    duration_seconds: float | None = None
    source_url: str | None = None

    @property
    def measures(self) -> list[Measure]:
        """All measures across every page as one contiguous stream."""
        return [measure for page in self.pages for measure in page.measures]


@dataclass(frozen=True)
class PlaybackState:
    """
    Playback cursor and transport flags.

    Owned by the playback driver; layout code only reads it. When
    ``is_playing`` is False the cursor still holds the last position.
    """

    current_sheet_id: str | None = None
    is_playing: bool = False
    is_paused: bool = False
    current_page: int = 0
    current_measure: int = 0
    current_note_index: int = 0
    tempo: int = 120
    auto_scroll: bool = True
    loop_enabled: bool = False
    progress: float = 0.0


@dataclass(frozen=True)
class Token:
    """A display token derived from one note."""

    text: str
    measure_index: int
    note_index: int
    is_measure_separator: bool
    global_index: int

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class PageSpread:
    """Indices of the two line-range pages shown side by side in the open book."""

    left_page_index: int
    right_page_index: int
    spread_index: int


@dataclass(frozen=True)
class BookSpread:
    """A resolved spread: the left page and, unless the sheet ended, the right page."""

    spread_index: int
    left: LineRange
    right: LineRange | None = None

    @property
    def is_right_empty(self) -> bool:
        return self.right is None


@dataclass(frozen=True)
class CursorPosition:
    """Resolved playback position, relative to the full (unpaginated) line array."""

    current_token_global_index: int = -1
    current_line_index: int = -1

    @property
    def is_active(self) -> bool:
        return self.current_token_global_index >= 0
