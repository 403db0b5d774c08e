"""NotationParser: converts Virtual Piano text notation into measures and sheets."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Final

from sheetstand.sheet_models import Measure, MusicSheet, Note, SheetPage

logger = logging.getLogger(__name__)

#: Virtual Piano keyboard characters → scientific pitch names.
VP_NOTE_MAP: Final[dict[str, str]] = {
    # Digits: low octaves
    "1": "C2", "2": "D2", "3": "E2", "4": "F2", "5": "G2",
    "6": "A2", "7": "B2", "8": "C3", "9": "D3", "0": "E3",
    # Lowercase: naturals
    "q": "F3", "w": "G3", "e": "A3", "r": "B3",
    "t": "C4", "y": "D4", "u": "E4", "i": "F4", "o": "G4", "p": "A4", "a": "B4",
    "s": "C5", "d": "D5", "f": "E5", "g": "F5", "h": "G5", "j": "A5", "k": "B5",
    "l": "C6", "z": "D6", "x": "E6", "c": "F6", "v": "G6", "b": "A6", "n": "B6",
    "m": "C7",
    # Uppercase: sharps
    "Q": "F#3", "W": "G#3", "E": "A#3",
    "T": "C#4", "Y": "D#4", "I": "F#4", "O": "G#4", "P": "A#4",
    "S": "C#5", "D": "D#5", "G": "F#5", "H": "G#5", "J": "A#5",
    "Z": "D#6", "X": "E#6", "C": "F#6", "V": "G#6", "B": "A#6", "N": "B#6",
}

REST_KEY: Final[str] = "pause"

_TOKEN_RE: Final[re.Pattern[str]] = re.compile(r"\s*\|\s*|\[[a-zA-Z0-9\s]+\]|[a-zA-Z0-9]|-")
_PARAGRAPH_RE: Final[re.Pattern[str]] = re.compile(r"\n\s*\n")

NOTE_BEATS: Final[float] = 1.0
SEQUENCE_BEATS: Final[float] = 0.25
SUSTAIN_BEATS: Final[float] = 0.5
PAUSE_BEATS_PER_SPACE: Final[float] = 0.5


@dataclass
class ParsedNotation:
    """
    Result of parsing one notation string.

    Attributes:
        measures: Parsed measures (empty for empty input).
        tempo:    Tempo in BPM carried through from the caller.
        warnings: Human-readable messages for characters that were skipped.
    """

    measures: list[Measure] = field(default_factory=list)
    tempo: int = 120
    warnings: list[str] = field(default_factory=list)


class NotationParser:
    """
    Parses Virtual Piano notation.

    Token rules
    -----------
    - ``t``, ``T``, ``5`` …  a single key, one beat.
    - ``|`` (with any surrounding spaces)  a pause of one beat plus half a
      beat per space.
    - ``[tuo]``  a chord struck together, one beat.
    - ``[t u o]``  a fast run, a quarter beat per key.
    - ``-``  holds the previous note half a beat longer.
    - A blank line is read as a double pause.
    """

    def __init__(self, note_map: dict[str, str] | None = None) -> None:
        self.note_map = dict(VP_NOTE_MAP if note_map is None else note_map)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _pause(self, token: str) -> Note:
        spaces = token.count(" ")
        return Note(
            key=REST_KEY,
            duration=NOTE_BEATS + spaces * PAUSE_BEATS_PER_SPACE,
            rest=True,
            original_notation=token,
        )

    def _bracket(self, token: str, warnings: list[str]) -> list[Note]:
        content = token[1:-1]

        if " " not in content:
            chord: list[str] = []
            chars: list[str] = []
            for char in content:
                pitch = self.note_map.get(char)
                if pitch is None:
                    warnings.append(f"Unknown note in chord: {char}")
                    continue
                chord.append(pitch)
                chars.append(char)
            if not chord:
                return []
            return [
                Note(
                    key=chord[0],
                    duration=NOTE_BEATS,
                    chord=chord,
                    original_notation=f"[{''.join(chars)}]",
                )
            ]

        notes: list[Note] = []
        for char in content:
            if char.isspace():
                continue
            pitch = self.note_map.get(char)
            if pitch is None:
                warnings.append(f"Unknown note in sequence: {char}")
                continue
            notes.append(Note(key=pitch, duration=SEQUENCE_BEATS, original_notation=char))
        return notes

    def _sustain(self, notes: list[Note]) -> None:
        if not notes:
            return
        notes[-1] = replace(notes[-1], duration=notes[-1].duration + SUSTAIN_BEATS)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, notation: str, tempo: int = 120) -> ParsedNotation:
        """
        Parse a notation string into measures.

        Every note lands in a single measure; the stand lays it out by line,
        not by bar. Unknown characters are skipped and reported in
        ``warnings``.
        """
        warnings: list[str] = []
        notes: list[Note] = []

        processed = _PARAGRAPH_RE.sub(" | | ", notation)
        for token in _TOKEN_RE.findall(processed):
            if "|" in token:
                notes.append(self._pause(token))
            elif token.startswith("["):
                notes.extend(self._bracket(token, warnings))
            elif token == "-":
                self._sustain(notes)
            else:
                pitch = self.note_map.get(token)
                if pitch is None:
                    warnings.append(f"Unknown character: {token}")
                    continue
                notes.append(Note(key=pitch, duration=NOTE_BEATS, original_notation=token))

        for warning in warnings:
            logger.debug("Notation warning: %s", warning)

        measures = [Measure.from_notes(notes)] if notes else []
        return ParsedNotation(measures=measures, tempo=tempo, warnings=warnings)


def parse_vp_notation(notation: str, tempo: int = 120) -> ParsedNotation:
    return NotationParser().parse(notation, tempo)


def estimate_duration(measures: list[Measure], tempo: int) -> float:
    """Estimated playing time in seconds at ``tempo`` BPM."""
    total_beats = sum(measure.duration for measure in measures)
    return total_beats / (tempo / 60.0)


def _slugify(title: str) -> str:
    slug = re.sub(r"[^\w\s-]", "", title.lower())
    return re.sub(r"[\s_]+", "-", slug.strip()) or "sheet"


def build_sheet(
    notation: str,
    *,
    title: str,
    artist: str = "",
    tempo: int = 120,
    sheet_id: str | None = None,
    difficulty: str = "easy",
    time_signature: str = "4/4",
    tags: list[str] | None = None,
    source_url: str | None = None,
    parsed: ParsedNotation | None = None,
) -> MusicSheet:
    """
    Parse ``notation`` and wrap it in a MusicSheet.

    All measures are stored on page 0; display pages are derived later from
    the current layout. Pass ``parsed`` to reuse an earlier parse of the same
    notation.
    """
    if parsed is None:
        parsed = parse_vp_notation(notation, tempo)
    return MusicSheet(
        id=sheet_id or _slugify(title),
        title=title,
        artist=artist,
        difficulty=difficulty,
        tempo=tempo,
        time_signature=time_signature,
        pages=[SheetPage(measures=parsed.measures, page_number=1)],
        tags=list(tags or []),
        notation=notation,
        duration_seconds=estimate_duration(parsed.measures, tempo),
        source_url=source_url,
    )
