"""Playback transport: pure transitions over PlaybackState.

Each function returns a new state and leaves its argument untouched, so a
host can feed the result straight back into the cursor resolver.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum

from sheetstand.pagination import PAGES_PER_SPREAD
from sheetstand.sheet_models import Measure, MusicSheet, PlaybackState

MIN_TEMPO = 40
MAX_TEMPO = 240


class PlaybackStatus(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class TransportAction(str, Enum):
    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"


# Valid state transition matrix
VALID_TRANSITIONS: dict[PlaybackStatus, dict[TransportAction, PlaybackStatus]] = {
    PlaybackStatus.STOPPED: {
        TransportAction.PLAY: PlaybackStatus.PLAYING,
        TransportAction.STOP: PlaybackStatus.STOPPED,
    },
    PlaybackStatus.PLAYING: {
        TransportAction.PAUSE: PlaybackStatus.PAUSED,
        TransportAction.STOP: PlaybackStatus.STOPPED,
    },
    PlaybackStatus.PAUSED: {
        TransportAction.PLAY: PlaybackStatus.PLAYING,
        TransportAction.STOP: PlaybackStatus.STOPPED,
    },
}


def playback_status(state: PlaybackState) -> PlaybackStatus:
    if state.is_playing:
        return PlaybackStatus.PLAYING
    if state.is_paused:
        return PlaybackStatus.PAUSED
    return PlaybackStatus.STOPPED


def validate_transition(
    current: PlaybackStatus, action: TransportAction
) -> tuple[bool, str | None]:
    """
    Check whether ``action`` is allowed from ``current``.

    Returns:
        Tuple of (is_valid, error_message)
    """
    allowed = VALID_TRANSITIONS[current]
    if action not in allowed:
        names = ", ".join(a.value for a in allowed)
        return False, f"Cannot {action.value} while {current.value}. Allowed actions: {names}"
    return True, None


def initial_state(sheet: MusicSheet | None = None) -> PlaybackState:
    """Fresh stopped state, optionally bound to ``sheet`` at its own tempo."""
    if sheet is None:
        return PlaybackState()
    return PlaybackState(current_sheet_id=sheet.id, tempo=sheet.tempo)


def play(state: PlaybackState) -> PlaybackState:
    return replace(state, is_playing=True, is_paused=False)


def pause(state: PlaybackState) -> PlaybackState:
    return replace(state, is_playing=False, is_paused=True)


def stop(state: PlaybackState) -> PlaybackState:
    """Stop and rewind to the start of the sheet."""
    return replace(
        state,
        is_playing=False,
        is_paused=False,
        current_page=0,
        current_measure=0,
        current_note_index=0,
        progress=0.0,
    )


def update_position(
    state: PlaybackState,
    *,
    page: int | None = None,
    measure: int | None = None,
    note_index: int | None = None,
    progress: float | None = None,
) -> PlaybackState:
    """Move the cursor; fields left as None keep their current value."""
    changes: dict[str, int | float] = {}
    if page is not None:
        changes["current_page"] = page
    if measure is not None:
        changes["current_measure"] = measure
    if note_index is not None:
        changes["current_note_index"] = note_index
    if progress is not None:
        changes["progress"] = progress
    return replace(state, **changes)


def set_tempo(state: PlaybackState, tempo: int) -> PlaybackState:
    return replace(state, tempo=max(MIN_TEMPO, min(MAX_TEMPO, tempo)))


def toggle_auto_scroll(state: PlaybackState) -> PlaybackState:
    return replace(state, auto_scroll=not state.auto_scroll)


def toggle_loop(state: PlaybackState) -> PlaybackState:
    return replace(state, loop_enabled=not state.loop_enabled)


def _rewind_cursor(state: PlaybackState, page: int) -> PlaybackState:
    return replace(state, current_page=page, current_measure=0, current_note_index=0)


def next_page(state: PlaybackState) -> PlaybackState:
    """
    Turn to the next spread. Bounds are left to the caller, which knows the
    page count for the current layout.
    """
    spread = state.current_page // PAGES_PER_SPREAD
    return _rewind_cursor(state, (spread + 1) * PAGES_PER_SPREAD)


def previous_page(state: PlaybackState) -> PlaybackState:
    if state.current_page <= 0:
        return state
    spread = state.current_page // PAGES_PER_SPREAD
    return _rewind_cursor(state, max(0, (spread - 1) * PAGES_PER_SPREAD))


def go_to_page(state: PlaybackState, page: int, total_pages: int) -> PlaybackState:
    """Jump to ``page``; out-of-range requests are ignored."""
    if not 0 <= page < total_pages:
        return state
    return _rewind_cursor(state, page)


def _total_notes(measures: list[Measure]) -> int:
    return sum(len(measure.notes) for measure in measures)


def _notes_before(measures: list[Measure], measure_index: int, note_index: int) -> int:
    return sum(len(m.notes) for m in measures[:measure_index]) + note_index


def advance(state: PlaybackState, measures: list[Measure]) -> PlaybackState:
    """
    Step the cursor to the next note.

    Past the last note of a measure the cursor moves to the first note of the
    next non-empty measure. Past the end of the sheet it loops back to the
    start when ``loop_enabled`` is set, otherwise playback stops.
    """
    measure_index = state.current_measure
    note_index = state.current_note_index + 1

    while measure_index < len(measures) and note_index >= len(measures[measure_index].notes):
        measure_index += 1
        note_index = 0

    if measure_index >= len(measures):
        if state.loop_enabled and _total_notes(measures) > 0:
            return advance(
                update_position(state, measure=0, note_index=-1, progress=0.0), measures
            )
        return stop(state)

    total = _total_notes(measures)
    progress = _notes_before(measures, measure_index, note_index) / total if total else 0.0
    return update_position(state, measure=measure_index, note_index=note_index, progress=progress)
