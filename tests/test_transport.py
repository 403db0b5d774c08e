"""Unit tests for playback transport transitions."""

from sheetstand import transport
from sheetstand.sheet_models import Measure, MusicSheet, Note, PlaybackState, SheetPage
from sheetstand.transport import PlaybackStatus, TransportAction


def _measures() -> list[Measure]:
    return [
        Measure.from_notes([Note(key="C4"), Note(key="D4")]),
        Measure(notes=[]),
        Measure.from_notes([Note(key="E4")]),
    ]


def test_initial_state_uses_sheet_tempo() -> None:
    sheet = MusicSheet(id="ode", title="Ode", tempo=96, pages=[SheetPage(measures=_measures())])
    state = transport.initial_state(sheet)
    assert state.current_sheet_id == "ode"
    assert state.tempo == 96
    assert transport.playback_status(state) is PlaybackStatus.STOPPED


def test_play_pause_resume() -> None:
    state = transport.play(PlaybackState())
    assert transport.playback_status(state) is PlaybackStatus.PLAYING
    state = transport.pause(state)
    assert transport.playback_status(state) is PlaybackStatus.PAUSED
    assert state.is_paused and not state.is_playing
    state = transport.play(state)
    assert state.is_playing and not state.is_paused


def test_pause_keeps_cursor() -> None:
    state = PlaybackState(is_playing=True, current_measure=2, current_note_index=3)
    paused = transport.pause(state)
    assert (paused.current_measure, paused.current_note_index) == (2, 3)


def test_stop_rewinds() -> None:
    state = PlaybackState(is_playing=True, current_page=3, current_measure=2, current_note_index=1, progress=0.7)
    stopped = transport.stop(state)
    assert transport.playback_status(stopped) is PlaybackStatus.STOPPED
    assert (stopped.current_page, stopped.current_measure, stopped.current_note_index) == (0, 0, 0)
    assert stopped.progress == 0.0
    assert state.current_page == 3


def test_validate_transition() -> None:
    assert transport.validate_transition(PlaybackStatus.STOPPED, TransportAction.PLAY) == (True, None)
    ok, message = transport.validate_transition(PlaybackStatus.STOPPED, TransportAction.PAUSE)
    assert not ok
    assert message is not None and "pause" in message
    assert transport.validate_transition(PlaybackStatus.PAUSED, TransportAction.STOP)[0]


def test_update_position_only_changes_given_fields() -> None:
    state = PlaybackState(current_page=1, current_measure=4, current_note_index=2)
    moved = transport.update_position(state, note_index=3)
    assert (moved.current_page, moved.current_measure, moved.current_note_index) == (1, 4, 3)


def test_set_tempo_is_clamped() -> None:
    assert transport.set_tempo(PlaybackState(), 10).tempo == 40
    assert transport.set_tempo(PlaybackState(), 300).tempo == 240
    assert transport.set_tempo(PlaybackState(), 100).tempo == 100


def test_toggles() -> None:
    state = PlaybackState()
    assert transport.toggle_auto_scroll(state).auto_scroll is False
    assert transport.toggle_loop(state).loop_enabled is True


def test_next_and_previous_page_move_by_spread() -> None:
    state = PlaybackState(current_page=1, current_measure=3, current_note_index=2)
    forward = transport.next_page(state)
    assert forward.current_page == 2
    assert (forward.current_measure, forward.current_note_index) == (0, 0)
    assert transport.next_page(forward).current_page == 4
    assert transport.previous_page(PlaybackState(current_page=5)).current_page == 2
    assert transport.previous_page(PlaybackState(current_page=1)).current_page == 0
    start = PlaybackState(current_page=0, current_measure=1)
    assert transport.previous_page(start) is start


def test_go_to_page_ignores_out_of_range() -> None:
    state = PlaybackState(current_page=0)
    assert transport.go_to_page(state, 2, total_pages=3).current_page == 2
    assert transport.go_to_page(state, 3, total_pages=3) is state
    assert transport.go_to_page(state, -1, total_pages=3) is state


def test_advance_walks_notes_and_skips_empty_measures() -> None:
    measures = _measures()
    state = PlaybackState(is_playing=True)
    positions = []
    for _ in range(2):
        state = transport.advance(state, measures)
        positions.append((state.current_measure, state.current_note_index))
    assert positions == [(0, 1), (2, 0)]
    assert 0.0 < state.progress < 1.0


def test_advance_past_end_stops_without_loop() -> None:
    state = PlaybackState(is_playing=True, current_measure=2, current_note_index=0)
    stopped = transport.advance(state, _measures())
    assert transport.playback_status(stopped) is PlaybackStatus.STOPPED
    assert (stopped.current_measure, stopped.current_note_index) == (0, 0)


def test_advance_past_end_loops_when_enabled() -> None:
    state = PlaybackState(is_playing=True, loop_enabled=True, current_measure=2, current_note_index=0)
    looped = transport.advance(state, _measures())
    assert looped.is_playing
    assert (looped.current_measure, looped.current_note_index) == (0, 0)
    assert looped.progress == 0.0


def test_advance_on_empty_sheet_stops() -> None:
    state = PlaybackState(is_playing=True, loop_enabled=True)
    assert not transport.advance(state, []).is_playing
