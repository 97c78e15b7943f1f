"""Tests for the puzzle session state machine."""

import pytest

from melodyx.models import GameStatus, InvalidNote, Melody
from melodyx.session import PuzzleSession, SessionConfig

OCEAN = Melody("Ocean Waves", ("C", "E", "G", "C", "G", "E"))
WRONG = ["D", "D", "D", "D", "D", "D"]


def enter(session, notes):
    for note in notes:
        session.add_note(note)
    return session.submit_guess()


def test_lost_exactly_after_sixth_guess():
    session = PuzzleSession(OCEAN)
    for i in range(5):
        enter(session, WRONG)
        assert session.status == GameStatus.PLAYING, f"ended early after guess {i + 1}"
    enter(session, WRONG)
    assert session.status == GameStatus.LOST
    assert session.guess_count == 6


def test_win_on_matching_guess():
    session = PuzzleSession(OCEAN)
    enter(session, WRONG)
    enter(session, OCEAN.notes)
    assert session.status == GameStatus.WON
    assert session.guess_count == 2


def test_add_note_stops_at_melody_length():
    session = PuzzleSession(OCEAN)
    for note in OCEAN.notes:
        assert session.add_note(note)
    assert not session.add_note("C")
    assert len(session.current_guess) == 6


def test_short_guess_is_rejected_not_padded():
    session = PuzzleSession(OCEAN)
    session.add_note("C")
    session.add_note("E")
    assert session.submit_guess() is None
    assert session.guess_count == 0
    assert session.current_guess == ("C", "E")


def test_remove_note_pops_last():
    session = PuzzleSession(OCEAN)
    assert not session.remove_note()
    session.add_note("C")
    session.add_note("E")
    assert session.remove_note()
    assert session.current_guess == ("C",)


def test_actions_after_terminal_are_ignored():
    session = PuzzleSession(OCEAN)
    enter(session, OCEAN.notes)
    assert not session.add_note("C")
    assert not session.remove_note()
    assert session.submit_guess() is None
    assert session.guess_count == 1
    assert session.status == GameStatus.WON


def test_submit_clears_current_guess():
    session = PuzzleSession(OCEAN)
    enter(session, WRONG)
    assert session.current_guess == ()


def test_custom_max_guesses():
    session = PuzzleSession(OCEAN, SessionConfig(max_guesses=8))
    for _ in range(7):
        enter(session, WRONG)
    assert session.status == GameStatus.PLAYING
    enter(session, WRONG)
    assert session.status == GameStatus.LOST


def test_max_guesses_must_be_positive():
    with pytest.raises(ValueError):
        SessionConfig(max_guesses=0)


def test_single_note_melody():
    session = PuzzleSession(Melody("Beep", ("A",)))
    enter(session, ["A"])
    assert session.status == GameStatus.WON


def test_invalid_note_raises():
    session = PuzzleSession(OCEAN)
    with pytest.raises(InvalidNote):
        session.add_note("H")


def test_hint_gated_until_three_guesses():
    session = PuzzleSession(OCEAN)
    assert session.request_hint() is None
    enter(session, WRONG)
    enter(session, WRONG)
    assert session.request_hint() is None
    assert not session.hint_used
    enter(session, WRONG)
    assert session.request_hint() == 0
    assert session.hint_used
    assert session.hint_note == "C"
    assert session.request_hint() is None


def test_hint_reveals_first_incorrect_position():
    session = PuzzleSession(OCEAN)
    for _ in range(3):
        enter(session, ["C", "E", "D", "D", "D", "D"])
    assert session.request_hint() == 2
    assert session.hint_note == "G"


def test_hint_refused_after_game_over():
    session = PuzzleSession(OCEAN)
    for _ in range(6):
        enter(session, WRONG)
    assert session.request_hint() is None


def test_audio_hint_after_two_guesses_once():
    session = PuzzleSession(OCEAN)
    enter(session, WRONG)
    assert not session.request_audio_hint()
    enter(session, WRONG)
    assert session.request_audio_hint()
    assert not session.request_audio_hint()


def test_resume_restores_status_and_hints():
    first = PuzzleSession(OCEAN)
    for _ in range(3):
        enter(first, WRONG)
    restored = PuzzleSession.resume(OCEAN, first.guesses, hint_used=True)
    assert restored.guess_count == 3
    assert restored.status == GameStatus.PLAYING
    assert restored.hint_used
    assert restored.request_hint() is None


def test_resume_finished_puzzle_stays_finished():
    first = PuzzleSession(OCEAN)
    enter(first, OCEAN.notes)
    restored = PuzzleSession.resume(OCEAN, first.guesses)
    assert restored.status == GameStatus.WON
    assert not restored.add_note("C")


def test_solve_time_uses_injected_clock():
    ticks = iter([100.0, 142.4])
    session = PuzzleSession(OCEAN, clock=lambda: next(ticks))
    enter(session, OCEAN.notes)
    assert session.solve_time_seconds == 42


def test_snapshot_is_detached():
    session = PuzzleSession(OCEAN)
    enter(session, WRONG)
    snap = session.snapshot()
    snap.guesses.clear()
    assert session.guess_count == 1
