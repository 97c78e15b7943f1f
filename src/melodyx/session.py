"""Puzzle session — the guess loop for one attempt at one melody."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from melodyx.config import AUDIO_HINT_THRESHOLD, DEFAULT_MAX_GUESSES, HINT_THRESHOLD
from melodyx.evaluator import evaluate, is_win
from melodyx.models import Feedback, GameStatus, GuessResult, Melody, PuzzleState, validate_note


@dataclass(frozen=True)
class SessionConfig:
    """Per-mode knobs for a PuzzleSession."""

    max_guesses: int = DEFAULT_MAX_GUESSES
    hint_threshold: int = HINT_THRESHOLD
    audio_hint_threshold: int = AUDIO_HINT_THRESHOLD

    def __post_init__(self) -> None:
        if self.max_guesses < 1:
            raise ValueError(f"max_guesses must be at least 1, got {self.max_guesses}")


class PuzzleSession:
    """State machine for one puzzle: playing -> won | lost.

    Invalid player actions (a short guess, acting after the puzzle ended,
    asking for a hint too early) are ignored and reported through the
    return value rather than raised.
    """

    def __init__(
        self,
        melody: Melody,
        config: SessionConfig = SessionConfig(),
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._state = PuzzleState(target=melody)
        self._clock = clock
        self.started_at: float = clock()
        self.finished_at: float | None = None

    @classmethod
    def resume(
        cls,
        melody: Melody,
        guesses: Iterable[GuessResult],
        *,
        hint_used: bool = False,
        audio_hint_used: bool = False,
        config: SessionConfig = SessionConfig(),
        clock: Callable[[], float] = time.time,
    ) -> PuzzleSession:
        """Rebuild a session from a persisted guess history."""
        session = cls(melody, config, clock)
        state = session._state
        for result in guesses:
            if state.status.is_terminal:
                break
            state.guesses.append(list(result))
            session._settle(result)
        state.hint_used = hint_used
        state.audio_hint_used = audio_hint_used
        if hint_used:
            state.hint_index = session._hint_position()
        return session

    # -- read side ----------------------------------------------------------

    @property
    def melody(self) -> Melody:
        return self._state.target

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def is_over(self) -> bool:
        return self._state.status.is_terminal

    @property
    def current_guess(self) -> tuple[str, ...]:
        return tuple(self._state.current_guess)

    @property
    def guesses(self) -> tuple[GuessResult, ...]:
        return tuple(list(g) for g in self._state.guesses)

    @property
    def guess_count(self) -> int:
        return len(self._state.guesses)

    @property
    def remaining_guesses(self) -> int:
        return self.config.max_guesses - len(self._state.guesses)

    @property
    def hint_used(self) -> bool:
        return self._state.hint_used

    @property
    def audio_hint_used(self) -> bool:
        return self._state.audio_hint_used

    @property
    def hint_index(self) -> int | None:
        return self._state.hint_index

    @property
    def hint_note(self) -> str | None:
        idx = self._state.hint_index
        return None if idx is None else self._state.target.notes[idx]

    @property
    def can_use_hint(self) -> bool:
        return (
            self._state.status == GameStatus.PLAYING
            and not self._state.hint_used
            and len(self._state.guesses) >= self.config.hint_threshold
        )

    @property
    def can_use_audio_hint(self) -> bool:
        return (
            self._state.status == GameStatus.PLAYING
            and not self._state.audio_hint_used
            and len(self._state.guesses) >= self.config.audio_hint_threshold
        )

    @property
    def solve_time_seconds(self) -> int:
        if self.finished_at is None:
            return 0
        return round(self.finished_at - self.started_at)

    def snapshot(self) -> PuzzleState:
        """Return a detached copy of the current state."""
        s = self._state
        return PuzzleState(
            target=s.target,
            current_guess=list(s.current_guess),
            guesses=[list(g) for g in s.guesses],
            status=s.status,
            hint_used=s.hint_used,
            audio_hint_used=s.audio_hint_used,
            hint_index=s.hint_index,
        )

    # -- player actions -----------------------------------------------------

    def add_note(self, note: str) -> bool:
        validate_note(note)
        s = self._state
        if s.status.is_terminal or len(s.current_guess) >= len(s.target.notes):
            return False
        s.current_guess.append(note)
        return True

    def remove_note(self) -> bool:
        s = self._state
        if s.status.is_terminal or not s.current_guess:
            return False
        s.current_guess.pop()
        return True

    def submit_guess(self) -> GuessResult | None:
        """Score the pending guess. Returns None if the guess was not accepted."""
        s = self._state
        if s.status.is_terminal or len(s.current_guess) != len(s.target.notes):
            return None
        result = evaluate(s.current_guess, s.target.notes)
        s.guesses.append(result)
        s.current_guess = []
        self._settle(result)
        return list(result)

    def request_hint(self) -> int | None:
        """Reveal one note position. Returns the revealed index, or None if refused."""
        if not self.can_use_hint:
            return None
        self._state.hint_used = True
        self._state.hint_index = self._hint_position()
        return self._state.hint_index

    def request_audio_hint(self) -> bool:
        if not self.can_use_audio_hint:
            return False
        self._state.audio_hint_used = True
        return True

    # -- internals ----------------------------------------------------------

    def _settle(self, result: GuessResult) -> None:
        s = self._state
        if is_win(result):
            s.status = GameStatus.WON
        elif len(s.guesses) >= self.config.max_guesses:
            s.status = GameStatus.LOST
        if s.status.is_terminal and self.finished_at is None:
            self.finished_at = self._clock()

    def _hint_position(self) -> int:
        if not self._state.guesses:
            return 0
        latest = self._state.guesses[-1]
        for i, item in enumerate(latest):
            if item.feedback != Feedback.CORRECT:
                return i
        return 0
