"""Guess evaluation — score a guessed note sequence against the target."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from melodyx.models import Feedback, GuessResult, InvalidNote, NoteFeedback, validate_note

__all__ = ["InvalidNote", "LengthMismatch", "evaluate", "is_win", "share_text"]

_SHARE_SQUARES = {
    Feedback.CORRECT: "\U0001F7E9",
    Feedback.PRESENT: "\U0001F7E8",
    Feedback.ABSENT: "⬛",
}


class LengthMismatch(ValueError):
    """Raised when a guess and its target differ in length."""


def evaluate(guess: Sequence[str], target: Sequence[str]) -> GuessResult:
    """Grade each guessed note as correct, present or absent.

    Exact matches are credited first and consume their note from the
    target pool. Remaining guess positions are then credited left to right
    while the pool still holds that note, so an over-represented note is
    ``present`` at its leftmost positions and ``absent`` after that.

    Raises:
        LengthMismatch: If ``guess`` and ``target`` differ in length.
        InvalidNote: If ``guess`` contains something other than a pitch class.
    """
    if len(guess) != len(target):
        raise LengthMismatch(
            f"Guess has {len(guess)} notes, target has {len(target)}"
        )
    for note in guess:
        validate_note(note)

    feedback: list[Feedback | None] = [None] * len(guess)
    remaining: Counter[str] = Counter(target)

    for i, (played, expected) in enumerate(zip(guess, target)):
        if played == expected:
            feedback[i] = Feedback.CORRECT
            remaining[played] -= 1

    for i, played in enumerate(guess):
        if feedback[i] is not None:
            continue
        if remaining[played] > 0:
            feedback[i] = Feedback.PRESENT
            remaining[played] -= 1
        else:
            feedback[i] = Feedback.ABSENT

    return [NoteFeedback(note=n, feedback=f) for n, f in zip(guess, feedback)]


def is_win(result: GuessResult) -> bool:
    return all(item.feedback == Feedback.CORRECT for item in result)


def share_text(
    guesses: Sequence[GuessResult],
    puzzle_number: int,
    won: bool,
    max_guesses: int = 6,
) -> str:
    """Build the spoiler-free emoji grid players paste into chats."""
    attempts = f"{len(guesses)}/{max_guesses}" if won else f"X/{max_guesses}"
    rows = "".join(
        "".join(_SHARE_SQUARES[item.feedback] for item in guess) + "\n"
        for guess in guesses
    )
    return f"\U0001F3B5 Melodyx #{puzzle_number} {attempts}\n\n{rows}\nPlay at melodyx.app"
