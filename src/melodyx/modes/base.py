"""Pieces every mode controller composes: the guess loop and record registration."""

from __future__ import annotations

from melodyx.models import GuessResult
from melodyx.session import PuzzleSession
from melodyx.store import ProgressStore, RecordSpec


def register_records(store: ProgressStore, *records: tuple[str, type]) -> None:
    """Register ``(key, record type)`` pairs the store does not know yet."""
    for key, record_type in records:
        if not store.is_registered(key):
            store.register(RecordSpec.for_record(key, record_type))


class GuessLoop:
    """Holds a controller's active session and reports when it finishes."""

    def __init__(self) -> None:
        self.session: PuzzleSession | None = None

    def start(self, session: PuzzleSession | None) -> None:
        self.session = session

    def add_note(self, note: str) -> bool:
        return self.session is not None and self.session.add_note(note)

    def remove_note(self) -> bool:
        return self.session is not None and self.session.remove_note()

    def submit(self) -> tuple[GuessResult | None, bool]:
        """Submit the pending guess.

        Returns the scored guess (None if rejected) and whether this guess
        moved the session from playing to a terminal state.
        """
        session = self.session
        if session is None or session.is_over:
            return None, False
        result = session.submit_guess()
        return result, result is not None and session.is_over
