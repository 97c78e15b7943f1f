"""Core data models shared across the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from melodyx.config import NOTE_NAMES


class Feedback(str, Enum):
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


class GameStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.PLAYING


class InvalidNote(ValueError):
    """Raised when a symbol outside the twelve pitch classes is used as a note."""


def validate_note(note: str) -> str:
    if note not in NOTE_NAMES:
        raise InvalidNote(f"Not a pitch class: {note!r}")
    return note


@dataclass(frozen=True)
class NoteFeedback:
    """One scored position of a guess."""

    note: str
    feedback: Feedback

    def to_dict(self) -> dict:
        return {"note": self.note, "feedback": self.feedback.value}

    @classmethod
    def from_dict(cls, data: dict) -> NoteFeedback:
        return cls(note=data["note"], feedback=Feedback(data["feedback"]))


# A scored guess: one NoteFeedback per guessed position
GuessResult = list[NoteFeedback]


@dataclass(frozen=True)
class Melody:
    """A secret target: ordered pitch classes plus descriptive metadata."""

    name: str
    notes: tuple[str, ...]
    hint: str = ""
    category: str = ""
    genre: str = ""
    era: str = ""
    mood: str = ""
    extended_notes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but store tuples so melodies stay hashable
        object.__setattr__(self, "notes", tuple(self.notes))
        object.__setattr__(self, "extended_notes", tuple(self.extended_notes))
        if not self.notes:
            raise ValueError(f"Melody {self.name!r} has no notes")
        for note in self.notes:
            validate_note(note)

    def __len__(self) -> int:
        return len(self.notes)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "notes": list(self.notes),
            "hint": self.hint,
            "category": self.category,
            "genre": self.genre,
            "era": self.era,
            "mood": self.mood,
            "extendedNotes": list(self.extended_notes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Melody:
        return cls(
            name=data["name"],
            notes=tuple(data["notes"]),
            hint=data.get("hint", ""),
            category=data.get("category", ""),
            genre=data.get("genre", ""),
            era=data.get("era", ""),
            mood=data.get("mood", ""),
            extended_notes=tuple(data.get("extendedNotes", ())),
        )


@dataclass
class PuzzleState:
    """Live state of one puzzle attempt. Owned by a single PuzzleSession."""

    target: Melody
    current_guess: list[str] = field(default_factory=list)
    guesses: list[GuessResult] = field(default_factory=list)
    status: GameStatus = GameStatus.PLAYING
    hint_used: bool = False
    audio_hint_used: bool = False
    hint_index: int | None = None  # position revealed by the note hint
