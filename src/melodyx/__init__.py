"""Melodyx — daily melody-guessing puzzles."""

from melodyx.evaluator import evaluate, is_win
from melodyx.models import Feedback, GameStatus, Melody, NoteFeedback
from melodyx.session import PuzzleSession, SessionConfig
from melodyx.store import ProgressStore, RecordSpec

__all__ = [
    "Feedback",
    "GameStatus",
    "Melody",
    "NoteFeedback",
    "ProgressStore",
    "PuzzleSession",
    "RecordSpec",
    "SessionConfig",
    "evaluate",
    "is_win",
]
