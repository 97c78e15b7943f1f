"""Persisted progress records, one per storage key.

Records serialize to the camelCase JSON layout used on disk. Controllers
treat them as values: build a new record with ``dataclasses.replace``
and write it back through the store, never mutate a cached one.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from melodyx.config import DEFAULT_MAX_GUESSES, DEFAULT_TOURNAMENT_TOKENS
from melodyx.models import GameStatus, GuessResult, Melody, NoteFeedback


def _encode_guesses(guesses: list[GuessResult]) -> list[list[dict]]:
    return [[item.to_dict() for item in guess] for guess in guesses]


def _decode_guesses(data: list[list[dict]]) -> list[GuessResult]:
    return [[NoteFeedback.from_dict(item) for item in guess] for guess in data]


@dataclass
class GameStats:
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0
    guess_distribution: list[int] = field(
        default_factory=lambda: [0] * DEFAULT_MAX_GUESSES
    )
    last_played_date: str | None = None

    def is_consistent(self) -> bool:
        return (
            sum(self.guess_distribution) == self.games_won
            and self.games_won <= self.games_played
            and self.current_streak <= self.max_streak
        )

    def to_dict(self) -> dict:
        return {
            "gamesPlayed": self.games_played,
            "gamesWon": self.games_won,
            "currentStreak": self.current_streak,
            "maxStreak": self.max_streak,
            "guessDistribution": list(self.guess_distribution),
            "lastPlayedDate": self.last_played_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> GameStats:
        return cls(
            games_played=data.get("gamesPlayed", 0),
            games_won=data.get("gamesWon", 0),
            current_streak=data.get("currentStreak", 0),
            max_streak=data.get("maxStreak", 0),
            guess_distribution=list(
                data.get("guessDistribution", [0] * DEFAULT_MAX_GUESSES)
            ),
            last_played_date=data.get("lastPlayedDate"),
        )


@dataclass
class DailyGameState:
    """Guess history of the current day's puzzle, so a restart can resume it."""

    date: str = ""
    guesses: list[GuessResult] = field(default_factory=list)
    game_status: GameStatus = GameStatus.PLAYING
    hint_used: bool = False
    audio_hint_used: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "guesses": _encode_guesses(self.guesses),
            "gameStatus": self.game_status.value,
            "hintUsed": self.hint_used,
            "audioHintUsed": self.audio_hint_used,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DailyGameState:
        return cls(
            date=data.get("date", ""),
            guesses=_decode_guesses(data.get("guesses", [])),
            game_status=GameStatus(data.get("gameStatus", "playing")),
            hint_used=data.get("hintUsed", False),
            audio_hint_used=data.get("audioHintUsed", False),
        )


@dataclass
class EcoOffset:
    id: str
    project_id: str
    tons: int
    points_spent: int
    date: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "tons": self.tons,
            "pointsSpent": self.points_spent,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> EcoOffset:
        return cls(
            id=data["id"],
            project_id=data["projectId"],
            tons=data["tons"],
            points_spent=data["pointsSpent"],
            date=data["date"],
        )


@dataclass
class EcoState:
    eco_points: int = 0
    total_offset_tons: int = 0
    eco_mode_enabled: bool = False
    offsets: list[EcoOffset] = field(default_factory=list)
    current_eco_melody: Melody | None = None
    solved_eco_melodies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "ecoPoints": self.eco_points,
            "totalOffsetTons": self.total_offset_tons,
            "ecoModeEnabled": self.eco_mode_enabled,
            "offsets": [o.to_dict() for o in self.offsets],
            "currentEcoMelody": (
                self.current_eco_melody.to_dict() if self.current_eco_melody else None
            ),
            "solvedEcoMelodies": list(self.solved_eco_melodies),
        }

    @classmethod
    def from_dict(cls, data: dict) -> EcoState:
        melody = data.get("currentEcoMelody")
        return cls(
            eco_points=data.get("ecoPoints", 0),
            total_offset_tons=data.get("totalOffsetTons", 0),
            eco_mode_enabled=data.get("ecoModeEnabled", False),
            offsets=[EcoOffset.from_dict(o) for o in data.get("offsets", [])],
            current_eco_melody=Melody.from_dict(melody) if melody else None,
            solved_eco_melodies=list(data.get("solvedEcoMelodies", [])),
        )


@dataclass
class PuzzleResult:
    melody_name: str
    guesses: int
    won: bool

    def to_dict(self) -> dict:
        return {"melodyName": self.melody_name, "guesses": self.guesses, "won": self.won}

    @classmethod
    def from_dict(cls, data: dict) -> PuzzleResult:
        return cls(melody_name=data["melodyName"], guesses=data["guesses"], won=data["won"])


@dataclass
class EventProgress:
    event_id: str
    puzzles_completed: int = 0
    puzzle_results: list[PuzzleResult] = field(default_factory=list)
    rewards_claimed: list[str] = field(default_factory=list)
    started_at: str = ""
    completed_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "eventId": self.event_id,
            "puzzlesCompleted": self.puzzles_completed,
            "puzzleResults": [r.to_dict() for r in self.puzzle_results],
            "rewardsClaimed": list(self.rewards_claimed),
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> EventProgress:
        return cls(
            event_id=data["eventId"],
            puzzles_completed=data.get("puzzlesCompleted", 0),
            puzzle_results=[PuzzleResult.from_dict(r) for r in data.get("puzzleResults", [])],
            rewards_claimed=list(data.get("rewardsClaimed", [])),
            started_at=data.get("startedAt", ""),
            completed_at=data.get("completedAt"),
        )


@dataclass
class EventsState:
    event_progress: list[EventProgress] = field(default_factory=list)
    current_event_puzzle_index: int = 0

    def progress_for(self, event_id: str) -> EventProgress | None:
        for progress in self.event_progress:
            if progress.event_id == event_id:
                return progress
        return None

    def to_dict(self) -> dict:
        return {
            "eventProgress": [p.to_dict() for p in self.event_progress],
            "currentEventPuzzleIndex": self.current_event_puzzle_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> EventsState:
        return cls(
            event_progress=[EventProgress.from_dict(p) for p in data.get("eventProgress", [])],
            current_event_puzzle_index=data.get("currentEventPuzzleIndex", 0),
        )


@dataclass
class TournamentStats:
    participated_tournaments: list[str] = field(default_factory=list)
    won_tournaments: list[str] = field(default_factory=list)
    total_wins: int = 0
    total_matches: int = 0
    tokens: int = DEFAULT_TOURNAMENT_TOKENS
    last_daily_token_claim: str | None = None
    earned_badges: list[str] = field(default_factory=list)
    current_tournament_id: str | None = None
    recorded_matches: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "participatedTournaments": list(self.participated_tournaments),
            "wonTournaments": list(self.won_tournaments),
            "totalWins": self.total_wins,
            "totalMatches": self.total_matches,
            "tokens": self.tokens,
            "lastDailyTokenClaim": self.last_daily_token_claim,
            "earnedBadges": list(self.earned_badges),
            "currentTournamentId": self.current_tournament_id,
            "recordedMatches": list(self.recorded_matches),
        }

    @classmethod
    def from_dict(cls, data: dict) -> TournamentStats:
        return cls(
            participated_tournaments=list(data.get("participatedTournaments", [])),
            won_tournaments=list(data.get("wonTournaments", [])),
            total_wins=data.get("totalWins", 0),
            total_matches=data.get("totalMatches", 0),
            tokens=data.get("tokens", DEFAULT_TOURNAMENT_TOKENS),
            last_daily_token_claim=data.get("lastDailyTokenClaim"),
            earned_badges=list(data.get("earnedBadges", [])),
            current_tournament_id=data.get("currentTournamentId"),
            recorded_matches=list(data.get("recordedMatches", [])),
        )


@dataclass
class WellnessStats:
    zen_streak: int = 0
    total_minutes: int = 0
    puzzles_solved: int = 0
    breathing_sessions: int = 0
    last_zen_date: str | None = None
    unlocked_achievements: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "zenStreak": self.zen_streak,
            "totalMinutes": self.total_minutes,
            "puzzlesSolved": self.puzzles_solved,
            "breathingSessions": self.breathing_sessions,
            "lastZenDate": self.last_zen_date,
            "unlockedAchievements": list(self.unlocked_achievements),
        }

    @classmethod
    def from_dict(cls, data: dict) -> WellnessStats:
        return cls(
            zen_streak=data.get("zenStreak", 0),
            total_minutes=data.get("totalMinutes", 0),
            puzzles_solved=data.get("puzzlesSolved", 0),
            breathing_sessions=data.get("breathingSessions", 0),
            last_zen_date=data.get("lastZenDate"),
            unlocked_achievements=list(data.get("unlockedAchievements", [])),
        )


@dataclass
class ZenGameState:
    current_puzzle_index: int = 0
    guesses: list[GuessResult] = field(default_factory=list)
    game_status: GameStatus = GameStatus.PLAYING
    session_start_time: float | None = None
    meditation_completed: bool = False

    def to_dict(self) -> dict:
        return {
            "currentPuzzleIndex": self.current_puzzle_index,
            "guesses": _encode_guesses(self.guesses),
            "gameStatus": self.game_status.value,
            "sessionStartTime": self.session_start_time,
            "meditationCompleted": self.meditation_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ZenGameState:
        return cls(
            current_puzzle_index=data.get("currentPuzzleIndex", 0),
            guesses=_decode_guesses(data.get("guesses", [])),
            game_status=GameStatus(data.get("gameStatus", "playing")),
            session_start_time=data.get("sessionStartTime"),
            meditation_completed=data.get("meditationCompleted", False),
        )
