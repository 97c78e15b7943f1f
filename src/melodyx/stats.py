"""Read-side statistics derived from persisted progress records."""

from __future__ import annotations

from dataclasses import dataclass

from melodyx.records import GameStats, TournamentStats


def win_percentage(games_won: int, games_played: int) -> int:
    if games_played <= 0:
        return 0
    # Half-up rounding, as players expect 0.5 -> 1
    return int(games_won / games_played * 100 + 0.5)


@dataclass(frozen=True)
class StatsSummary:
    games_played: int
    win_percentage: int
    current_streak: int
    max_streak: int
    guess_distribution: tuple[int, ...]

    @property
    def most_common_guess_count(self) -> int | None:
        """1-based guess count with the most wins, or None before any win."""
        if not any(self.guess_distribution):
            return None
        best = max(self.guess_distribution)
        return self.guess_distribution.index(best) + 1


def summarize(stats: GameStats) -> StatsSummary:
    return StatsSummary(
        games_played=stats.games_played,
        win_percentage=win_percentage(stats.games_won, stats.games_played),
        current_streak=stats.current_streak,
        max_streak=stats.max_streak,
        guess_distribution=tuple(stats.guess_distribution),
    )


def distribution_bars(stats: GameStats, width: int = 20) -> list[tuple[int, int, int]]:
    """(guess count, wins, bar length) rows scaled to the largest bucket."""
    top = max(stats.guess_distribution, default=0)
    rows = []
    for i, wins in enumerate(stats.guess_distribution):
        length = round(wins / top * width) if top else 0
        rows.append((i + 1, wins, length))
    return rows


def tournament_win_rate(stats: TournamentStats) -> int:
    return win_percentage(stats.total_wins, stats.total_matches)
