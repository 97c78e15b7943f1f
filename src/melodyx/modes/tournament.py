"""Tournament play: entry tokens, daily token claims and match results."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import replace

from melodyx.catalog import TOURNAMENTS, Tournament, find_tournament
from melodyx.clock import Clock, LocalClock, day_string, is_same_day, parse_day
from melodyx.config import DAILY_TOKEN_GRANT, TOURNAMENT_STATS_KEY
from melodyx.economy import NullSink, RewardSink
from melodyx.models import GameStatus, GuessResult, Melody
from melodyx.modes.base import GuessLoop, register_records
from melodyx.records import TournamentStats
from melodyx.session import PuzzleSession, SessionConfig
from melodyx.store import ProgressStore

logger = logging.getLogger(__name__)


class TournamentMode:
    name = "tournament"

    def __init__(
        self,
        store: ProgressStore,
        clock: Clock | None = None,
        sink: RewardSink | None = None,
        timer: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.clock = clock or LocalClock()
        self.sink = sink or NullSink()
        self._timer = timer
        self._loop = GuessLoop()
        self._match_id: str | None = None
        register_records(store, (TOURNAMENT_STATS_KEY, TournamentStats))

    @property
    def session(self) -> PuzzleSession | None:
        return self._loop.session

    async def get_stats(self) -> TournamentStats:
        return await self.store.read(TOURNAMENT_STATS_KEY)

    async def can_claim_daily_token(self) -> bool:
        stats = await self.get_stats()
        return not is_same_day(stats.last_daily_token_claim, self.clock.today())

    async def claim_daily_token(self) -> bool:
        stats = await self.get_stats()
        today = self.clock.today()
        if is_same_day(stats.last_daily_token_claim, today):
            return False
        await self.store.write(
            TOURNAMENT_STATS_KEY,
            replace(stats, tokens=stats.tokens + DAILY_TOKEN_GRANT,
                    last_daily_token_claim=day_string(today)),
        )
        self.sink.grant("tournament_tokens", DAILY_TOKEN_GRANT, reason="daily claim")
        return True

    async def join(self, tournament_id: str) -> bool:
        tournament = find_tournament(tournament_id)
        if tournament is None:
            return False
        stats = await self.get_stats()
        if tournament.id in stats.participated_tournaments:
            logger.debug("Already joined %s", tournament.id)
            return False
        if stats.tokens < tournament.entry_tokens:
            logger.debug("Not enough tokens for %s", tournament.id)
            return False
        await self.store.write(
            TOURNAMENT_STATS_KEY,
            replace(
                stats,
                tokens=stats.tokens - tournament.entry_tokens,
                participated_tournaments=stats.participated_tournaments + [tournament.id],
                current_tournament_id=tournament.id,
            ),
        )
        if tournament.entry_tokens:
            self.sink.grant("tournament_tokens", -tournament.entry_tokens,
                            reason=f"entry: {tournament.id}")
        return True

    async def purchase_tokens(self, amount: int) -> None:
        if amount <= 0:
            return
        stats = await self.get_stats()
        await self.store.write(TOURNAMENT_STATS_KEY, replace(stats, tokens=stats.tokens + amount))
        self.sink.grant("tournament_tokens", amount, reason="purchase")

    def start_match(self, match_id: str, melody: Melody, tournament_id: str | None = None) -> PuzzleSession:
        tournament = find_tournament(tournament_id) if tournament_id else None
        config = SessionConfig(max_guesses=tournament.max_guesses) if tournament else SessionConfig()
        self._match_id = match_id
        self._loop.start(PuzzleSession(melody, config, self._timer))
        return self.session

    def add_note(self, note: str) -> bool:
        return self._loop.add_note(note)

    def remove_note(self) -> bool:
        return self._loop.remove_note()

    async def submit_guess(self) -> GuessResult | None:
        result, finished = self._loop.submit()
        if finished and self._match_id is not None:
            await self.record_match_result(self._match_id, self.session.status == GameStatus.WON)
        return result

    async def record_match_result(self, match_id: str, won: bool) -> bool:
        """Count a finished match once. Returns False for a replayed match id."""
        stats = await self.get_stats()
        if match_id in stats.recorded_matches:
            logger.debug("Match %s already recorded", match_id)
            return False
        await self.store.write(
            TOURNAMENT_STATS_KEY,
            replace(
                stats,
                total_matches=stats.total_matches + 1,
                total_wins=stats.total_wins + (1 if won else 0),
                recorded_matches=stats.recorded_matches + [match_id],
            ),
        )
        return True

    def tournaments(self) -> tuple[Tournament, ...]:
        return TOURNAMENTS

    def tournament_status(self, tournament: Tournament) -> str:
        today = self.clock.today()
        start = parse_day(tournament.start_date)
        end = parse_day(tournament.end_date)
        if today < start:
            days = (start - today).days
            return f"Starts in {days} day{'s' if days > 1 else ''}"
        if today > end:
            return "Completed"
        remaining = (end - today).days + 1
        return f"{remaining} day{'s' if remaining > 1 else ''} left"
