"""Daily puzzle: one melody per calendar day, streaks and guess distribution."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from melodyx.catalog import DAILY_MELODIES, daily_melody, puzzle_number
from melodyx.clock import Clock, LocalClock, day_string, is_previous_day, is_same_day
from melodyx.config import DAILY_GAME_KEY, STATS_KEY
from melodyx.evaluator import share_text
from melodyx.models import GameStatus, GuessResult, Melody
from melodyx.modes.base import GuessLoop, register_records
from melodyx.records import DailyGameState, GameStats
from melodyx.session import PuzzleSession, SessionConfig
from melodyx.store import ProgressStore

logger = logging.getLogger(__name__)


def apply_result(stats: GameStats, won: bool, guess_count: int, today_str: str,
                 consecutive: bool, max_guesses: int) -> GameStats:
    """Fold one finished daily puzzle into the stats record."""
    streak = (stats.current_streak + 1 if consecutive else 1) if won else 0
    distribution = list(stats.guess_distribution)
    if len(distribution) < max_guesses:
        distribution.extend([0] * (max_guesses - len(distribution)))
    if won:
        distribution[guess_count - 1] += 1
    return GameStats(
        games_played=stats.games_played + 1,
        games_won=stats.games_won + (1 if won else 0),
        current_streak=streak,
        max_streak=max(stats.max_streak, streak),
        guess_distribution=distribution,
        last_played_date=today_str,
    )


class DailyMode:
    name = "daily"

    def __init__(
        self,
        store: ProgressStore,
        clock: Clock | None = None,
        config: SessionConfig = SessionConfig(),
        pool: Sequence[Melody] = DAILY_MELODIES,
        timer: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.clock = clock or LocalClock()
        self.config = config
        self.pool = pool
        self._timer = timer
        self._loop = GuessLoop()
        self._day = None
        register_records(store, (STATS_KEY, GameStats), (DAILY_GAME_KEY, DailyGameState))

    @property
    def session(self) -> PuzzleSession | None:
        return self._loop.session

    @property
    def puzzle_number(self) -> int:
        return puzzle_number(self._day or self.clock.today())

    async def load(self) -> PuzzleSession:
        """Start today's puzzle, resuming today's saved guesses if there are any."""
        today = self.clock.today()
        self._day = today
        melody = daily_melody(today, self.pool)
        saved: DailyGameState = await self.store.read(DAILY_GAME_KEY)
        if is_same_day(saved.date, today):
            session = PuzzleSession.resume(
                melody,
                saved.guesses,
                hint_used=saved.hint_used,
                audio_hint_used=saved.audio_hint_used,
                config=self.config,
                clock=self._timer,
            )
        else:
            session = PuzzleSession(melody, self.config, self._timer)
        self._loop.start(session)
        return session

    async def ensure_today(self) -> bool:
        """Roll over to a new puzzle if the calendar day changed. Returns True on rollover."""
        if self._day is not None and self._day == self.clock.today():
            return False
        await self.load()
        return True

    async def get_stats(self) -> GameStats:
        return await self.store.read(STATS_KEY)

    def add_note(self, note: str) -> bool:
        return self._loop.add_note(note)

    def remove_note(self) -> bool:
        return self._loop.remove_note()

    async def submit_guess(self) -> GuessResult | None:
        result, finished = self._loop.submit()
        if result is None:
            return None
        await self.store.write(DAILY_GAME_KEY, self._game_state())
        if finished:
            await self._record_result()
        return result

    async def request_hint(self) -> int | None:
        if self.session is None:
            return None
        index = self.session.request_hint()
        if index is not None:
            await self.store.write(DAILY_GAME_KEY, self._game_state())
        return index

    async def request_audio_hint(self) -> bool:
        if self.session is None or not self.session.request_audio_hint():
            return False
        await self.store.write(DAILY_GAME_KEY, self._game_state())
        return True

    def share_text(self) -> str | None:
        session = self.session
        if session is None or not session.is_over:
            return None
        return share_text(
            session.guesses,
            self.puzzle_number,
            session.status == GameStatus.WON,
            session.config.max_guesses,
        )

    def _game_state(self) -> DailyGameState:
        session = self.session
        return DailyGameState(
            date=day_string(self._day),
            guesses=list(session.guesses),
            game_status=session.status,
            hint_used=session.hint_used,
            audio_hint_used=session.audio_hint_used,
        )

    async def _record_result(self) -> None:
        session = self.session
        today = self._day
        stats: GameStats = await self.store.read(STATS_KEY)
        if is_same_day(stats.last_played_date, today):
            logger.debug("Daily result for %s already recorded", today)
            return
        won = session.status == GameStatus.WON
        new_stats = apply_result(
            stats,
            won=won,
            guess_count=session.guess_count,
            today_str=day_string(today),
            consecutive=is_previous_day(stats.last_played_date, today),
            max_guesses=session.config.max_guesses,
        )
        await self.store.write(STATS_KEY, new_stats)
        logger.debug("Daily puzzle %d %s in %d guesses, streak %d",
                     self.puzzle_number, "won" if won else "lost",
                     session.guess_count, new_stats.current_streak)
