"""Wellness (zen) mode: calm melodies in sequence, zen streaks and achievements."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import replace

from melodyx.catalog import WELLNESS_ACHIEVEMENTS, ZEN_MELODIES, WellnessAchievement, ZenMelody
from melodyx.clock import Clock, LocalClock, day_string, is_previous_day, is_same_day
from melodyx.config import (
    BREATHING_SESSION_MINUTES,
    WELLNESS_STATS_KEY,
    ZEN_DEFAULT_SESSION_MINUTES,
    ZEN_GAME_KEY,
)
from melodyx.models import GameStatus, GuessResult
from melodyx.modes.base import GuessLoop, register_records
from melodyx.records import WellnessStats, ZenGameState
from melodyx.session import PuzzleSession, SessionConfig
from melodyx.store import ProgressStore

logger = logging.getLogger(__name__)


def newly_unlocked(
    stats: WellnessStats, achievements: Sequence[WellnessAchievement] = WELLNESS_ACHIEVEMENTS
) -> list[str]:
    values = {
        "zen_streak": stats.zen_streak,
        "total_minutes": stats.total_minutes,
        "puzzles_solved": stats.puzzles_solved,
        "breathing_sessions": stats.breathing_sessions,
    }
    return [
        a.id for a in achievements
        if a.id not in stats.unlocked_achievements and values.get(a.kind, 0) >= a.requirement
    ]


def _with_unlocks(stats: WellnessStats) -> WellnessStats:
    return replace(stats, unlocked_achievements=stats.unlocked_achievements + newly_unlocked(stats))


class WellnessMode:
    name = "wellness"

    def __init__(
        self,
        store: ProgressStore,
        clock: Clock | None = None,
        config: SessionConfig = SessionConfig(),
        melodies: Sequence[ZenMelody] = ZEN_MELODIES,
        timer: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.clock = clock or LocalClock()
        self.config = config
        self.melodies = melodies
        self._timer = timer
        self._loop = GuessLoop()
        self._game = ZenGameState()
        register_records(store, (WELLNESS_STATS_KEY, WellnessStats), (ZEN_GAME_KEY, ZenGameState))

    @property
    def session(self) -> PuzzleSession | None:
        return self._loop.session

    @property
    def current_melody(self) -> ZenMelody:
        return self.melodies[self._game.current_puzzle_index % len(self.melodies)]

    async def get_stats(self) -> WellnessStats:
        return await self.store.read(WELLNESS_STATS_KEY)

    async def load(self) -> PuzzleSession:
        self._game = await self.store.read(ZEN_GAME_KEY)
        session = PuzzleSession.resume(
            self.current_melody.melody, self._game.guesses, config=self.config, clock=self._timer
        )
        self._loop.start(session)
        return session

    def add_note(self, note: str) -> bool:
        return self._loop.add_note(note)

    def remove_note(self) -> bool:
        return self._loop.remove_note()

    async def submit_guess(self) -> GuessResult | None:
        result, finished = self._loop.submit()
        if result is None:
            return None
        session = self.session
        self._game = replace(
            self._game,
            guesses=list(session.guesses),
            game_status=session.status,
            session_start_time=self._game.session_start_time or session.started_at,
        )
        await self.store.write(ZEN_GAME_KEY, self._game)
        if finished and session.status == GameStatus.WON:
            await self._record_win()
        return result

    async def _record_win(self) -> None:
        stats = await self.get_stats()
        today = self.clock.today()
        new_day = not is_same_day(stats.last_zen_date, today)
        if new_day:
            streak = stats.zen_streak + 1 if is_previous_day(stats.last_zen_date, today) else 1
        else:
            streak = stats.zen_streak
        started = self._game.session_start_time
        minutes = round((self._timer() - started) / 60) if started else ZEN_DEFAULT_SESSION_MINUTES
        updated = _with_unlocks(replace(
            stats,
            zen_streak=streak,
            total_minutes=stats.total_minutes + max(minutes, 1),
            puzzles_solved=stats.puzzles_solved + 1,
            last_zen_date=day_string(today),
        ))
        await self.store.write(WELLNESS_STATS_KEY, updated)

    async def next_puzzle(self) -> PuzzleSession:
        self._game = ZenGameState(
            current_puzzle_index=self._game.current_puzzle_index + 1,
            session_start_time=self._timer(),
        )
        await self.store.write(ZEN_GAME_KEY, self._game)
        session = PuzzleSession(self.current_melody.melody, self.config, self._timer)
        self._loop.start(session)
        return session

    async def complete_meditation(self) -> None:
        self._game = replace(self._game, meditation_completed=True)
        await self.store.write(ZEN_GAME_KEY, self._game)

    async def complete_breathing_session(self) -> list[str]:
        """Count a breathing session. Returns achievements it unlocked."""
        stats = await self.get_stats()
        updated = _with_unlocks(replace(
            stats,
            breathing_sessions=stats.breathing_sessions + 1,
            total_minutes=stats.total_minutes + BREATHING_SESSION_MINUTES,
        ))
        await self.store.write(WELLNESS_STATS_KEY, updated)
        return updated.unlocked_achievements[len(stats.unlocked_achievements):]
