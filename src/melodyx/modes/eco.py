"""Eco mode: nature melodies that earn eco points toward carbon offsets."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Sequence
from dataclasses import replace

from melodyx.catalog import (
    ECO_MELODIES,
    ECO_MILESTONES,
    ECO_PROJECTS,
    EcoMilestone,
    EcoProject,
    now_iso,
    random_melody,
)
from melodyx.config import ECO_POINTS_PER_PERFECT, ECO_POINTS_PER_TON, ECO_POINTS_PER_WIN, ECO_STATE_KEY
from melodyx.economy import NullSink, RewardSink
from melodyx.models import GameStatus, GuessResult, Melody
from melodyx.modes.base import GuessLoop, register_records
from melodyx.records import EcoOffset, EcoState
from melodyx.session import PuzzleSession, SessionConfig
from melodyx.store import ProgressStore

logger = logging.getLogger(__name__)


def carbon_offset_tons(eco_points: int) -> float:
    return eco_points / ECO_POINTS_PER_TON


def current_milestone(eco_points: int) -> EcoMilestone | None:
    reached = [m for m in ECO_MILESTONES if eco_points >= m.points]
    return reached[-1] if reached else None


def next_milestone(eco_points: int) -> EcoMilestone | None:
    for milestone in ECO_MILESTONES:
        if eco_points < milestone.points:
            return milestone
    return None


class EcoMode:
    name = "eco"

    def __init__(
        self,
        store: ProgressStore,
        sink: RewardSink | None = None,
        config: SessionConfig = SessionConfig(),
        pool: Sequence[Melody] = ECO_MELODIES,
        rng: random.Random | None = None,
        timer: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.sink = sink or NullSink()
        self.config = config
        self.pool = pool
        self._rng = rng or random.Random()
        self._timer = timer
        self._loop = GuessLoop()
        register_records(store, (ECO_STATE_KEY, EcoState))

    @property
    def session(self) -> PuzzleSession | None:
        return self._loop.session

    async def get_state(self) -> EcoState:
        return await self.store.read(ECO_STATE_KEY)

    async def load(self) -> PuzzleSession | None:
        state = await self.get_state()
        self._start(state.current_eco_melody if state.eco_mode_enabled else None)
        return self.session

    async def toggle_eco_mode(self) -> bool:
        """Flip eco mode. Enabling draws an unsolved melody. Returns the new setting."""
        state = await self.get_state()
        enabled = not state.eco_mode_enabled
        melody = self._draw(state.solved_eco_melodies) if enabled else None
        await self.store.write(
            ECO_STATE_KEY, replace(state, eco_mode_enabled=enabled, current_eco_melody=melody)
        )
        self._start(melody)
        return enabled

    async def next_puzzle(self) -> PuzzleSession | None:
        """Start the melody drawn after the last win."""
        return await self.load()

    async def next_melody(self) -> Melody:
        """Skip to a freshly drawn unsolved melody."""
        state = await self.get_state()
        melody = self._draw(state.solved_eco_melodies)
        await self.store.write(ECO_STATE_KEY, replace(state, current_eco_melody=melody))
        self._start(melody)
        return melody

    def add_note(self, note: str) -> bool:
        return self._loop.add_note(note)

    def remove_note(self) -> bool:
        return self._loop.remove_note()

    async def submit_guess(self) -> GuessResult | None:
        result, finished = self._loop.submit()
        if finished and self.session.status == GameStatus.WON:
            await self.record_win(is_perfect=self.session.guess_count == 1)
        return result

    async def record_win(self, is_perfect: bool = False) -> int:
        """Credit the current melody once. Returns the points granted."""
        state = await self.get_state()
        melody = state.current_eco_melody
        if melody is None:
            logger.debug("No eco melody in play, no points")
            return 0
        name = melody.name
        if name in state.solved_eco_melodies:
            logger.debug("Eco melody %s already solved, no points", name)
            return 0
        points = ECO_POINTS_PER_PERFECT if is_perfect else ECO_POINTS_PER_WIN
        solved = state.solved_eco_melodies + [name]
        await self.store.write(
            ECO_STATE_KEY,
            replace(
                state,
                eco_points=state.eco_points + points,
                solved_eco_melodies=solved,
                current_eco_melody=self._draw(solved),
            ),
        )
        self.sink.grant("eco_points", points, reason=f"eco win: {name}")
        return points

    async def add_eco_points(self, points: int) -> None:
        state = await self.get_state()
        await self.store.write(ECO_STATE_KEY, replace(state, eco_points=state.eco_points + points))

    async def can_afford_offset(self, tons: int) -> bool:
        state = await self.get_state()
        return state.eco_points >= tons * ECO_POINTS_PER_TON

    async def purchase_offset(self, project_id: str, tons: int) -> bool:
        if tons <= 0 or self.get_project(project_id) is None:
            return False
        state = await self.get_state()
        cost = tons * ECO_POINTS_PER_TON
        if state.eco_points < cost:
            return False
        offset = EcoOffset(
            id=f"offset_{int(self._timer() * 1000)}",
            project_id=project_id,
            tons=tons,
            points_spent=cost,
            date=now_iso(),
        )
        await self.store.write(
            ECO_STATE_KEY,
            replace(
                state,
                eco_points=state.eco_points - cost,
                total_offset_tons=state.total_offset_tons + tons,
                offsets=state.offsets + [offset],
            ),
        )
        return True

    @staticmethod
    def get_project(project_id: str) -> EcoProject | None:
        for project in ECO_PROJECTS:
            if project.id == project_id:
                return project
        return None

    def _draw(self, solved: Sequence[str]) -> Melody:
        return random_melody(self.pool, solved, self._rng)

    def _start(self, melody: Melody | None) -> None:
        self._loop.start(
            PuzzleSession(melody, self.config, self._timer) if melody is not None else None
        )
