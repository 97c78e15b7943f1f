"""Themed events: a fixed song list played in order during a date window."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import replace

from melodyx.catalog import THEMED_EVENTS, EventReward, ThemedEvent, active_event, now_iso, upcoming_events
from melodyx.clock import Clock, LocalClock
from melodyx.config import EVENTS_KEY
from melodyx.economy import NullSink, RewardSink
from melodyx.models import GameStatus, GuessResult, Melody
from melodyx.modes.base import GuessLoop, register_records
from melodyx.records import EventProgress, EventsState, PuzzleResult
from melodyx.session import PuzzleSession, SessionConfig
from melodyx.store import ProgressStore

logger = logging.getLogger(__name__)


def _with_progress(state: EventsState, progress: EventProgress) -> EventsState:
    others = [p for p in state.event_progress if p.event_id != progress.event_id]
    if len(others) == len(state.event_progress):
        return replace(state, event_progress=state.event_progress + [progress])
    return replace(
        state,
        event_progress=[progress if p.event_id == progress.event_id else p
                        for p in state.event_progress],
    )


class EventsMode:
    name = "events"

    def __init__(
        self,
        store: ProgressStore,
        clock: Clock | None = None,
        sink: RewardSink | None = None,
        config: SessionConfig = SessionConfig(),
        events: Sequence[ThemedEvent] = THEMED_EVENTS,
        timer: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.clock = clock or LocalClock()
        self.sink = sink or NullSink()
        self.config = config
        self.events = events
        self._timer = timer
        self._loop = GuessLoop()
        self._puzzle_index: int | None = None
        register_records(store, (EVENTS_KEY, EventsState))

    @property
    def session(self) -> PuzzleSession | None:
        return self._loop.session

    @property
    def active_event(self) -> ThemedEvent | None:
        return active_event(self.clock.today(), self.events)

    def upcoming_events(self, limit: int = 3) -> list[ThemedEvent]:
        return upcoming_events(self.clock.today(), limit, self.events)

    async def get_event_progress(self, event_id: str) -> EventProgress | None:
        state: EventsState = await self.store.read(EVENTS_KEY)
        return state.progress_for(event_id)

    async def current_puzzle(self) -> Melody | None:
        event = self.active_event
        if event is None:
            return None
        progress = await self.get_event_progress(event.id)
        index = progress.puzzles_completed if progress else 0
        return event.songs[index] if index < len(event.songs) else None

    async def start_event(self, event_id: str) -> bool:
        """Begin tracking an event. Returns False if it was already started."""
        state: EventsState = await self.store.read(EVENTS_KEY)
        if state.progress_for(event_id) is not None:
            return False
        progress = EventProgress(event_id=event_id, started_at=now_iso())
        await self.store.write(
            EVENTS_KEY, replace(_with_progress(state, progress), current_event_puzzle_index=0)
        )
        await self.load()
        return True

    async def load(self) -> PuzzleSession | None:
        """Open a session on the active event's next unplayed song, if any."""
        event = self.active_event
        melody = await self.current_puzzle()
        if event is None or melody is None:
            self._puzzle_index = None
            self._loop.start(None)
            return None
        progress = await self.get_event_progress(event.id)
        self._puzzle_index = progress.puzzles_completed if progress else 0
        self._loop.start(PuzzleSession(melody, self.config, self._timer))
        return self.session

    async def next_puzzle(self) -> PuzzleSession | None:
        return await self.load()

    def add_note(self, note: str) -> bool:
        return self._loop.add_note(note)

    def remove_note(self) -> bool:
        return self._loop.remove_note()

    async def submit_guess(self) -> GuessResult | None:
        result, finished = self._loop.submit()
        if finished:
            await self._record_result()
        return result

    async def _record_result(self) -> None:
        event = self.active_event
        session = self.session
        if event is None or session is None:
            return
        state: EventsState = await self.store.read(EVENTS_KEY)
        progress = state.progress_for(event.id) or EventProgress(
            event_id=event.id, started_at=now_iso()
        )
        if progress.puzzles_completed != self._puzzle_index:
            logger.debug("Event %s puzzle %s already recorded", event.id, self._puzzle_index)
            return
        completed = progress.puzzles_completed + 1
        updated = replace(
            progress,
            puzzles_completed=completed,
            puzzle_results=progress.puzzle_results + [
                PuzzleResult(
                    melody_name=session.melody.name,
                    guesses=session.guess_count,
                    won=session.status == GameStatus.WON,
                )
            ],
            completed_at=now_iso() if completed >= len(event.songs) else None,
        )
        await self.store.write(
            EVENTS_KEY, replace(_with_progress(state, updated), current_event_puzzle_index=completed)
        )

    async def claim_reward(self, reward_id: str) -> bool:
        """Claim an unlocked event reward once. Returns False if not claimable."""
        event = self.active_event
        if event is None:
            return False
        reward = self._find_reward(event, reward_id)
        state: EventsState = await self.store.read(EVENTS_KEY)
        progress = state.progress_for(event.id)
        if reward is None or progress is None:
            return False
        if reward_id in progress.rewards_claimed or progress.puzzles_completed < reward.requirement:
            return False
        updated = replace(progress, rewards_claimed=progress.rewards_claimed + [reward_id])
        await self.store.write(EVENTS_KEY, _with_progress(state, updated))
        if reward.amount:
            self.sink.grant(reward.kind, reward.amount, reason=f"event reward: {reward_id}")
        return True

    @staticmethod
    def _find_reward(event: ThemedEvent, reward_id: str) -> EventReward | None:
        for reward in event.rewards:
            if reward.id == reward_id:
                return reward
        return None
