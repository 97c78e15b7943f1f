"""Top-level wiring: storage, lifecycle, clock and the mode controllers."""

from __future__ import annotations

import logging
from pathlib import Path

import pygame

from melodyx.clock import Clock, LocalClock
from melodyx.economy import RewardLedger
from melodyx.lifecycle import AppLifecycle, AppState
from melodyx.modes import DailyMode, EcoMode, EventsMode, TournamentMode, WellnessMode
from melodyx.session import SessionConfig
from melodyx.settings import EngineSettings
from melodyx.storage import MemoryBackend, StorageBackend
from melodyx.store import ProgressStore

logger = logging.getLogger(__name__)


class App:
    def __init__(
        self,
        settings: EngineSettings | None = None,
        backend: StorageBackend | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.clock = clock or LocalClock()
        self.lifecycle = AppLifecycle()
        self.ledger = RewardLedger()

        # Persistence degrades to memory so play never blocks on storage
        self.store = ProgressStore(backend or self._try_sqlite(Path(self.settings.db_path)))
        self._unbind = self.store.bind_lifecycle(self.lifecycle)

        cfg = self.settings.max_guesses_for
        self.daily = DailyMode(self.store, self.clock, SessionConfig(max_guesses=cfg("daily")))
        self.eco = EcoMode(self.store, self.ledger, SessionConfig(max_guesses=cfg("eco")))
        self.events = EventsMode(self.store, self.clock, self.ledger,
                                 SessionConfig(max_guesses=cfg("events")))
        self.tournament = TournamentMode(self.store, self.clock, self.ledger)
        self.wellness = WellnessMode(self.store, self.clock, SessionConfig(max_guesses=cfg("wellness")))

    def feed_event(self, event: pygame.event.Event) -> None:
        """Call from a pygame loop for each event."""
        self.lifecycle.feed_event(event)

    async def shutdown(self) -> None:
        await self.store.flush()
        if self.settings.flush_on_exit:
            self.lifecycle.emit(AppState.BACKGROUND)
        self._unbind()

    @staticmethod
    def _try_sqlite(db_path: Path) -> StorageBackend:
        try:
            from melodyx.storage import SQLiteBackend
            return SQLiteBackend(db_path)
        except Exception as exc:
            logger.warning("Progress database unavailable (%s), progress will not be saved", exc)
            return MemoryBackend()
