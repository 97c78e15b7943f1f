"""App lifecycle signal telling the engine when the app leaves the foreground."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

import pygame

logger = logging.getLogger(__name__)


class AppState(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKGROUND = "background"

    @property
    def is_suspending(self) -> bool:
        return self is not AppState.ACTIVE


# pygame window/app events -> lifecycle state
_EVENT_STATES: dict[int, AppState] = {
    pygame.APP_WILLENTERBACKGROUND: AppState.BACKGROUND,
    pygame.APP_DIDENTERBACKGROUND: AppState.BACKGROUND,
    pygame.APP_TERMINATING: AppState.BACKGROUND,
    pygame.QUIT: AppState.BACKGROUND,
    pygame.WINDOWFOCUSLOST: AppState.INACTIVE,
    pygame.WINDOWMINIMIZED: AppState.INACTIVE,
    pygame.APP_WILLENTERFOREGROUND: AppState.ACTIVE,
    pygame.APP_DIDENTERFOREGROUND: AppState.ACTIVE,
    pygame.WINDOWFOCUSGAINED: AppState.ACTIVE,
    pygame.WINDOWRESTORED: AppState.ACTIVE,
}

Listener = Callable[[AppState], None]


class AppLifecycle:
    """Observable app state. Listeners hear about changes only."""

    def __init__(self, initial: AppState = AppState.ACTIVE) -> None:
        self._state = initial
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, state: AppState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as exc:
                logger.warning("Lifecycle listener %r failed: %s", listener, exc)

    def feed_event(self, event: pygame.event.Event) -> None:
        """Call from the game loop for each pygame event."""
        state = _EVENT_STATES.get(event.type)
        if state is not None:
            self.emit(state)
