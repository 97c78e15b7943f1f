"""Local-first progress store: cache-first reads, optimistic writes, forced flush."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from melodyx.storage import StorageBackend

if TYPE_CHECKING:
    from melodyx.lifecycle import AppLifecycle, AppState

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class RecordSpec(Generic[T]):
    """How one storage key is defaulted and converted to and from JSON."""

    key: str
    default: Callable[[], T]
    encode: Callable[[T], Any] = _identity
    decode: Callable[[Any], T] = _identity

    @classmethod
    def for_record(cls, key: str, record_type: type) -> RecordSpec:
        """Spec for a dataclass exposing ``to_dict`` / ``from_dict``."""
        return cls(
            key=key,
            default=record_type,
            encode=lambda value: value.to_dict(),
            decode=record_type.from_dict,
        )


@dataclass
class StoredState(Generic[T]):
    """Cache entry for one key.

    ``value`` is authoritative for readers. ``latest_raw`` is the last
    serialized value handed to the backend; while ``pending`` is set it has
    not been confirmed durable and must survive a forced flush.
    """

    value: T
    latest_raw: str | None = None
    pending: bool = False
    generation: int = 0
    _lock: asyncio.Lock | None = field(default=None, repr=False)
    _lock_loop: asyncio.AbstractEventLoop | None = field(default=None, repr=False)

    @property
    def lock(self) -> asyncio.Lock:
        """Per-key write lock, remade whenever the running event loop changes."""
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock


class ProgressStore:
    """Generic local-first key/value store for Progress Records.

    Reads are served from memory after the first load of a key. Writes
    update memory immediately and reach the backend afterwards, one at a
    time per key; a write that has been superseded before its turn is
    skipped. Storage failures are logged and never raised to callers.
    """

    def __init__(self, backend: StorageBackend, specs: Iterable[RecordSpec] = ()) -> None:
        self._backend = backend
        self._specs: dict[str, RecordSpec] = {}
        self._states: dict[str, StoredState] = {}
        self._tasks: set[asyncio.Task] = set()
        for spec in specs:
            self.register(spec)

    def register(self, spec: RecordSpec) -> None:
        self._specs[spec.key] = spec

    def is_registered(self, key: str) -> bool:
        return key in self._specs

    def _spec(self, key: str) -> RecordSpec:
        try:
            return self._specs[key]
        except KeyError:
            raise KeyError(f"No record spec registered for {key!r}") from None

    # -- reads ---------------------------------------------------------------

    async def read(self, key: str) -> Any:
        """Return the value for ``key``, or its default if nothing is stored."""
        spec = self._spec(key)
        if (state := self._states.get(key)) is not None:
            return copy.deepcopy(state.value)

        try:
            raw = await self._backend.get_item(key)
        except Exception as exc:
            logger.warning("Failed to load %s, using default: %s", key, exc)
            return spec.default()

        # A write may have landed in the cache while the load was in flight
        if (state := self._states.get(key)) is not None:
            return copy.deepcopy(state.value)

        value = spec.default() if raw is None else self._decode(spec, raw)
        self._states[key] = StoredState(value=value)
        return copy.deepcopy(value)

    def cached(self, key: str) -> Any | None:
        """Return the cached value without touching the backend."""
        state = self._states.get(key)
        return None if state is None else copy.deepcopy(state.value)

    def _decode(self, spec: RecordSpec, raw: str) -> Any:
        try:
            return spec.decode(json.loads(raw))
        except Exception as exc:
            logger.warning("Discarding unreadable record %s: %s", spec.key, exc)
            return spec.default()

    # -- writes --------------------------------------------------------------

    async def write(self, key: str, value: Any) -> bool:
        """Cache ``value`` and persist it.

        Returns False if the durable write failed. The cache keeps the new
        value either way, and the write stays pending for the next flush.
        """
        state, generation = self._stage(key, value)
        async with state.lock:
            if generation != state.generation:
                # A newer write for this key is queued behind us
                return True
            raw = state.latest_raw
            try:
                await self._backend.set_item(key, raw)
            except Exception as exc:
                logger.error("Failed to persist %s: %s", key, exc)
                return False
            # Still pending if a newer value was staged, or forced out, meanwhile
            state.pending = generation != state.generation
        return True

    def submit(self, key: str, value: Any) -> asyncio.Task:
        """Fire-and-forget ``write``. Must be called with a running event loop."""
        self._spec(key)
        task = asyncio.get_running_loop().create_task(self.write(key, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def update(self, key: str, updater: Callable[[Any], Any]) -> Any:
        """Read, transform and write back a record. Returns the new value."""
        new_value = updater(await self.read(key))
        await self.write(key, new_value)
        return new_value

    async def remove(self, key: str) -> None:
        spec = self._spec(key)
        state = self._states.get(key)
        if state is None:
            state = self._states[key] = StoredState(value=spec.default())
        state.value = spec.default()
        state.latest_raw = None
        state.pending = False
        state.generation += 1
        async with state.lock:
            try:
                await self._backend.remove_item(key)
            except Exception as exc:
                logger.error("Failed to remove %s: %s", key, exc)

    def _stage(self, key: str, value: Any) -> tuple[StoredState, int]:
        spec = self._spec(key)
        raw = json.dumps(spec.encode(value))
        state = self._states.get(key)
        if state is None:
            state = self._states[key] = StoredState(value=value)
        state.value = copy.deepcopy(value)
        state.latest_raw = raw
        state.pending = True
        state.generation += 1
        return state, state.generation

    # -- durability ----------------------------------------------------------

    def pending_keys(self) -> list[str]:
        return [key for key, state in self._states.items() if state.pending]

    async def flush(self) -> None:
        """Wait for in-flight writes, then persist anything still pending."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        for key in self.pending_keys():
            state = self._states[key]
            async with state.lock:
                if not state.pending:
                    continue
                generation = state.generation
                try:
                    await self._backend.set_item(key, state.latest_raw)
                except Exception as exc:
                    logger.error("Failed to flush %s: %s", key, exc)
                    continue
                state.pending = generation != state.generation

    def force_flush(self) -> int:
        """Synchronously persist the latest pending value of every key.

        Used when the app is being suspended. Failures are logged only.
        Returns the number of keys written.
        """
        written = 0
        for key in self.pending_keys():
            state = self._states[key]
            try:
                self._backend.set_item_blocking(key, state.latest_raw)
            except Exception as exc:
                logger.error("Forced flush of %s failed: %s", key, exc)
                continue
            state.pending = False
            written += 1
        return written

    def bind_lifecycle(self, lifecycle: AppLifecycle) -> Callable[[], None]:
        """Force-flush whenever ``lifecycle`` reports the app leaving the foreground.

        Returns a callable that removes the subscription.
        """
        return lifecycle.subscribe(self._on_app_state)

    def _on_app_state(self, app_state: AppState) -> None:
        if not app_state.is_suspending:
            return
        pending = self.pending_keys()
        if pending:
            logger.info("App %s, force saving %s", app_state.value, ", ".join(pending))
            self.force_flush()
