"""The unit watch loop.

Each cycle lists units, diffs the listing against the held snapshot,
persists the result when anything changed and hands the transitions to the
caller. Cycles never overlap: the listing call is awaited to completion
before the diff runs, and the next cycle does not start until the consumer
asks for the next batch.

State machine::

    UNINITIALIZED --load, no state file--> BOOTSTRAPPING --first poll--> STEADY
    UNINITIALIZED --load, state file present---------------------------> STEADY
    any state --load, listing or store failure--> FAILED (terminal)
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from unitwatch.errors import ListingError, StateError, WatcherFailedError
from unitwatch.models.units import Snapshot, Transition, TransitionKind, UnitRecord
from unitwatch.watcher.differ import diff

if TYPE_CHECKING:
    import structlog

    from unitwatch.state.store import StateStore
    from unitwatch.systemd.connection import UnitConnection

DEFAULT_INTERVAL = 0.5

_TRANSITION_EVENTS = {
    TransitionKind.ADDED: "unit_added",
    TransitionKind.CHANGED: "unit_changed",
    TransitionKind.REMOVED: "unit_removed",
}


class WatcherState(StrEnum):
    """Lifecycle of a Watcher."""

    UNINITIALIZED = "uninitialized"
    BOOTSTRAPPING = "bootstrapping"
    STEADY = "steady"
    FAILED = "failed"


class Watcher:
    """Watches units through *connection* and persists what it saw in *store*.

    The watcher owns its snapshot exclusively; :attr:`snapshot` is a
    read-only view. Once FAILED it cannot be resumed; build a new Watcher,
    which reloads the state file.

    Args:
        connection: Source of unit listings.
        store:      Where the snapshot is persisted between runs.
        interval:   Seconds to sleep between cycles of :meth:`stream`.
        log:        structlog logger; None disables logging.
    """

    def __init__(
        self,
        connection: UnitConnection,
        store: StateStore,
        interval: float = DEFAULT_INTERVAL,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if interval < 0:
            raise ValueError(f"interval must not be negative, got {interval}")
        self._connection = connection
        self._store = store
        self._interval = interval
        self._log = log
        self._snapshot: Snapshot = {}
        self._state = WatcherState.UNINITIALIZED

    @classmethod
    def open(
        cls,
        connection: UnitConnection,
        store: StateStore,
        interval: float = DEFAULT_INTERVAL,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> Watcher:
        """Build a watcher and load its state file immediately.

        Raises the StateStore errors, so a corrupt state file is reported
        before the first poll.
        """
        watcher = cls(connection, store, interval=interval, log=log)
        watcher.load()
        return watcher

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def snapshot(self) -> Mapping[str, UnitRecord]:
        """Read-only view of the units the watcher currently knows about."""
        return MappingProxyType(self._snapshot)

    def load(self) -> None:
        """Load the persisted snapshot; only valid before the first poll."""
        if self._state is not WatcherState.UNINITIALIZED:
            raise RuntimeError(f"cannot load state in {self._state} state")
        try:
            snapshot, bootstrap = self._store.load()
        except StateError:
            self._state = WatcherState.FAILED
            raise

        self._snapshot = snapshot
        if bootstrap:
            self._state = WatcherState.BOOTSTRAPPING
            self._emit("bootstrap_enabled", state_file=str(self._store.path))
        else:
            self._state = WatcherState.STEADY
            self._emit("state_loaded", state_file=str(self._store.path), units=len(snapshot))

    async def poll(self) -> list[Transition]:
        """Run one fetch, diff, persist cycle and return its transitions.

        The first cycle after a bootstrap load records what it finds but
        returns an empty batch.

        Raises:
            ListingError:       the unit listing failed.
            StateWriteError:    the snapshot could not be persisted.
            WatcherFailedError: a previous cycle already failed.
        """
        if self._state is WatcherState.FAILED:
            raise WatcherFailedError("watcher failed earlier; create a new one to resume")
        if self._state is WatcherState.UNINITIALIZED:
            self.load()

        try:
            return await self._cycle()
        except Exception:
            self._state = WatcherState.FAILED
            raise

    async def stream(self, stop: asyncio.Event | None = None) -> AsyncIterator[list[Transition]]:
        """Yield one transition batch per cycle until *stop* is set.

        Waits ``interval`` seconds after each batch is consumed; setting
        *stop* cuts the wait short and ends the stream without starting
        another cycle. Any failure ends the stream by raising from the
        ``async for``.
        """
        if stop is None:
            stop = asyncio.Event()
        while not stop.is_set():
            yield await self.poll()
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(stop.wait(), timeout=self._interval)

    def close(self) -> None:
        """Release the service manager connection."""
        self._connection.close()

    async def _cycle(self) -> list[Transition]:
        try:
            units = await asyncio.to_thread(self._connection.list_units)
        except Exception as exc:
            self._emit("listing_failed", level="error", error=str(exc))
            raise ListingError(f"listing units failed: {exc}") from exc

        self._snapshot, transitions = diff(self._snapshot, units)

        if transitions:
            self._store.store(self._snapshot)
            self._emit("state_stored", units=len(self._snapshot), transitions=len(transitions))

        if self._state is WatcherState.BOOTSTRAPPING:
            self._state = WatcherState.STEADY
            self._emit("bootstrap_complete", units=len(self._snapshot))
            return []

        for transition in transitions:
            unit = transition.unit
            if transition.kind is TransitionKind.REMOVED:
                self._emit("unit_removed", unit=unit.name)
            else:
                self._emit(
                    _TRANSITION_EVENTS[transition.kind],
                    unit=unit.name,
                    active=unit.active_state,
                    load=unit.load_state,
                    sub=unit.sub_state,
                )
        return transitions

    def _emit(self, event: str, level: str = "info", **fields: Any) -> None:
        if self._log is not None:
            getattr(self._log, level)(event, **fields)
