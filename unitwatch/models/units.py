"""Unit status data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TransitionKind(StrEnum):
    """How a unit changed between two polls."""

    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class UnitRecord:
    """One row of systemd's ListUnits reply.

    Immutable: records are replaced wholesale on every poll, never patched.
    """

    name: str
    description: str
    load_state: str  # loaded, not-found, masked, ...
    active_state: str  # active, inactive, activating, deactivating, failed
    sub_state: str  # running, exited, dead, start-pre, ...
    followed: str
    path: str  # D-Bus object path, stable across restarts
    job_id: int = 0
    job_type: str = ""
    job_path: str = "/"

    @property
    def key(self) -> str:
        """Return the snapshot key for this unit."""
        return self.path

    def status(self) -> str:
        return f"active={self.active_state} load={self.load_state} sub={self.sub_state}"


# unit path -> last observed record
Snapshot = dict[str, UnitRecord]


@dataclass(frozen=True)
class Transition:
    """A unit that appeared, changed, or disappeared since the last poll.

    For REMOVED transitions ``unit`` is the last record seen before removal.
    """

    kind: TransitionKind
    unit: UnitRecord

    def render(self) -> str:
        """Render a one-line, human-readable description."""
        return f"{self.unit.name} {self.kind.value}: {self.unit.status()}"
