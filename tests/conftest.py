"""Shared fixtures and factories for unitwatch tests.

FakeConnection replays scripted ListUnits replies so the watcher can be
driven cycle by cycle without a running systemd.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from unitwatch.errors import UnitConnectionError
from unitwatch.models.units import UnitRecord
from unitwatch.state.store import StateStore
from unitwatch.systemd.connection import UnitConnection

# ---------------------------------------------------------------------------
# Unit factory helpers
# ---------------------------------------------------------------------------


def make_unit(
    name: str = "nginx.service",
    active_state: str = "active",
    load_state: str = "loaded",
    sub_state: str = "running",
    path: str = "",
    description: str = "",
    job_id: int = 0,
) -> UnitRecord:
    """Create a UnitRecord with sensible defaults for testing."""
    escaped = name.replace(".", "_2e").replace("-", "_2d")
    return UnitRecord(
        name=name,
        description=description or f"{name} unit",
        load_state=load_state,
        active_state=active_state,
        sub_state=sub_state,
        followed="",
        path=path or f"/org/freedesktop/systemd1/unit/{escaped}",
        job_id=job_id,
        job_type="",
        job_path="/",
    )


def make_failed_unit(name: str = "nginx.service", **kwargs) -> UnitRecord:
    """Create a unit in the failed/loaded/failed state."""
    defaults = {"active_state": "failed", "sub_state": "failed"}
    defaults.update(kwargs)
    return make_unit(name, **defaults)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeConnection(UnitConnection):
    """Replays *replies* one per list_units call; the last reply repeats.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, *replies: Sequence[UnitRecord] | Exception) -> None:
        self._replies = list(replies) or [[]]
        self.calls = 0
        self.closed = False

    def list_units(self) -> list[UnitRecord]:
        reply = self._replies[min(self.calls, len(self._replies) - 1)]
        self.calls += 1
        if isinstance(reply, Exception):
            raise reply
        return list(reply)

    def close(self) -> None:
        self.closed = True


class CountingStore(StateStore):
    """StateStore that counts how often the snapshot is written."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path)
        self.writes = 0

    def store(self, snapshot) -> None:  # type: ignore[no-untyped-def]
        self.writes += 1
        super().store(snapshot)


def connection_down() -> UnitConnectionError:
    return UnitConnectionError("ListUnits failed: org.freedesktop.DBus.Error.NoReply")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Path to a state file that does not exist yet."""
    return tmp_path / "systemd.state"


@pytest.fixture
def store(state_path: Path) -> CountingStore:
    return CountingStore(state_path)
