"""Snapshot differ.

Compares the held snapshot with a fresh unit listing in a single pass over
the listing plus a single pass over the previous keys.
"""

from __future__ import annotations

from collections.abc import Iterable

from unitwatch.models.units import Snapshot, Transition, TransitionKind, UnitRecord


def diff(previous: Snapshot, current: Iterable[UnitRecord]) -> tuple[Snapshot, list[Transition]]:
    """Compute the next snapshot and the transitions leading to it.

    ``previous`` is not modified. Transitions for added and changed units
    follow the listing order; removals follow, sorted by unit path.

    A unit listed twice is classified against ``previous`` each time and the
    last occurrence is kept in the next snapshot.
    """
    next_snapshot: Snapshot = {}
    transitions: list[Transition] = []

    for unit in current:
        known = previous.get(unit.key)
        if known is None:
            transitions.append(Transition(TransitionKind.ADDED, unit))
        elif known != unit:
            transitions.append(Transition(TransitionKind.CHANGED, unit))
        next_snapshot[unit.key] = unit

    for key in sorted(previous.keys() - next_snapshot.keys()):
        transitions.append(Transition(TransitionKind.REMOVED, previous[key]))

    return next_snapshot, transitions
