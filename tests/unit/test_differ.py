"""Tests for the snapshot differ.

Covers: classification of added/changed/removed units, ordering of the
returned transitions, immutability of the previous snapshot, and the
counting property over arbitrary snapshots (hypothesis).
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from tests.conftest import make_failed_unit, make_unit
from unitwatch.models.units import Transition, TransitionKind, UnitRecord
from unitwatch.watcher.differ import diff

# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassification:
    def test_new_unit_is_added(self) -> None:
        unit = make_unit("sshd.service")
        next_snapshot, transitions = diff({}, [unit])

        assert transitions == [Transition(TransitionKind.ADDED, unit)]
        assert next_snapshot == {unit.key: unit}

    def test_identical_unit_produces_no_transition(self) -> None:
        unit = make_unit("sshd.service")
        next_snapshot, transitions = diff({unit.key: unit}, [make_unit("sshd.service")])

        assert transitions == []
        assert next_snapshot == {unit.key: unit}

    def test_status_change_is_changed_with_new_record(self) -> None:
        before = make_unit("sshd.service")
        after = make_failed_unit("sshd.service")
        next_snapshot, transitions = diff({before.key: before}, [after])

        assert transitions == [Transition(TransitionKind.CHANGED, after)]
        assert next_snapshot[after.key] is after

    def test_any_field_difference_counts_as_change(self) -> None:
        """A job id flip with identical states is still a change."""
        before = make_unit("sshd.service")
        after = make_unit("sshd.service", job_id=42)
        _, transitions = diff({before.key: before}, [after])

        assert [t.kind for t in transitions] == [TransitionKind.CHANGED]

    def test_missing_unit_is_removed_with_last_known_record(self) -> None:
        gone = make_unit("cups.service")
        next_snapshot, transitions = diff({gone.key: gone}, [])

        assert transitions == [Transition(TransitionKind.REMOVED, gone)]
        assert next_snapshot == {}

    def test_empty_listing_removes_everything(self) -> None:
        units = [make_unit(f"u{i}.service") for i in range(3)]
        previous = {u.key: u for u in units}
        next_snapshot, transitions = diff(previous, [])

        assert next_snapshot == {}
        assert len(transitions) == 3
        assert all(t.kind is TransitionKind.REMOVED for t in transitions)

    def test_previous_snapshot_is_not_modified(self) -> None:
        a = make_unit("a.service")
        previous = {a.key: a}
        diff(previous, [make_unit("b.service")])

        assert previous == {a.key: a}

    def test_duplicate_listing_keeps_last_occurrence(self) -> None:
        first = make_unit("a.service")
        second = make_failed_unit("a.service")
        next_snapshot, transitions = diff({}, [first, second])

        assert next_snapshot == {second.key: second}
        assert all(t.kind is TransitionKind.ADDED for t in transitions)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_additions_and_changes_follow_listing_order_then_removals(self) -> None:
        a = make_unit("a.service")
        b = make_unit("b.service")
        c = make_unit("c.service")
        z = make_unit("z.service")
        previous = {b.key: b, z.key: z, a.key: a}

        b_failed = make_failed_unit("b.service")
        _, transitions = diff(previous, [c, b_failed])

        assert transitions == [
            Transition(TransitionKind.ADDED, c),
            Transition(TransitionKind.CHANGED, b_failed),
            Transition(TransitionKind.REMOVED, a),
            Transition(TransitionKind.REMOVED, z),
        ]

    def test_removals_sorted_by_path(self) -> None:
        units = [make_unit(name) for name in ("d.service", "b.service", "c.service", "a.service")]
        _, transitions = diff({u.key: u for u in units}, [])

        paths = [t.unit.path for t in transitions]
        assert paths == sorted(paths)


# ---------------------------------------------------------------------------
# Scenario: two consecutive polls
# ---------------------------------------------------------------------------


def test_add_then_change_and_remove_scenario() -> None:
    a = make_unit("a.service")
    b = make_unit("b.service")

    snapshot, transitions = diff({a.key: a}, [a, b])
    assert transitions == [Transition(TransitionKind.ADDED, b)]
    assert snapshot == {a.key: a, b.key: b}

    b_failed = make_failed_unit("b.service")
    snapshot, transitions = diff(snapshot, [b_failed])
    assert transitions == [
        Transition(TransitionKind.CHANGED, b_failed),
        Transition(TransitionKind.REMOVED, a),
    ]
    assert snapshot == {b.key: b_failed}


# ---------------------------------------------------------------------------
# Counting property
# ---------------------------------------------------------------------------

_states = st.sampled_from(["active", "inactive", "failed", "activating"])
_units = st.builds(
    make_unit,
    name=st.sampled_from([f"unit{i}.service" for i in range(12)]),
    active_state=_states,
    sub_state=st.sampled_from(["running", "dead", "exited", "failed"]),
)


def _keyed(units: list[UnitRecord]) -> dict[str, UnitRecord]:
    return {u.key: u for u in units}


@given(previous=st.lists(_units).map(_keyed), current=st.lists(_units).map(_keyed))
def test_transition_counts_match_set_differences(
    previous: dict[str, UnitRecord], current: dict[str, UnitRecord]
) -> None:
    next_snapshot, transitions = diff(previous, list(current.values()))

    added = current.keys() - previous.keys()
    removed = previous.keys() - current.keys()
    changed = {k for k in previous.keys() & current.keys() if previous[k] != current[k]}

    by_kind = {kind: {t.unit.key for t in transitions if t.kind is kind} for kind in TransitionKind}
    assert by_kind[TransitionKind.ADDED] == added
    assert by_kind[TransitionKind.REMOVED] == removed
    assert by_kind[TransitionKind.CHANGED] == changed
    assert len(transitions) == len(added) + len(removed) + len(changed)
    assert next_snapshot == current
