"""Tests for the render boundary."""
from __future__ import annotations

import numpy as np

from globetrack.core.engine import PositionSample
from globetrack.core.roster import RosterDiff
from globetrack.render import EventKind, RenderBoundary, display_color


def valid(obj_id: str, x: float = 7.0e6) -> PositionSample:
    return PositionSample(id=obj_id, name=obj_id, position=np.array([x, 0.0, 0.0]), valid=True)


def invalid(obj_id: str) -> PositionSample:
    return PositionSample.invalid(obj_id, obj_id)


class TestRenderBoundary:
    def test_created_then_updated(self) -> None:
        boundary = RenderBoundary()
        events = boundary.apply_diff(RosterDiff(created=["A"], samples={"A": valid("A")}))
        assert [(e.kind, e.id) for e in events] == [(EventKind.CREATE, "A")]

        events = boundary.apply_tick([valid("A", 7.1e6)])
        assert [(e.kind, e.id) for e in events] == [(EventKind.UPDATE, "A")]
        assert events[0].position[0] == 7.1e6

    def test_invalid_sample_freezes(self) -> None:
        boundary = RenderBoundary()
        boundary.apply_diff(RosterDiff(created=["A"], samples={"A": valid("A")}))
        assert boundary.apply_tick([invalid("A")]) == []
        assert "A" in boundary.drawn

    def test_deferred_creation(self) -> None:
        boundary = RenderBoundary()
        assert boundary.apply_diff(RosterDiff(created=["A"], samples={"A": invalid("A")})) == []
        events = boundary.apply_tick([valid("A")])
        assert [(e.kind, e.id) for e in events] == [(EventKind.CREATE, "A")]

    def test_removal(self) -> None:
        boundary = RenderBoundary()
        boundary.apply_diff(RosterDiff(created=["A", "B"], samples={"A": valid("A"), "B": valid("B")}))
        events = boundary.apply_diff(RosterDiff(updated=["B"], removed=["A"], samples={"B": valid("B")}))
        assert [(e.kind, e.id) for e in events] == [(EventKind.REMOVE, "A"), (EventKind.UPDATE, "B")]
        assert events[0].position is None
        assert boundary.drawn == {"B"}

    def test_removal_of_never_drawn_is_silent(self) -> None:
        boundary = RenderBoundary()
        boundary.apply_diff(RosterDiff(created=["A"], samples={"A": invalid("A")}))
        assert boundary.apply_diff(RosterDiff(removed=["A"])) == []

    def test_fresh_boundary_only_removes_what_it_drew(self) -> None:
        boundary = RenderBoundary()
        diff = RosterDiff(
            created=["C"],
            updated=["B"],
            removed=["A"],
            samples={"B": valid("B"), "C": valid("C")},
        )
        kinds = [(e.kind, e.id) for e in boundary.apply_diff(diff)]
        assert kinds == [(EventKind.CREATE, "C"), (EventKind.CREATE, "B")]
        assert boundary.drawn == {"B", "C"}


class TestDisplayColor:
    def test_stable(self) -> None:
        assert display_color("STARLINK-1007") == display_color("STARLINK-1007")

    def test_components_in_range(self) -> None:
        for name in ("", "ISS (ZARYA)", "NOAA 18", "x" * 200):
            assert all(-1e-9 <= c <= 1.0 + 1e-9 for c in display_color(name))

    def test_empty_name_is_red(self) -> None:
        r, g, b = display_color("")
        assert abs(r - 1.0) < 1e-9
        assert abs(g - 0.2) < 1e-9
        assert abs(b - 0.2) < 1e-9
