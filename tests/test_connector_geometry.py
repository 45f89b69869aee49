"""Tests for connector segments, colors and the connector layout."""

import pytest

from poetnotes.connectors.colors import propagate_colors
from poetnotes.connectors.compute import compute_connectors, resolve_note_rect
from poetnotes.connectors.geometry import (
    anchor_segment,
    fallback_anchor_segment,
    intersect,
    note_segment,
)
from poetnotes.domain.connection import Connection
from poetnotes.domain.geometry import AnchorGeometry, Point, Rect
from poetnotes.domain.project import Project
from tests.fakes import FakeGeometryProvider, make_note

BOX = Rect(x=100, y=0, width=100, height=100)


@pytest.mark.parametrize(
    "origin, expected",
    [
        (Point(x=0, y=50), Point(x=100, y=50)),
        (Point(x=400, y=50), Point(x=200, y=50)),
        (Point(x=150, y=-100), Point(x=150, y=0)),
        (Point(x=150, y=300), Point(x=150, y=100)),
        (Point(x=0, y=0), Point(x=100, y=100 / 3)),
    ],
)
def test_intersect_hits_facing_edge(origin: Point, expected: Point) -> None:
    point = intersect(origin, BOX)
    assert point.x == pytest.approx(expected.x)
    assert point.y == pytest.approx(expected.y)


def test_intersect_degenerate_cases_return_center() -> None:
    assert intersect(Point(x=150, y=50), BOX) == Point(x=150, y=50)
    flat = Rect(x=0, y=0, width=100, height=0)
    assert intersect(Point(x=-50, y=0), flat) == Point(x=50, y=0)


def test_anchor_segment_leaves_line_on_note_side() -> None:
    anchor = AnchorGeometry(
        rect=Rect(x=100, y=40, width=50, height=20),
        line_rect=Rect(x=20, y=40, width=400, height=20),
    )

    start, end = anchor_segment(anchor, Rect(x=600, y=0, width=200, height=100))
    assert start == Point(x=420, y=50)
    assert end == Point(x=600, y=50)

    start, end = anchor_segment(anchor, Rect(x=-300, y=0, width=200, height=100))
    assert start == Point(x=20, y=50)
    assert end == Point(x=-100, y=50)


def test_anchor_segment_without_line_uses_anchor_rect() -> None:
    anchor = AnchorGeometry(rect=Rect(x=100, y=40, width=50, height=20))
    start, _ = anchor_segment(anchor, Rect(x=600, y=0, width=200, height=100))
    assert start == Point(x=150, y=50)


def test_fallback_anchor_segment_is_horizontal() -> None:
    start, end = fallback_anchor_segment(Rect(x=300, y=200, width=220, height=100))
    assert (start, end) == (Point(x=0, y=250), Point(x=300, y=250))


def test_note_segment_joins_facing_borders() -> None:
    start, end = note_segment(
        Rect(x=0, y=0, width=100, height=100), Rect(x=300, y=0, width=100, height=100)
    )
    assert (start, end) == (Point(x=100, y=50), Point(x=300, y=50))


def test_resolve_note_rect_falls_back_to_position(fake_geometry: FakeGeometryProvider) -> None:
    note = make_note("n1", width=260)
    assert resolve_note_rect(note, fake_geometry) == Rect(x=0, y=0, width=260, height=100)

    measured = Rect(x=5, y=5, width=10, height=10)
    fake_geometry.note_rects["n1"] = measured
    assert resolve_note_rect(note, fake_geometry) == measured


def test_propagate_colors_from_anchor_then_connections() -> None:
    notes = [make_note("n1", text_references=["h1"]), make_note("n2"), make_note("n3")]
    connections = [
        Connection(id="c1", from_note_id="n2", to_note_id="n1"),
        Connection(id="c2", from_note_id="n2", to_note_id="n3"),
    ]

    colors = propagate_colors(notes, connections, {"h1": "#e94560"})

    assert colors == {"n1": "#e94560", "n2": "#e94560", "n3": "#e94560"}


def test_propagate_colors_is_a_single_pass() -> None:
    notes = [make_note("n1", text_references=["h1"]), make_note("n2"), make_note("n3")]
    connections = [
        Connection(id="c1", from_note_id="n2", to_note_id="n3"),
        Connection(id="c2", from_note_id="n1", to_note_id="n2"),
        Connection(id="c3", from_note_id="n1", to_note_id="ghost"),
    ]

    colors = propagate_colors(notes, connections, {"h1": "#e94560"})

    assert colors == {"n1": "#e94560", "n2": "#e94560"}


def test_propagate_colors_uses_first_colored_reference() -> None:
    notes = [make_note("n1", text_references=["plain", "h2", "h1"])]
    colors = propagate_colors(notes, [], {"h1": "#111111", "h2": "#222222"})
    assert colors == {"n1": "#222222"}


def test_compute_connectors_for_unmeasured_project(
    sample_project: Project, fake_geometry: FakeGeometryProvider
) -> None:
    layout = compute_connectors(sample_project, fake_geometry)

    assert [c.id for c in layout.connectors] == [
        "c1",
        "text-fallback-n1-h1",
        "text-fallback-n2-h2",
    ]
    note_line, first_text, second_text = layout.connectors
    assert note_line.kind == "note-to-note"
    assert note_line.color == "#e94560"
    assert first_text.fallback and first_text.color == "#e94560"
    assert second_text.color is None
    assert layout.note_colors == {"n1": "#e94560", "n3": "#e94560"}


def test_compute_connectors_uses_measured_anchor(
    sample_project: Project, fake_geometry: FakeGeometryProvider
) -> None:
    fake_geometry.anchors["h1"] = AnchorGeometry(rect=Rect(x=-400, y=20, width=50, height=20))

    layout = compute_connectors(sample_project, fake_geometry)
    text_line = next(c for c in layout.connectors if c.source_id == "h1")

    assert text_line.id == "text-n1-h1"
    assert not text_line.fallback
    assert text_line.start == Point(x=-350, y=30)
    assert text_line.target_id == "n1"


def test_compute_connectors_skips_dangling_connections(
    sample_project: Project, fake_geometry: FakeGeometryProvider
) -> None:
    dangling = sample_project.model_copy(
        update={"connections": [Connection(id="c9", from_note_id="n1", to_note_id="ghost")]}
    )
    layout = compute_connectors(dangling, fake_geometry)
    assert all(c.kind == "note-to-text" for c in layout.connectors)


def test_compute_connectors_is_deterministic(
    sample_project: Project, fake_geometry: FakeGeometryProvider
) -> None:
    assert compute_connectors(sample_project, fake_geometry) == compute_connectors(
        sample_project, fake_geometry
    )
