from poetnotes.document.markers import (
    anchor_colors,
    contains_anchor,
    join_anchor_ids,
    live_anchor_ids,
    parse_anchor_markers,
    split_anchor_ids,
)
from tests.fakes import POEM


def test_split_anchor_ids_ignores_blanks() -> None:
    assert split_anchor_ids("a, b,,c ") == ["a", "b", "c"]
    assert split_anchor_ids("") == []
    assert join_anchor_ids(["a", "b"]) == "a,b"


def test_parse_anchor_markers_in_document_order() -> None:
    markers = parse_anchor_markers(POEM)

    assert [marker.ids for marker in markers] == [["h1"], ["h2"]]
    assert markers[0].color == "#e94560"
    assert markers[1].color is None


def test_live_anchor_ids_include_comma_joined_ids() -> None:
    content = (
        '<p><span class="poet-highlight" data-highlight-id="a,b">x</span>'
        '<span data-highlight-id="">y</span></p>'
    )
    assert live_anchor_ids(content) == {"a", "b"}
    assert contains_anchor(content, "b")
    assert not contains_anchor(content, "c")


def test_anchor_colors_keeps_first_color_per_id() -> None:
    content = (
        '<span data-highlight-id="a" data-highlight-color="#111111">x</span>'
        '<span data-highlight-id="a,b" data-highlight-color="#222222">y</span>'
        '<span data-highlight-id="c">z</span>'
    )
    assert anchor_colors(content) == {"a": "#111111", "b": "#222222"}
