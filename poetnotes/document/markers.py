"""Parsing of anchor markers embedded in the poem markup.

An anchor marker is an element carrying ``data-highlight-id``. When several
highlights cover the same span their ids are comma-joined in one attribute,
e.g. ``data-highlight-id="highlight-a,highlight-b"``.
"""

import re

from pydantic import BaseModel

HIGHLIGHT_CLASS = "poet-highlight"

ANCHOR_TAG_PATTERN = re.compile(r"<[^>]*\bdata-highlight-id=\"([^\"]*)\"[^>]*>")
ANCHOR_ID_ATTR_PATTERN = re.compile(r"\bdata-highlight-id=\"([^\"]*)\"")
ANCHOR_COLOR_ATTR_PATTERN = re.compile(r"\bdata-highlight-color=\"([^\"]*)\"")


class AnchorMarker(BaseModel):
    """One marker element found in the content."""

    ids: list[str]
    color: str | None = None


def split_anchor_ids(value: str) -> list[str]:
    """Split a comma-joined marker attribute into anchor ids."""
    return [part.strip() for part in value.split(",") if part.strip()]


def join_anchor_ids(anchor_ids: list[str]) -> str:
    return ",".join(anchor_ids)


def parse_anchor_markers(content: str) -> list[AnchorMarker]:
    """Extract every anchor marker in document order."""
    markers = []
    for match in ANCHOR_TAG_PATTERN.finditer(content):
        ids = split_anchor_ids(match.group(1))
        if not ids:
            continue
        color_match = ANCHOR_COLOR_ATTR_PATTERN.search(match.group(0))
        markers.append(AnchorMarker(ids=ids, color=color_match.group(1) if color_match else None))
    return markers


def live_anchor_ids(content: str) -> set[str]:
    """All anchor ids present in any marker of the content."""
    return {anchor_id for marker in parse_anchor_markers(content) for anchor_id in marker.ids}


def contains_anchor(content: str, anchor_id: str) -> bool:
    return anchor_id in live_anchor_ids(content)


def anchor_colors(content: str) -> dict[str, str]:
    """Map each anchor id to the first color stored on a marker carrying it."""
    colors: dict[str, str] = {}
    for marker in parse_anchor_markers(content):
        if not marker.color:
            continue
        for anchor_id in marker.ids:
            colors.setdefault(anchor_id, marker.color)
    return colors
