"""Request bodies accepted by the HTTP API."""

from poetnotes.domain.base import DomainModel
from poetnotes.domain.geometry import AnchorGeometry, Rect
from poetnotes.domain.note import NotePosition


class TitleRequest(DomainModel):
    title: str


class ContentRequest(DomainModel):
    content: str


class SelectionRequest(DomainModel):
    """A text selection to commit, with the rectangles measured by the client."""

    start: int
    end: int
    note_id: str | None = None
    anchor_rect: Rect | None = None
    canvas_rect: Rect | None = None


class NoteCreateRequest(DomainModel):
    content: str = ""
    position: NotePosition | None = None


class LinkRequest(DomainModel):
    from_id: str
    to_id: str


class GeometryRequest(DomainModel):
    """Rectangles measured by the presentation layer, keyed by element id."""

    note_rects: dict[str, Rect] = {}
    anchors: dict[str, AnchorGeometry] = {}
    canvas: Rect | None = None
