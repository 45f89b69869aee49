from poetnotes.connectors.base import GeometryProvider
from poetnotes.domain.geometry import AnchorGeometry, Rect


class MeasuredGeometryProvider(GeometryProvider):
    """Geometry provider holding the latest rectangles measured by the client.

    The presentation layer posts new measurements whenever it renders; the
    connector refresher picks them up on its next poll.
    """

    def __init__(
        self,
        note_rects: dict[str, Rect] | None = None,
        anchors: dict[str, AnchorGeometry] | None = None,
        canvas: Rect | None = None,
    ) -> None:
        self._note_rects = note_rects or {}
        self._anchors = anchors or {}
        self._canvas = canvas

    def update(
        self,
        note_rects: dict[str, Rect],
        anchors: dict[str, AnchorGeometry],
        canvas: Rect | None = None,
    ) -> None:
        """Replace every measurement; elements left out count as unrendered."""
        self._note_rects = dict(note_rects)
        self._anchors = dict(anchors)
        self._canvas = canvas

    def note_rect(self, note_id: str) -> Rect | None:
        return self._note_rects.get(note_id)

    def anchor_geometry(self, anchor_id: str) -> AnchorGeometry | None:
        return self._anchors.get(anchor_id)

    def canvas_rect(self) -> Rect | None:
        return self._canvas
