from typing import Protocol

from poetnotes.domain.geometry import AnchorGeometry, Rect


class GeometryProvider(Protocol):
    """Protocol for the presentation layer's rectangle measurements.

    Every method returns None while the element is not rendered yet.
    """

    def note_rect(self, note_id: str) -> Rect | None:
        """Get the current bounding rectangle of a note."""
        ...

    def anchor_geometry(self, anchor_id: str) -> AnchorGeometry | None:
        """Get the bounding rectangles of a text anchor and its line."""
        ...

    def canvas_rect(self) -> Rect | None:
        """Get the notes canvas viewport rectangle."""
        ...
