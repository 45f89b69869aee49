"""Geometry value types shared by layout and connectors."""

from poetnotes.domain.base import DomainModel


class Point(DomainModel):
    x: float
    y: float


class Rect(DomainModel):
    """Axis-aligned rectangle in canvas coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def overlaps(self, other: "Rect") -> bool:
        """Strict overlap on both axes; touching edges do not collide."""
        return (
            self.x < other.right
            and self.right > other.x
            and self.y < other.bottom
            and self.bottom > other.y
        )


class AnchorGeometry(DomainModel):
    """Measured geometry of a text anchor.

    Attributes:
        rect: Bounding box of the anchored text
        line_rect: Bounding box of the line enclosing the anchor, if measured
    """

    rect: Rect
    line_rect: Rect | None = None
