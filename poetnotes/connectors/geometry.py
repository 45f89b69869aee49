"""Line segments between text anchors and notes, and between notes."""

from poetnotes.domain.geometry import AnchorGeometry, Point, Rect


def intersect(origin: Point, rect: Rect) -> Point:
    """Find where the ray from ``origin`` towards the rect center crosses its border.

    The edge is chosen by comparing the vertical and horizontal distances to
    the center, each relative to the rect's size: the dominant axis decides
    between the top/bottom and the left/right edge. An origin lying on the
    center, or a rect without area, returns the center.
    """
    center = rect.center
    dx = center.x - origin.x
    dy = center.y - origin.y
    if (dx == 0 and dy == 0) or rect.width <= 0 or rect.height <= 0:
        return center

    if abs(dy / rect.height) > abs(dx / rect.width):
        y = rect.y if dy > 0 else rect.bottom
        x = origin.x + (y - origin.y) * dx / dy
    else:
        x = rect.x if dx > 0 else rect.right
        y = origin.y + (x - origin.x) * dy / dx
    return Point(x=x, y=y)


def anchor_segment(anchor: AnchorGeometry, note_rect: Rect) -> tuple[Point, Point]:
    """Segment from a text anchor to a note.

    The segment leaves from the side of the anchor's line facing the note,
    so it never runs across the poem text.
    """
    line = anchor.line_rect or anchor.rect
    anchor_center = anchor.rect.center
    x = line.x if note_rect.center.x < anchor_center.x else line.right
    origin = Point(x=x, y=anchor_center.y)
    return origin, intersect(origin, note_rect)


def fallback_anchor_segment(note_rect: Rect) -> tuple[Point, Point]:
    """Horizontal segment used while the anchor is not measured yet."""
    y = note_rect.center.y
    return Point(x=0, y=y), Point(x=note_rect.x, y=y)


def note_segment(from_rect: Rect, to_rect: Rect) -> tuple[Point, Point]:
    """Segment between two note borders, each aimed at the other note's center."""
    return intersect(to_rect.center, from_rect), intersect(from_rect.center, to_rect)
