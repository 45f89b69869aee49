"""Collision-avoiding placement of notes on the notes canvas.

Two entry points:
- ``place_all`` grids every unplaced note, keeping placed notes fixed
- ``place_near`` finds a spot for one new note level with its text anchor

Both use the same bounded search: on collision move one row down, and when
that would run off the bottom of the canvas, wrap to the top of the next
column. The search gives up after a fixed number of attempts and accepts
the last candidate even if it still overlaps.
"""

import math

from pydantic import Field

from poetnotes.domain.base import DomainModel
from poetnotes.domain.geometry import Rect
from poetnotes.domain.note import Note, NotePosition

BULK_MAX_ATTEMPTS = 50
SINGLE_MAX_ATTEMPTS = 100


class LayoutConfig(DomainModel):
    """Canvas and note dimensions used by the layout engine."""

    canvas_width: float = Field(default=600, gt=0)
    canvas_height: float = Field(default=800, gt=0)
    note_width: float = Field(default=200, gt=0)
    note_height: float = Field(default=120, gt=0)
    padding: float = Field(default=20, ge=0)
    start_x: float = 50
    start_y: float = 50

    @property
    def column_width(self) -> float:
        return self.note_width + self.padding

    @property
    def row_height(self) -> float:
        return self.note_height + self.padding

    @property
    def columns(self) -> int:
        return max(1, math.floor((self.canvas_width - self.start_x) / self.column_width))


def has_collision(candidate: Rect, occupied: list[Rect]) -> bool:
    """Check whether a candidate rectangle overlaps any occupied one."""
    return any(candidate.overlaps(area) for area in occupied)


def _note_rect(x: float, y: float, config: LayoutConfig) -> Rect:
    return Rect(x=x, y=y, width=config.note_width, height=config.note_height)


def _search(
    x: float, y: float, occupied: list[Rect], config: LayoutConfig, max_attempts: int
) -> NotePosition:
    attempts = 0
    while has_collision(_note_rect(x, y, config), occupied) and attempts < max_attempts:
        y += config.row_height
        if y + config.note_height > config.canvas_height:
            y = config.start_y
            x += config.column_width
        attempts += 1
    return NotePosition(x=x, y=y)


def place_all(notes: list[Note], config: LayoutConfig | None = None) -> dict[str, NotePosition]:
    """Calculate positions for all notes without overlapping.

    Notes with a non-origin position keep it and reserve their rectangle.
    The i-th unplaced note starts at grid cell ``(i mod columns, i div
    columns)`` and is moved by the bounded collision search from there.

    Args:
        notes: Notes to lay out, in display order
        config: Canvas and note dimensions; defaults to ``LayoutConfig()``

    Returns:
        Position for every note id, fixed and newly placed alike
    """
    config = config or LayoutConfig()
    positions: dict[str, NotePosition] = {}
    occupied: list[Rect] = []

    unplaced = []
    for note in notes:
        if note.position.is_origin:
            unplaced.append(note)
        else:
            positions[note.id] = note.position
            occupied.append(_note_rect(note.position.x, note.position.y, config))

    columns = config.columns
    for index, note in enumerate(unplaced):
        column, row = index % columns, index // columns
        x = config.start_x + column * config.column_width
        y = config.start_y + row * config.row_height

        position = _search(x, y, occupied, config, BULK_MAX_ATTEMPTS)
        positions[note.id] = position
        occupied.append(_note_rect(position.x, position.y, config))

    return positions


def place_near(
    existing_notes: list[Note],
    anchor_rect: Rect | None,
    canvas_rect: Rect | None,
    config: LayoutConfig | None = None,
) -> NotePosition:
    """Calculate the position for a new note next to its text anchor.

    The note starts level with the anchor (its top relative to the canvas)
    at the default left offset; without both rectangles it starts at the
    configured start position.
    """
    config = config or LayoutConfig()
    if canvas_rect is not None:
        config = config.model_copy(
            update={"canvas_width": canvas_rect.width, "canvas_height": canvas_rect.height}
        )

    x, y = config.start_x, config.start_y
    if anchor_rect is not None and canvas_rect is not None:
        y = anchor_rect.y - canvas_rect.y

    occupied = [_note_rect(note.position.x, note.position.y, config) for note in existing_notes]
    return _search(x, y, occupied, config, SINGLE_MAX_ATTEMPTS)


def recalculate_layout(
    notes: list[Note], canvas_width: float, canvas_height: float
) -> dict[str, NotePosition]:
    """Recalculate all positions after the canvas size changed."""
    return place_all(notes, LayoutConfig(canvas_width=canvas_width, canvas_height=canvas_height))
