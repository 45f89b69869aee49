from typing import Literal

from poetnotes.connectors.base import GeometryProvider
from poetnotes.connectors.colors import propagate_colors
from poetnotes.connectors.geometry import anchor_segment, fallback_anchor_segment, note_segment
from poetnotes.document.markers import anchor_colors
from poetnotes.domain.base import DomainModel
from poetnotes.domain.geometry import Point, Rect
from poetnotes.domain.note import Note
from poetnotes.domain.project import Project

DEFAULT_NOTE_WIDTH = 220
DEFAULT_NOTE_HEIGHT = 100


class Connector(DomainModel):
    """A line to draw; the arrowhead goes at ``end``.

    Attributes:
        id: Connection id, or ``text-<note>-<highlight>`` for anchor lines
        kind: Whether the line ties a note to text or to another note
        source_id: Highlight id for anchor lines, source note id otherwise
        target_id: Note id at the arrowhead
        start: Start point in canvas coordinates
        end: End point in canvas coordinates
        color: Display color, if one reached this line
        fallback: True when drawn without the anchor's measured geometry
    """

    id: str
    kind: Literal["note-to-text", "note-to-note"]
    source_id: str
    target_id: str
    start: Point
    end: Point
    color: str | None = None
    fallback: bool = False


class ConnectorLayout(DomainModel):
    connectors: list[Connector] = []
    note_colors: dict[str, str] = {}


def resolve_note_rect(note: Note, provider: GeometryProvider) -> Rect:
    """Measured note rectangle, or one derived from the stored position."""
    rect = provider.note_rect(note.id)
    if rect is not None:
        return rect
    return Rect(
        x=note.position.x,
        y=note.position.y,
        width=note.width or DEFAULT_NOTE_WIDTH,
        height=DEFAULT_NOTE_HEIGHT,
    )


def compute_connectors(project: Project, provider: GeometryProvider) -> ConnectorLayout:
    """Compute every connector line and note color for the current snapshot.

    Pure with respect to its inputs: the same project and the same
    measurements always give the same layout.
    """
    colors_by_anchor = anchor_colors(project.poem.content)
    note_colors = propagate_colors(project.notes, project.connections, colors_by_anchor)
    notes_by_id = {note.id: note for note in project.notes}
    rects = {note.id: resolve_note_rect(note, provider) for note in project.notes}

    connectors = []
    for connection in project.connections:
        from_note = notes_by_id.get(connection.from_note_id)
        to_note = notes_by_id.get(connection.to_note_id)
        if from_note is None or to_note is None:
            continue
        start, end = note_segment(rects[from_note.id], rects[to_note.id])
        connectors.append(
            Connector(
                id=connection.id,
                kind="note-to-note",
                source_id=from_note.id,
                target_id=to_note.id,
                start=start,
                end=end,
                color=note_colors.get(from_note.id) or note_colors.get(to_note.id),
            )
        )

    for note in project.notes:
        note_rect = rects[note.id]
        for highlight_id in note.text_references:
            anchor = provider.anchor_geometry(highlight_id)
            color = colors_by_anchor.get(highlight_id) or note_colors.get(note.id)
            if anchor is None:
                start, end = fallback_anchor_segment(note_rect)
                connector_id = f"text-fallback-{note.id}-{highlight_id}"
            else:
                start, end = anchor_segment(anchor, note_rect)
                connector_id = f"text-{note.id}-{highlight_id}"
            connectors.append(
                Connector(
                    id=connector_id,
                    kind="note-to-text",
                    source_id=highlight_id,
                    target_id=note.id,
                    start=start,
                    end=end,
                    color=color,
                    fallback=anchor is None,
                )
            )

    return ConnectorLayout(connectors=connectors, note_colors=note_colors)
