"""User-level annotation use cases on top of the graph store."""

import uuid

from loguru import logger

from poetnotes.connectors.measured import MeasuredGeometryProvider
from poetnotes.document.markers import live_anchor_ids
from poetnotes.document.markup import MarkupDocument, Selection
from poetnotes.domain.base import utc_now
from poetnotes.domain.connection import Connection
from poetnotes.domain.geometry import Rect
from poetnotes.domain.highlight import Highlight
from poetnotes.domain.note import Note, NotePosition, NoteUpdate
from poetnotes.domain.project import Project
from poetnotes.graph_store.store import GraphStore
from poetnotes.layout.engine import LayoutConfig, place_all, place_near, recalculate_layout

COLOR_PALETTE = [
    "#e94560",  # Rose
    "#ffc107",  # Amber
    "#4cc9f0",  # Sky Blue
    "#7209b7",  # Purple
    "#4361ee",  # Royal Blue
    "#4caf50",  # Green
    "#ff9f1c",  # Orange
    "#f72585",  # Neon Pink
    "#00f5d4",  # Teal
    "#fee440",  # Yellow
]


def generate_highlight_id() -> str:
    return f"highlight-{uuid.uuid4().hex}"


def generate_connection_id() -> str:
    return f"conn-{uuid.uuid4().hex}"


class Annotator:
    """Ties the poem document to the graph store.

    Edits to the document are forwarded to the store, which reconciles
    highlights and notes against the new content. In the other direction,
    the document follows content replaced in the store (load, import) and
    loses markers for highlights the store no longer has, e.g. after a note
    deletion dropped them.
    """

    def __init__(
        self,
        store: GraphStore,
        document: MarkupDocument | None = None,
        layout_config: LayoutConfig | None = None,
        geometry: MeasuredGeometryProvider | None = None,
    ) -> None:
        self.store = store
        self.document = document or MarkupDocument()
        self.geometry = geometry or MeasuredGeometryProvider()
        self.layout_config = layout_config or LayoutConfig()

        self.document.load(store.project.poem.content)
        self._unsubscribe_document = self.document.on_change(store.set_document_content)
        self._unsubscribe_store = store.subscribe(self._sync_document)
        self._sync_document(store.project)

    def close(self) -> None:
        self._unsubscribe_document()
        self._unsubscribe_store()

    def annotate_selection(
        self,
        start: int,
        end: int,
        *,
        note_id: str | None = None,
        anchor_rect: Rect | None = None,
        canvas_rect: Rect | None = None,
    ) -> Note | None:
        """Commit a text selection as a highlight.

        Args:
            start: Visible-text start offset of the selection
            end: Visible-text end offset of the selection
            note_id: Existing note to attach the highlight to; a new note is
                created next to the anchor when omitted
            anchor_rect: Measured rectangle of the selection, if known
            canvas_rect: Measured notes canvas rectangle; the last measured
                canvas is used when omitted

        Returns:
            The note now referencing the highlight, or None when the
            selection is blank or the target note does not exist
        """
        selection = self.document.selection(start, end)
        if selection is None:
            logger.debug(f"Ignoring blank selection {start}-{end}")
            return None

        if canvas_rect is None:
            canvas_rect = self.geometry.canvas_rect()

        project = self.store.project
        target = project.get_note(note_id) if note_id else None
        if note_id and target is None:
            logger.debug(f"Note {note_id} not found, selection not committed")
            return None

        highlight_id = generate_highlight_id()
        color = COLOR_PALETTE[len(project.notes) % len(COLOR_PALETTE)]

        if target is None:
            now = utc_now()
            target = Note(
                id=str(uuid.uuid4()),
                position=place_near(project.notes, anchor_rect, canvas_rect, self.layout_config),
                text_references=[highlight_id],
                created_at=now,
                last_modified=now,
            )
            self.store.add_highlight(self._highlight(highlight_id, selection, target.id))
            self.store.add_note(target)
        else:
            self.store.add_highlight(self._highlight(highlight_id, selection, target.id))
            self.store.update_note(
                target.id,
                NoteUpdate(text_references=[*target.text_references, highlight_id]),
            )

        self.document.tag_range(selection.start_offset, selection.end_offset, [highlight_id], color)
        logger.info(f"Highlighted '{selection.text}' for note {target.id}")
        return self.store.project.get_note(target.id)

    def add_note(self, content: str = "", position: NotePosition | None = None) -> Note:
        """Create a free note, placed clear of the existing ones unless positioned."""
        project = self.store.project
        if position is None:
            position = place_near(project.notes, None, None, self.layout_config)
        now = utc_now()
        note = Note(
            id=str(uuid.uuid4()),
            content=content,
            position=position,
            created_at=now,
            last_modified=now,
        )
        self.store.add_note(note)
        return note

    def link(self, from_id: str, to_id: str) -> Connection | None:
        """Link two notes and add the matching connection.

        Self-links and unknown notes are ignored.
        """
        project = self.store.project
        if from_id == to_id:
            return None
        if project.get_note(from_id) is None or project.get_note(to_id) is None:
            return None
        connection = Connection(id=generate_connection_id(), from_note_id=from_id, to_note_id=to_id)
        self.store.link_notes(from_id, to_id)
        self.store.add_connection(connection)
        return connection

    def unlink(self, from_id: str, to_id: str) -> None:
        self.store.unlink_notes(from_id, to_id)

    def apply_layout(self, config: LayoutConfig | None = None) -> dict[str, NotePosition]:
        """Lay out all notes and store every position that changed.

        Without an explicit config the measured canvas size is used when
        known, falling back to the annotator's layout config.
        """
        notes = self.store.project.notes
        canvas = self.geometry.canvas_rect()
        if config is None and canvas is not None and canvas.width > 0 and canvas.height > 0:
            positions = recalculate_layout(notes, canvas.width, canvas.height)
        else:
            positions = place_all(notes, config or self.layout_config)
        for note in notes:
            position = positions.get(note.id)
            if position is not None and position != note.position:
                self.store.update_note_position(note.id, position)
        return positions

    def _highlight(self, highlight_id: str, selection: Selection, note_id: str) -> Highlight:
        return Highlight(
            id=highlight_id,
            line_index=selection.line_index,
            start_offset=selection.start_offset,
            end_offset=selection.end_offset,
            text=selection.text,
            note_ids=[note_id],
        )

    def _sync_document(self, project: Project) -> None:
        if self.document.content != project.poem.content:
            self.document.load(project.poem.content)

        valid_ids = {h.id for h in project.poem.highlights}
        if live_anchor_ids(self.document.content) - valid_ids:
            self.document.strip_anchors(valid_ids)
