"""Pure state transitions over a project snapshot.

Every transition returns a new ``Project`` and leaves its input untouched,
so a previous snapshot stays valid for comparison. Unknown ids make a
transition a no-op apart from the ``last_modified`` bump; nothing here
raises for a missing note, highlight or connection.
"""

from loguru import logger

from poetnotes.domain.connection import Connection
from poetnotes.domain.highlight import Highlight
from poetnotes.domain.note import Note, NotePosition, NoteUpdate
from poetnotes.domain.project import Poem, Project
from poetnotes.graph_store.reconciler import reconcile


def _touch(project: Project, now: str, **updates) -> Project:
    return project.model_copy(update={**updates, "last_modified": now})


def _replace_note(project: Project, note_id: str, **updates) -> list[Note]:
    return [
        note.model_copy(update=updates) if note.id == note_id else note for note in project.notes
    ]


def _with_highlights(project: Project, highlights: list[Highlight]) -> Poem:
    return project.poem.model_copy(update={"highlights": highlights})


def update_title(project: Project, title: str, *, now: str) -> Project:
    return _touch(project, now, title=title)


def set_document_content(project: Project, content: str, *, now: str) -> Project:
    """Replace the poem content and reconcile highlights and notes against it."""
    result = reconcile(content, project.poem.highlights, project.notes, project.connections)
    if result.dropped_highlight_ids or result.pruned_note_ids:
        logger.info(
            f"Reconciled content: dropped {len(result.dropped_highlight_ids)} highlights, "
            f"pruned {len(result.pruned_note_ids)} notes"
        )
    poem = project.poem.model_copy(update={"content": content, "highlights": result.highlights})
    return _touch(project, now, poem=poem, notes=result.notes)


def add_highlight(project: Project, highlight: Highlight, *, now: str) -> Project:
    if project.get_highlight(highlight.id) is not None:
        logger.debug(f"Highlight {highlight.id} already exists, ignoring")
        return _touch(project, now)
    highlights = [*project.poem.highlights, highlight]
    return _touch(project, now, poem=_with_highlights(project, highlights))


def remove_highlight(project: Project, highlight_id: str, *, now: str) -> Project:
    highlights = [h for h in project.poem.highlights if h.id != highlight_id]
    return _touch(project, now, poem=_with_highlights(project, highlights))


def add_note(project: Project, note: Note, *, now: str) -> Project:
    if project.get_note(note.id) is not None:
        logger.debug(f"Note {note.id} already exists, ignoring")
        return _touch(project, now)
    if note.is_special and any(n.type == note.type for n in project.notes):
        logger.debug(f"Project already has a {note.type} note, ignoring {note.id}")
        return _touch(project, now)
    return _touch(project, now, notes=[*project.notes, note])


def update_note(project: Project, note_id: str, fields: NoteUpdate, *, now: str) -> Project:
    updates = fields.model_dump(exclude_unset=True, exclude_none=True)
    notes = _replace_note(project, note_id, **updates, last_modified=now)
    return _touch(project, now, notes=notes)


def update_note_position(
    project: Project, note_id: str, position: NotePosition, *, now: str
) -> Project:
    return _touch(project, now, notes=_replace_note(project, note_id, position=position))


def toggle_collapse(project: Project, note_id: str, *, now: str) -> Project:
    note = project.get_note(note_id)
    if note is None:
        return _touch(project, now)
    return _touch(
        project,
        now,
        notes=_replace_note(project, note_id, collapsed=not note.collapsed, last_modified=now),
    )


def delete_note(project: Project, note_id: str, *, now: str) -> Project:
    """Delete an ordinary note and strip every reference to it.

    Highlights left without notes are dropped along with the note. Notes
    that become orphaned are not pruned here; that happens on the next
    content reconciliation.
    """
    note = project.get_note(note_id)
    if note is None or note.is_special:
        logger.debug(f"Note {note_id} is missing or special, not deleting")
        return _touch(project, now)

    highlights = []
    for highlight in project.poem.highlights:
        if note_id in highlight.note_ids:
            remaining = [nid for nid in highlight.note_ids if nid != note_id]
            if not remaining:
                continue
            highlight = highlight.model_copy(update={"note_ids": remaining})
        highlights.append(highlight)

    connections = [
        c for c in project.connections if c.from_note_id != note_id and c.to_note_id != note_id
    ]
    notes = [
        n.model_copy(update={"linked_notes": [lid for lid in n.linked_notes if lid != note_id]})
        if note_id in n.linked_notes
        else n
        for n in project.notes
        if n.id != note_id
    ]
    return _touch(
        project,
        now,
        poem=_with_highlights(project, highlights),
        connections=connections,
        notes=notes,
    )


def link_notes(project: Project, from_id: str, to_id: str, *, now: str) -> Project:
    source = project.get_note(from_id)
    if source is None or to_id in source.linked_notes:
        return _touch(project, now)
    return _touch(
        project,
        now,
        notes=_replace_note(project, from_id, linked_notes=[*source.linked_notes, to_id]),
    )


def unlink_notes(project: Project, from_id: str, to_id: str, *, now: str) -> Project:
    source = project.get_note(from_id)
    notes = project.notes
    if source is not None:
        linked = [lid for lid in source.linked_notes if lid != to_id]
        notes = _replace_note(project, from_id, linked_notes=linked)
    connections = [
        c
        for c in project.connections
        if not (c.from_note_id == from_id and c.to_note_id == to_id)
    ]
    return _touch(project, now, notes=notes, connections=connections)


def add_connection(project: Project, connection: Connection, *, now: str) -> Project:
    return _touch(project, now, connections=[*project.connections, connection])


def remove_connection(project: Project, connection_id: str, *, now: str) -> Project:
    connections = [c for c in project.connections if c.id != connection_id]
    return _touch(project, now, connections=connections)
