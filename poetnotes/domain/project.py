"""Project domain models."""

import uuid

from loguru import logger
from pydantic import Field

from poetnotes.domain.base import DomainModel, utc_now
from poetnotes.domain.connection import Connection
from poetnotes.domain.highlight import Highlight
from poetnotes.domain.note import Note, NoteType, make_special_note

PROJECT_VERSION = "1.0"
SPECIAL_NOTE_TYPES: tuple[NoteType, ...] = ("context", "personal-response")


class Poem(DomainModel):
    content: str = ""  # editor HTML with embedded anchor markers
    highlights: list[Highlight] = []


class Project(DomainModel):
    """The complete annotation state of one poem."""

    project_id: str
    version: str = PROJECT_VERSION
    title: str = "Untitled Project"
    created_at: str
    last_modified: str
    poem: Poem = Field(default_factory=Poem)
    notes: list[Note] = []
    connections: list[Connection] = []

    def get_note(self, note_id: str) -> Note | None:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def get_highlight(self, highlight_id: str) -> Highlight | None:
        for highlight in self.poem.highlights:
            if highlight.id == highlight_id:
                return highlight
        return None


def create_empty_project(now: str | None = None) -> Project:
    """Create a project holding only the two special notes."""
    now = now or utc_now()
    return Project(
        project_id=str(uuid.uuid4()),
        created_at=now,
        last_modified=now,
        notes=[make_special_note(note_type, now) for note_type in SPECIAL_NOTE_TYPES],
    )


def ensure_special_notes(project: Project, now: str | None = None) -> Project:
    """Return the project with exactly one note of each special type.

    Missing special notes are appended; a later note repeating a special
    type is dropped.
    """
    seen: set[str] = set()
    notes = []
    for note in project.notes:
        if note.type is not None:
            if note.type in seen:
                logger.warning(f"Dropping duplicate {note.type} note {note.id}")
                continue
            seen.add(note.type)
        notes.append(note)

    missing = [note_type for note_type in SPECIAL_NOTE_TYPES if note_type not in seen]
    if not missing and len(notes) == len(project.notes):
        return project

    now = now or utc_now()
    notes += [make_special_note(note_type, now) for note_type in missing]
    return project.model_copy(update={"notes": notes})
