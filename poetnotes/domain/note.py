"""Note domain models."""

from typing import Literal

from pydantic import Field, field_validator

from poetnotes.domain.base import DomainModel

NoteType = Literal["context", "personal-response"]

CONTEXT_NOTE_ID = "note-context"
PERSONAL_RESPONSE_NOTE_ID = "note-personal-response"


class NotePosition(DomainModel):
    x: float = 0
    y: float = 0

    @property
    def is_origin(self) -> bool:
        return self.x == 0 and self.y == 0


class Note(DomainModel):
    """A free-floating annotation on the notes canvas.

    Attributes:
        id: Unique identifier
        content: Free text written by the user
        position: Top-left corner on the canvas
        width: Rendered width, when the user resized the note
        collapsed: Whether the note is shown collapsed
        text_references: Highlight IDs this note annotates
        linked_notes: Note IDs this note links to (directed)
        type: None for ordinary notes, otherwise one of the special types
        created_at: Creation timestamp (ISO-8601)
        last_modified: Last modification timestamp (ISO-8601)
    """

    id: str
    content: str = ""
    position: NotePosition = Field(default_factory=NotePosition)
    width: float | None = None
    collapsed: bool = Field(default=False, alias="isCollapsed")
    text_references: list[str] = []
    linked_notes: list[str] = []
    type: NoteType | None = None
    created_at: str
    last_modified: str

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_default_type(cls, value: str | None) -> str | None:
        # Older project files spell an ordinary note as "default"
        if value == "default":
            return None
        return value

    @property
    def is_special(self) -> bool:
        return self.type is not None


class NoteUpdate(DomainModel):
    """Partial update merged into an existing note."""

    content: str | None = None
    collapsed: bool | None = Field(default=None, alias="isCollapsed")
    width: float | None = None
    text_references: list[str] | None = None


def make_special_note(note_type: NoteType, now: str) -> Note:
    """Create one of the two permanent notes every project carries."""
    if note_type == "context":
        note_id, position = CONTEXT_NOTE_ID, NotePosition(x=50, y=50)
    else:
        note_id, position = PERSONAL_RESPONSE_NOTE_ID, NotePosition(x=50, y=150)
    return Note(
        id=note_id,
        position=position,
        collapsed=True,
        type=note_type,
        created_at=now,
        last_modified=now,
    )
