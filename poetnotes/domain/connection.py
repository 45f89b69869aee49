"""Connection domain model."""

from typing import Literal

from poetnotes.domain.base import DomainModel


class Connection(DomainModel):
    """A directed, renderable edge between two notes."""

    id: str
    from_note_id: str
    to_note_id: str
    type: Literal["note-to-note"] = "note-to-note"
