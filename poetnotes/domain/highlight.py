"""Highlight domain model."""

from poetnotes.domain.base import DomainModel


class Highlight(DomainModel):
    """A committed text range anchored in the poem.

    Attributes:
        id: Anchor id embedded in the poem markup
        line_index: Index of the paragraph block the range starts in
        start_offset: Start offset over the visible poem text
        end_offset: End offset over the visible poem text
        text: Snapshot of the selected text
        note_ids: Notes referencing this highlight
    """

    id: str
    line_index: int = 0
    start_offset: int
    end_offset: int
    text: str
    note_ids: list[str] = []
