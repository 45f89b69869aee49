"""Pruning of highlights and notes after the poem content changes."""

from pydantic import BaseModel

from poetnotes.document.markers import live_anchor_ids
from poetnotes.domain.connection import Connection
from poetnotes.domain.highlight import Highlight
from poetnotes.domain.note import Note


class ReconciliationResult(BaseModel):
    """Outcome of one reconciliation pass.

    Attributes:
        highlights: Highlights whose anchor is still present and that still
                    belong to a note
        notes: Notes that survived pruning
        dropped_highlight_ids: Highlights whose anchor vanished or whose last
                               note was pruned
        pruned_note_ids: Ordinary notes left without any tie
    """

    highlights: list[Highlight]
    notes: list[Note]
    dropped_highlight_ids: list[str] = []
    pruned_note_ids: list[str] = []


def reconcile(
    content: str,
    highlights: list[Highlight],
    notes: list[Note],
    connections: list[Connection],
) -> ReconciliationResult:
    """Drop highlights whose anchor is gone, then prune orphaned notes.

    Highlights left without notes once pruned note ids are stripped are
    dropped too.

    An ordinary note survives when it still references a surviving
    highlight, is an endpoint of a connection, links to another note, or is
    linked from another note. Connections and links are read from the
    inputs, before any pruning.

    This is a single pass: a note kept only because of a link to a note
    pruned here is not re-evaluated until the next content change.
    """
    live_ids = live_anchor_ids(content)
    kept_highlights = [h for h in highlights if h.id in live_ids]
    dropped_highlight_ids = [h.id for h in highlights if h.id not in live_ids]

    kept_highlight_ids = {h.id for h in kept_highlights}
    connected_ids = {c.from_note_id for c in connections} | {c.to_note_id for c in connections}
    linked_to_ids = {target for note in notes for target in note.linked_notes}

    surviving_notes = []
    pruned_note_ids = []
    for note in notes:
        if note.is_special or (
            any(ref in kept_highlight_ids for ref in note.text_references)
            or note.id in connected_ids
            or note.linked_notes
            or note.id in linked_to_ids
        ):
            surviving_notes.append(note)
        else:
            pruned_note_ids.append(note.id)

    if pruned_note_ids:
        pruned = set(pruned_note_ids)
        stripped = []
        for h in kept_highlights:
            if pruned.intersection(h.note_ids):
                remaining = [nid for nid in h.note_ids if nid not in pruned]
                if not remaining:
                    dropped_highlight_ids.append(h.id)
                    continue
                h = h.model_copy(update={"note_ids": remaining})
            stripped.append(h)
        kept_highlights = stripped

    return ReconciliationResult(
        highlights=kept_highlights,
        notes=surviving_notes,
        dropped_highlight_ids=dropped_highlight_ids,
        pruned_note_ids=pruned_note_ids,
    )
