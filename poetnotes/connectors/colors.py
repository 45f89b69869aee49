"""Display color propagation from colored anchors to notes."""

from poetnotes.domain.connection import Connection
from poetnotes.domain.note import Note


def propagate_colors(
    notes: list[Note], connections: list[Connection], anchor_colors: dict[str, str]
) -> dict[str, str]:
    """Assign display colors to notes.

    A note takes the color of the first colored anchor among its text
    references. Then a single pass over the connections, in list order, lets
    an uncolored endpoint inherit its neighbor's color. There is no repeat
    pass: a note whose only colored neighbor is colored by a later
    connection stays uncolored.
    """
    note_ids = {note.id for note in notes}
    colors: dict[str, str] = {}
    for note in notes:
        for highlight_id in note.text_references:
            color = anchor_colors.get(highlight_id)
            if color and note.id not in colors:
                colors[note.id] = color

    for connection in connections:
        if connection.from_note_id not in note_ids or connection.to_note_id not in note_ids:
            continue
        from_color = colors.get(connection.from_note_id)
        to_color = colors.get(connection.to_note_id)
        if from_color and not to_color:
            colors[connection.to_note_id] = from_color
        elif to_color and not from_color:
            colors[connection.from_note_id] = to_color
    return colors
