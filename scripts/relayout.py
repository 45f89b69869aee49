"""CLI for laying out every note of a saved project file without overlaps"""

import argparse
import sys

from loguru import logger

from poetnotes.annotator import Annotator
from poetnotes.config import settings
from poetnotes.domain.note import NotePosition
from poetnotes.graph_store.store import GraphStore
from poetnotes.layout.engine import LayoutConfig
from poetnotes.persistence.local import LocalProjectRepository


def main(project_file: str, canvas_width: float, canvas_height: float, reset: bool) -> None:
    repository = LocalProjectRepository(project_file)
    project = repository.load()
    if project is None:
        logger.error(f"No readable project at {project_file}")
        sys.exit(1)

    store = GraphStore(project, repository=repository)
    if reset:
        # Forget stored positions so every note is gridded again
        for note in store.project.notes:
            store.update_note_position(note.id, NotePosition())

    annotator = Annotator(store)
    config = LayoutConfig(canvas_width=canvas_width, canvas_height=canvas_height)
    positions = annotator.apply_layout(config)
    store.save()

    logger.info(f"Laid out {len(positions)} notes in {project_file}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--project",
        type=str,
        required=False,
        help="Project file to lay out",
        default=settings.project_path,
    )
    parser.add_argument("--canvas-width", type=float, default=LayoutConfig().canvas_width)
    parser.add_argument("--canvas-height", type=float, default=LayoutConfig().canvas_height)
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard existing positions and lay out every note from scratch",
    )

    args = parser.parse_args()

    main(
        project_file=args.project,
        canvas_width=args.canvas_width,
        canvas_height=args.canvas_height,
        reset=args.reset,
    )
