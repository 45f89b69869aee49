from collections import deque
from typing import Any, Callable

from loguru import logger

from poetnotes.domain.base import utc_now
from poetnotes.domain.connection import Connection
from poetnotes.domain.highlight import Highlight
from poetnotes.domain.note import Note, NotePosition, NoteUpdate
from poetnotes.domain.project import Project, create_empty_project, ensure_special_notes
from poetnotes.graph_store import transitions
from poetnotes.persistence.base import ProjectRepository
from poetnotes.persistence.exchange import (
    InvalidProjectFormatError,
    export_project,
    parse_project,
)

StoreListener = Callable[[Project], None]


class GraphStore:
    """Single authoritative holder of the project snapshot.

    All changes go through the named transitions below. Each one replaces
    the current snapshot with a new ``Project`` and then notifies
    subscribers with it; transitions are applied one at a time, in call
    order.
    """

    def __init__(
        self,
        project: Project | None = None,
        *,
        repository: ProjectRepository | None = None,
        clock: Callable[[], str] = utc_now,
    ) -> None:
        """Initialize GraphStore.

        Args:
            project: Initial snapshot. When omitted the repository is asked
                     for a saved project, falling back to an empty one.
            repository: Persistence port used by save/load/import
            clock: Source of ISO-8601 timestamps
        """
        self._repository = repository
        self._clock = clock
        self._listeners: list[StoreListener] = []
        self._pending: deque[tuple[Callable[..., Project], tuple[Any, ...]]] = deque()
        self._dispatching = False

        if project is None and repository is not None:
            project = repository.load()
        self._project = ensure_special_notes(project or create_empty_project(clock()), clock())
        self._saved_at = self._project.last_modified

    @property
    def project(self) -> Project:
        return self._project

    @property
    def has_unsaved_changes(self) -> bool:
        return self._project.last_modified != self._saved_at

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener called with every new snapshot."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _apply(self, transition: Callable[..., Project], *args: Any) -> Project:
        # A transition submitted by a listener runs after the current one
        self._pending.append((transition, args))
        if self._dispatching:
            return self._project

        self._dispatching = True
        try:
            while self._pending:
                next_transition, next_args = self._pending.popleft()
                self._project = next_transition(self._project, *next_args, now=self._clock())
                for listener in list(self._listeners):
                    listener(self._project)
        except Exception:
            self._pending.clear()
            raise
        finally:
            self._dispatching = False
        return self._project

    def set_project(self, project: Project) -> Project:
        """Replace the whole snapshot, e.g. after load or import."""
        return self._apply(lambda _, *, now: ensure_special_notes(project, now))

    def update_title(self, title: str) -> Project:
        return self._apply(transitions.update_title, title)

    def set_document_content(self, content: str) -> Project:
        return self._apply(transitions.set_document_content, content)

    def add_highlight(self, highlight: Highlight) -> Project:
        return self._apply(transitions.add_highlight, highlight)

    def remove_highlight(self, highlight_id: str) -> Project:
        return self._apply(transitions.remove_highlight, highlight_id)

    def add_note(self, note: Note) -> Project:
        return self._apply(transitions.add_note, note)

    def update_note(self, note_id: str, fields: NoteUpdate) -> Project:
        return self._apply(transitions.update_note, note_id, fields)

    def update_note_position(self, note_id: str, position: NotePosition) -> Project:
        return self._apply(transitions.update_note_position, note_id, position)

    def toggle_collapse(self, note_id: str) -> Project:
        return self._apply(transitions.toggle_collapse, note_id)

    def delete_note(self, note_id: str) -> Project:
        return self._apply(transitions.delete_note, note_id)

    def link_notes(self, from_id: str, to_id: str) -> Project:
        return self._apply(transitions.link_notes, from_id, to_id)

    def unlink_notes(self, from_id: str, to_id: str) -> Project:
        return self._apply(transitions.unlink_notes, from_id, to_id)

    def add_connection(self, connection: Connection) -> Project:
        return self._apply(transitions.add_connection, connection)

    def remove_connection(self, connection_id: str) -> Project:
        return self._apply(transitions.remove_connection, connection_id)

    def new_project(self) -> Project:
        """Start over with an empty project and forget the saved one."""
        if self._repository is not None:
            self._repository.clear()
        project = self.set_project(create_empty_project(self._clock()))
        self._saved_at = project.last_modified
        return project

    def save(self) -> None:
        """Persist the current snapshot through the repository."""
        if self._repository is None:
            raise ValueError("No repository configured for this store")
        project = self._project
        self._repository.save(project)
        self._saved_at = project.last_modified
        logger.info(f"Saved project {project.project_id}")

    def load(self) -> Project | None:
        """Replace the snapshot with the saved project, if there is one."""
        if self._repository is None:
            raise ValueError("No repository configured for this store")
        project = self._repository.load()
        if project is None:
            return None
        self.set_project(project)
        self._saved_at = self._project.last_modified
        return self._project

    def import_project(self, payload: str | bytes | dict[str, Any]) -> Project:
        """Import a project file, replacing the snapshot only when it is valid.

        Raises:
            InvalidProjectFormatError: If the payload is rejected; the
                current snapshot is left unchanged.
        """
        try:
            project = parse_project(payload)
        except InvalidProjectFormatError as e:
            logger.warning(f"Rejected project import: {e.reason}")
            raise
        self.set_project(project)
        logger.info(f"Imported project {project.project_id} ({project.title})")
        if self._repository is not None:
            self.save()
        return self._project

    def export_project(self) -> str:
        return export_project(self._project)
