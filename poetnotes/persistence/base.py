from typing import Protocol

from poetnotes.domain.project import Project


class ProjectRepository(Protocol):
    """Protocol for project persistence implementations."""

    def load(self) -> Project | None:
        """Load the saved project, or None if nothing has been saved."""
        ...

    def save(self, project: Project) -> None:
        """Persist a project snapshot."""
        ...

    def clear(self) -> None:
        """Forget the saved project."""
        ...
