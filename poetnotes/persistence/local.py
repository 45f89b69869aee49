from pathlib import Path

from loguru import logger

from poetnotes.domain.project import Project
from poetnotes.persistence.base import ProjectRepository
from poetnotes.persistence.exchange import InvalidProjectFormatError, export_project, parse_project


class LocalProjectRepository(ProjectRepository):
    """Local repository that keeps the current project in a JSON file."""

    def __init__(self, filepath: str | Path) -> None:
        """Initialize LocalProjectRepository.

        Args:
            filepath: Path to the project file. It is created on the first
                     save; a missing file loads as no project.
        """
        self._filepath = Path(filepath)

    @property
    def filepath(self) -> Path:
        return self._filepath

    def load(self) -> Project | None:
        """Load the saved project, or None if missing or unreadable."""
        if not self._filepath.exists():
            return None
        try:
            with open(self._filepath, "rb") as f:
                return parse_project(f.read())
        except InvalidProjectFormatError as e:
            logger.warning(f"Ignoring unreadable project file {self._filepath}: {e}")
            return None

    def save(self, project: Project) -> None:
        """Save the project to the JSON file."""
        self._filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(self._filepath, "w") as f:
            f.write(export_project(project))
        logger.debug(f"Saved project {project.project_id} to {self._filepath}")

    def clear(self) -> None:
        """Delete the project file if present."""
        self._filepath.unlink(missing_ok=True)
