"""Import and export of project files."""

import json
import re
from datetime import date
from typing import Any

from loguru import logger
from pydantic import ValidationError

from poetnotes.domain.project import Project, ensure_special_notes

REQUIRED_KEYS = ("projectId", "poem", "notes")


class InvalidProjectFormatError(ValueError):
    """Raised when a project file cannot be imported."""

    def __init__(self, reason: str = "") -> None:
        super().__init__("Invalid project file format")
        self.reason = reason


def export_project(project: Project) -> str:
    """Serialise a project to the indented JSON project file format."""
    return project.model_dump_json(by_alias=True, indent=2)


def export_filename(project: Project, today: date | None = None) -> str:
    """Suggested download name, e.g. ``my-poem-2024-05-01.json``."""
    safe_title = re.sub(r"[^a-z0-9]", "-", (project.title or "project").lower())
    return f"{safe_title}-{(today or date.today()).isoformat()}.json"


def parse_project(payload: str | bytes | dict[str, Any]) -> Project:
    """Validate a project file and return it with its special notes ensured.

    Args:
        payload: Raw JSON text or an already decoded JSON object

    Returns:
        The imported project

    Raises:
        InvalidProjectFormatError: If the payload is not UTF-8 JSON, misses
            ``projectId``, ``poem`` or ``notes``, or fails validation
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidProjectFormatError(f"not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidProjectFormatError("not a JSON object")

    # Empty lists and objects are accepted; absent, null, "" and 0 are not
    missing = [key for key in REQUIRED_KEYS if payload.get(key) in (None, "", 0)]
    if missing:
        raise InvalidProjectFormatError(f"missing {', '.join(missing)}")

    try:
        project = Project.model_validate(payload)
    except ValidationError as e:
        raise InvalidProjectFormatError(str(e)) from e

    logger.debug(f"Parsed project {project.project_id} with {len(project.notes)} notes")
    return ensure_special_notes(project)
