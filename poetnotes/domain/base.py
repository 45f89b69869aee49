"""Shared base for domain models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Base model serialised with the camelCase names of the project file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()
