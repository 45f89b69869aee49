import itertools
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from poetnotes.annotator import Annotator
from poetnotes.api import create_app
from poetnotes.domain.connection import Connection
from poetnotes.domain.highlight import Highlight
from poetnotes.domain.note import NotePosition
from poetnotes.domain.project import Poem, Project, create_empty_project
from poetnotes.graph_store.store import GraphStore
from tests.fakes import POEM, FakeGeometryProvider, FakeProjectRepository, make_note


@pytest.fixture
def clock() -> Callable[[], str]:
    """Timestamps that strictly increase on every call."""
    counter = itertools.count(1)
    return lambda: f"2024-01-01T00:00:{next(counter):06d}+00:00"


@pytest.fixture
def empty_project() -> Project:
    return create_empty_project("2024-01-01T00:00:00+00:00")


@pytest.fixture
def sample_project(empty_project: Project) -> Project:
    """Poem with two highlights, two text notes, a free note and one link."""
    return empty_project.model_copy(
        update={
            "poem": Poem(
                content=POEM,
                highlights=[
                    Highlight(
                        id="h1", start_offset=29, end_offset=34, text="Death", note_ids=["n1"]
                    ),
                    Highlight(
                        id="h2",
                        line_index=1,
                        start_offset=44,
                        end_offset=51,
                        text="stopped",
                        note_ids=["n2"],
                    ),
                ],
            ),
            "notes": empty_project.notes
            + [
                make_note("n1", text_references=["h1"], linked_notes=["n3"]),
                make_note("n2", text_references=["h2"], position=NotePosition(x=300, y=200)),
                make_note("n3", position=NotePosition(x=300, y=400)),
            ],
            "connections": [Connection(id="c1", from_note_id="n1", to_note_id="n3")],
        }
    )


@pytest.fixture
def fake_repository() -> FakeProjectRepository:
    return FakeProjectRepository()


@pytest.fixture
def store(
    sample_project: Project, fake_repository: FakeProjectRepository, clock: Callable[[], str]
) -> GraphStore:
    return GraphStore(sample_project, repository=fake_repository, clock=clock)


@pytest.fixture
def empty_store(fake_repository: FakeProjectRepository, clock: Callable[[], str]) -> GraphStore:
    return GraphStore(repository=fake_repository, clock=clock)


@pytest.fixture
def annotator(store: GraphStore) -> Annotator:
    return Annotator(store)


@pytest.fixture
def fake_geometry() -> FakeGeometryProvider:
    return FakeGeometryProvider()


@pytest.fixture
def test_client(annotator: Annotator) -> TestClient:
    """Create test client around the sample project."""
    app = create_app(annotator=annotator)
    return TestClient(app)
