"""Tests for the graph store: dispatch, subscriptions and persistence."""

from typing import Callable

import pytest

from poetnotes.domain.connection import Connection
from poetnotes.domain.highlight import Highlight
from poetnotes.domain.project import Project
from poetnotes.graph_store.store import GraphStore
from poetnotes.persistence.exchange import InvalidProjectFormatError
from tests.fakes import FakeProjectRepository, make_note

ANCHORED = '<p><span class="poet-highlight" data-highlight-id="h1">Hope</span> is the thing</p>'


def test_store_without_project_starts_empty(empty_store: GraphStore) -> None:
    project = empty_store.project
    assert sorted(note.type for note in project.notes) == ["context", "personal-response"]
    assert not empty_store.has_unsaved_changes


def test_store_loads_saved_project(
    sample_project: Project, clock: Callable[[], str]
) -> None:
    store = GraphStore(repository=FakeProjectRepository(sample_project), clock=clock)
    assert store.project == sample_project


def test_store_restores_missing_special_notes(
    sample_project: Project, clock: Callable[[], str]
) -> None:
    ordinary = [note for note in sample_project.notes if not note.is_special]
    store = GraphStore(sample_project.model_copy(update={"notes": ordinary}), clock=clock)
    assert sorted(note.type for note in store.project.notes if note.type) == [
        "context",
        "personal-response",
    ]


def test_subscribers_receive_each_snapshot(store: GraphStore) -> None:
    seen: list[Project] = []
    unsubscribe = store.subscribe(seen.append)

    store.update_title("First")
    store.toggle_collapse("n1")
    unsubscribe()
    store.update_title("Ignored")

    assert [project.title for project in seen] == ["First", "First"]
    assert seen[1].get_note("n1").collapsed is True


def test_previous_snapshot_is_not_mutated(store: GraphStore) -> None:
    before = store.project
    store.delete_note("n3")
    assert before.get_note("n3") is not None
    assert store.project is not before


def test_transition_from_listener_runs_after_current_one(store: GraphStore) -> None:
    titles: list[str] = []

    def listener(project: Project) -> None:
        titles.append(project.title)
        if project.title == "Outer":
            store.update_title("Inner")

    store.subscribe(listener)
    result = store.update_title("Outer")

    assert titles == ["Outer", "Inner"]
    assert result.title == "Inner"


def test_failing_listener_discards_queued_transitions(store: GraphStore) -> None:
    def listener(project: Project) -> None:
        if project.title == "Outer":
            store.update_title("Queued")
            raise RuntimeError("listener failed")

    store.subscribe(listener)
    with pytest.raises(RuntimeError):
        store.update_title("Outer")

    assert store.project.title == "Outer"
    store.update_title("Later")
    assert store.project.title == "Later"


def test_every_transition_bumps_last_modified(store: GraphStore) -> None:
    stamps = {store.project.last_modified}
    store.add_highlight(Highlight(id="h9", start_offset=0, end_offset=1, text="B"))
    stamps.add(store.project.last_modified)
    store.remove_highlight("h9")
    stamps.add(store.project.last_modified)
    store.link_notes("n2", "n3")
    stamps.add(store.project.last_modified)
    store.delete_note("note-context")
    stamps.add(store.project.last_modified)
    assert len(stamps) == 5


def test_content_change_reconciles(store: GraphStore) -> None:
    project = store.set_document_content("<p>Because I could not stop for Death</p>")

    assert project.poem.highlights == []
    assert project.get_note("n1") is not None, "n1 keeps its link to n3"
    assert project.get_note("n2") is None


def test_delete_note_defers_orphan_pruning_to_reconciliation(
    empty_store: GraphStore,
) -> None:
    store = empty_store
    store.set_document_content(ANCHORED)
    store.add_highlight(
        Highlight(id="h1", start_offset=0, end_offset=4, text="Hope", note_ids=["n1"])
    )
    store.add_note(make_note("n1", text_references=["h1"]))
    store.add_note(make_note("n2"))
    store.link_notes("n1", "n2")
    store.add_connection(Connection(id="c1", from_note_id="n1", to_note_id="n2"))

    project = store.delete_note("n1")

    assert project.get_highlight("h1") is None
    assert project.connections == []
    assert project.get_note("n2").linked_notes == []
    assert project.get_note("n2") is not None, "deletion only strips references"

    project = store.set_document_content(ANCHORED)
    assert project.get_note("n2") is None
    assert len(project.notes) == 2


def test_save_clears_unsaved_changes(
    store: GraphStore, fake_repository: FakeProjectRepository
) -> None:
    assert not store.has_unsaved_changes

    store.update_title("Changed")
    assert store.has_unsaved_changes

    store.save()
    assert fake_repository.saved == [store.project]
    assert not store.has_unsaved_changes


def test_save_without_repository_raises(sample_project: Project) -> None:
    with pytest.raises(ValueError):
        GraphStore(sample_project).save()


def test_load_replaces_snapshot(
    empty_store: GraphStore, fake_repository: FakeProjectRepository, sample_project: Project
) -> None:
    assert empty_store.load() is None

    fake_repository.save(sample_project)
    project = empty_store.load()

    assert project == sample_project
    assert not empty_store.has_unsaved_changes


def test_new_project_clears_repository(
    store: GraphStore, fake_repository: FakeProjectRepository
) -> None:
    store.save()
    project = store.new_project()

    assert fake_repository.load() is None
    assert [note.id for note in project.notes] == ["note-context", "note-personal-response"]
    assert project.poem.content == ""
    assert not store.has_unsaved_changes


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[1, 2]",
        '{"poem": {}, "notes": []}',
        '{"projectId": "", "poem": {"content": ""}, "notes": []}',
        '{"projectId": "p1", "poem": null, "notes": []}',
        '{"projectId": "p1", "poem": {"content": "x"}, "notes": [{"id": 3}]}',
    ],
)
def test_rejected_import_leaves_store_unchanged(
    store: GraphStore, fake_repository: FakeProjectRepository, payload: str
) -> None:
    before = store.project

    with pytest.raises(InvalidProjectFormatError, match="Invalid project file format"):
        store.import_project(payload)

    assert store.project is before
    assert fake_repository.saved == []


def test_export_then_import_round_trip(store: GraphStore, clock: Callable[[], str]) -> None:
    exported = store.export_project()

    other = GraphStore(clock=clock)
    imported = other.import_project(exported)

    assert imported == store.project


def test_import_saves_through_repository(
    empty_store: GraphStore, fake_repository: FakeProjectRepository, store: GraphStore
) -> None:
    empty_store.import_project(store.export_project())
    assert fake_repository.saved == [empty_store.project]
    assert not empty_store.has_unsaved_changes
