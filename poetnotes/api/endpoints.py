from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from loguru import logger

from poetnotes.annotator import Annotator
from poetnotes.api.schemas import (
    ContentRequest,
    GeometryRequest,
    LinkRequest,
    NoteCreateRequest,
    SelectionRequest,
    TitleRequest,
)
from poetnotes.connectors.compute import ConnectorLayout
from poetnotes.connectors.refresher import ConnectorRefresher
from poetnotes.domain.connection import Connection
from poetnotes.domain.note import Note, NotePosition, NoteUpdate
from poetnotes.domain.project import Project
from poetnotes.graph_store.store import GraphStore
from poetnotes.layout.engine import LayoutConfig
from poetnotes.persistence.exchange import InvalidProjectFormatError, export_filename


def _get_note_or_404(store: GraphStore, note_id: str) -> Note:
    note = store.project.get_note(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


def _create_selection_endpoint(annotator: Annotator):
    """Create the endpoint committing a text selection."""

    async def commit_selection(selection: SelectionRequest) -> Note:
        note = annotator.annotate_selection(
            selection.start,
            selection.end,
            note_id=selection.note_id,
            anchor_rect=selection.anchor_rect,
            canvas_rect=selection.canvas_rect,
        )
        if note is None:
            raise HTTPException(status_code=422, detail="Nothing to highlight")
        return note

    return commit_selection


def _create_note_endpoints(annotator: Annotator, router: APIRouter) -> None:
    store = annotator.store

    @router.post("/api/notes")
    async def add_note(request: NoteCreateRequest) -> Note:
        return annotator.add_note(content=request.content, position=request.position)

    @router.patch("/api/notes/{note_id}")
    async def update_note(note_id: str, fields: NoteUpdate) -> Note:
        store.update_note(note_id, fields)
        return _get_note_or_404(store, note_id)

    @router.put("/api/notes/{note_id}/position")
    async def update_note_position(note_id: str, position: NotePosition) -> Note:
        store.update_note_position(note_id, position)
        return _get_note_or_404(store, note_id)

    @router.post("/api/notes/{note_id}/collapse")
    async def toggle_collapse(note_id: str) -> Note:
        store.toggle_collapse(note_id)
        return _get_note_or_404(store, note_id)

    @router.delete("/api/notes/{note_id}")
    async def delete_note(note_id: str) -> Project:
        return store.delete_note(note_id)


def _create_link_endpoints(annotator: Annotator, router: APIRouter) -> None:
    store = annotator.store

    @router.post("/api/links")
    async def link_notes(link: LinkRequest) -> Connection:
        connection = annotator.link(link.from_id, link.to_id)
        if connection is None:
            raise HTTPException(status_code=422, detail="Notes cannot be linked")
        return connection

    @router.delete("/api/links")
    async def unlink_notes(link: LinkRequest) -> Project:
        annotator.unlink(link.from_id, link.to_id)
        return store.project

    @router.post("/api/connections")
    async def add_connection(connection: Connection) -> Project:
        return store.add_connection(connection)

    @router.delete("/api/connections/{connection_id}")
    async def remove_connection(connection_id: str) -> Project:
        return store.remove_connection(connection_id)


def _create_exchange_endpoints(store: GraphStore, router: APIRouter) -> None:
    @router.get("/api/export")
    async def export_project() -> Response:
        filename = export_filename(store.project)
        return Response(
            content=store.export_project(),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @router.post("/api/import")
    async def import_project(request: Request) -> Project:
        payload = await request.body()
        try:
            return store.import_project(payload)
        except InvalidProjectFormatError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @router.post("/api/project/new")
    async def new_project() -> Project:
        return store.new_project()

    @router.post("/api/project/save")
    async def save_project() -> dict[str, str]:
        try:
            store.save()
        except ValueError as e:
            logger.error(f"Error saving project: {e}")
            raise HTTPException(status_code=409, detail=str(e)) from e
        return {"status": "saved"}


def get_endpoints_router(*, annotator: Annotator, refresher: ConnectorRefresher) -> APIRouter:
    router = APIRouter()
    store = annotator.store

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @router.get("/api/project")
    async def get_project() -> Project:
        return store.project

    @router.put("/api/project/title")
    async def update_title(request: TitleRequest) -> Project:
        return store.update_title(request.title)

    @router.put("/api/poem/content")
    async def set_content(request: ContentRequest) -> Project:
        return store.set_document_content(request.content)

    @router.delete("/api/highlights/{highlight_id}")
    async def remove_highlight(highlight_id: str) -> Project:
        return store.remove_highlight(highlight_id)

    @router.post("/api/layout")
    async def apply_layout(config: LayoutConfig | None = None) -> dict[str, NotePosition]:
        return annotator.apply_layout(config)

    @router.put("/api/geometry")
    async def update_geometry(geometry: GeometryRequest) -> ConnectorLayout:
        annotator.geometry.update(geometry.note_rects, geometry.anchors, geometry.canvas)
        return refresher.refresh()

    @router.get("/api/connectors")
    async def get_connector_layout() -> ConnectorLayout:
        return refresher.layout

    router.post("/api/selections")(_create_selection_endpoint(annotator))
    _create_note_endpoints(annotator, router)
    _create_link_endpoints(annotator, router)
    _create_exchange_endpoints(store, router)

    return router
