from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from poetnotes.annotator import Annotator
from poetnotes.api.endpoints import get_endpoints_router
from poetnotes.autosave import AutoSaver
from poetnotes.connectors.refresher import ConnectorRefresher


def create_app(
    *,
    annotator: Annotator,
    autosaver: AutoSaver | None = None,
    refresher: ConnectorRefresher | None = None,
) -> FastAPI:
    """Create FastAPI app.

    The connector refresher defaults to one polling the annotator's measured
    geometry; its repoll task and the autosave task run for the app's lifetime.
    """
    if refresher is None:
        refresher = ConnectorRefresher(annotator.store, annotator.geometry)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        refresher.task.start()
        if autosaver is not None:
            autosaver.task.start()
        yield
        await refresher.task.stop()
        refresher.close()
        if autosaver is not None:
            await autosaver.task.stop()
            autosaver.save_if_changed()

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router=get_endpoints_router(annotator=annotator, refresher=refresher))

    return app
