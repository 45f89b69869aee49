import sys

from loguru import logger

from poetnotes.annotator import Annotator
from poetnotes.api import create_app
from poetnotes.autosave import AutoSaver
from poetnotes.config import settings
from poetnotes.connectors.refresher import ConnectorRefresher
from poetnotes.graph_store.store import GraphStore
from poetnotes.persistence.local import LocalProjectRepository

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

logger.info(f"Loading poetry notes project from {settings.project_path}")
repository = LocalProjectRepository(settings.project_path)
store = GraphStore(repository=repository)
annotator = Annotator(store)
autosaver = AutoSaver(store, interval_seconds=settings.autosave_interval_seconds)
refresher = ConnectorRefresher(
    store, annotator.geometry, repoll_seconds=settings.connector_repoll_seconds
)
app = create_app(annotator=annotator, autosaver=autosaver, refresher=refresher)
