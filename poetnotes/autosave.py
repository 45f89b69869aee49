from loguru import logger

from poetnotes.config import settings
from poetnotes.graph_store.store import GraphStore
from poetnotes.scheduling import RepeatingTask


class AutoSaver:
    """Periodically saves the store's latest snapshot when it has changed."""

    def __init__(
        self, store: GraphStore, interval_seconds: float = settings.autosave_interval_seconds
    ) -> None:
        self._store = store
        self.task = RepeatingTask("autosave", interval_seconds, self.save_if_changed)

    def save_if_changed(self) -> bool:
        """Save when there are unsaved changes; return whether it saved."""
        if not self._store.has_unsaved_changes:
            return False
        logger.debug("Auto-saving project")
        self._store.save()
        return True
