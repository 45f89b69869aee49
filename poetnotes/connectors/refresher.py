from typing import Callable

from poetnotes.config import settings
from poetnotes.connectors.base import GeometryProvider
from poetnotes.connectors.compute import ConnectorLayout, compute_connectors
from poetnotes.domain.project import Project
from poetnotes.graph_store.store import GraphStore
from poetnotes.scheduling import RepeatingTask

LayoutListener = Callable[[ConnectorLayout], None]


class ConnectorRefresher:
    """Keeps the connector layout current for the presentation layer.

    Recomputes on every store change and on the ``connector-repoll`` task,
    since measured rectangles change without any store change (text reflow,
    font loading). Listeners hear only about layouts that differ from the
    previous one.
    """

    def __init__(
        self,
        store: GraphStore,
        provider: GeometryProvider,
        repoll_seconds: float = settings.connector_repoll_seconds,
    ) -> None:
        self._store = store
        self._provider = provider
        self._listeners: list[LayoutListener] = []
        self._layout = compute_connectors(store.project, provider)
        self._unsubscribe = store.subscribe(self._on_store_change)
        self.task = RepeatingTask("connector-repoll", repoll_seconds, self.refresh)

    @property
    def provider(self) -> GeometryProvider:
        return self._provider

    @property
    def layout(self) -> ConnectorLayout:
        return self._layout

    def on_update(self, listener: LayoutListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> ConnectorLayout:
        layout = compute_connectors(self._store.project, self._provider)
        if layout != self._layout:
            self._layout = layout
            for listener in list(self._listeners):
                listener(layout)
        return self._layout

    def close(self) -> None:
        """Stop following store changes."""
        self._unsubscribe()

    def _on_store_change(self, _: Project) -> None:
        self.refresh()
