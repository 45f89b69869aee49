from typing import Callable, Protocol

ContentListener = Callable[[str], None]


class DocumentModel(Protocol):
    """Protocol for the rich-text document holding the poem."""

    @property
    def content(self) -> str:
        """Current content, including anchor markers."""
        ...

    def contains_anchor(self, anchor_id: str) -> bool:
        """Whether the anchor id still appears in any marker."""
        ...

    def tag_range(
        self, start: int, end: int, anchor_ids: list[str], color: str | None = None
    ) -> str:
        """Tag a visible-text range with anchor ids and return the new content."""
        ...

    def on_change(self, listener: ContentListener) -> Callable[[], None]:
        """Register a listener called with the new content on every change."""
        ...
