"""Reference document model over the editor's HTML markup."""

import html
import re
from typing import Callable

from loguru import logger
from pydantic import BaseModel

from poetnotes.document.base import ContentListener, DocumentModel
from poetnotes.document.markers import (
    ANCHOR_ID_ATTR_PATTERN,
    HIGHLIGHT_CLASS,
    contains_anchor,
    join_anchor_ids,
    split_anchor_ids,
)

_TOKEN_PATTERN = re.compile(r"(<[^>]+>)")
_TEXT_UNIT_PATTERN = re.compile(r"&#?\w+;|.", re.DOTALL)
_SPAN_OPEN_PATTERN = re.compile(r"^<span\b", re.IGNORECASE)
_SPAN_CLOSE_PATTERN = re.compile(r"^</span\s*>", re.IGNORECASE)
_BLOCK_OPEN_PATTERN = re.compile(r"^<p\b", re.IGNORECASE)


class Selection(BaseModel):
    """A committed text selection, trimmed of surrounding whitespace."""

    text: str
    start_offset: int
    end_offset: int
    line_index: int


def _anchor_open_tag(anchor_ids: list[str], color: str | None) -> str:
    attributes = [
        f'class="{HIGHLIGHT_CLASS}"',
        f'data-highlight-id="{html.escape(join_anchor_ids(anchor_ids))}"',
    ]
    if color:
        attributes.append(f'data-highlight-color="{html.escape(color)}"')
    return f"<span {' '.join(attributes)}>"


def _span_anchor_ids(tag: str) -> list[str]:
    match = ANCHOR_ID_ATTR_PATTERN.search(tag)
    return split_anchor_ids(match.group(1)) if match else []


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def _text_units(text: str) -> list[str]:
    """Split markup text into visible characters.

    An entity that decodes to one character is a single unit; anything else
    starting with ``&`` is taken literally, character by character.
    """
    units: list[str] = []
    for unit in _TEXT_UNIT_PATTERN.findall(text):
        if len(unit) > 1 and len(html.unescape(unit)) != 1:
            units.extend(unit)
        else:
            units.append(unit)
    return units


def _visible(unit: str) -> str:
    return html.unescape(unit) if len(unit) > 1 else unit


class MarkupDocument(DocumentModel):
    """Poem content as HTML, with anchors stored as ``poet-highlight`` spans.

    Offsets passed to :meth:`selection` and :meth:`tag_range` count visible
    characters only; tags are skipped and an HTML entity counts as one
    character.
    """

    def __init__(self, content: str = "") -> None:
        self._content = content
        self._listeners: list[ContentListener] = []

    @property
    def content(self) -> str:
        return self._content

    @property
    def plain_text(self) -> str:
        tokens = _TOKEN_PATTERN.split(self._content)
        return "".join(
            _visible(unit)
            for token in tokens
            if not token.startswith("<")
            for unit in _text_units(token)
        )

    def on_change(self, listener: ContentListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_content(self, content: str) -> None:
        """Replace the content as an edit, notifying listeners."""
        if content == self._content:
            return
        self._content = content
        for listener in list(self._listeners):
            listener(content)

    def load(self, content: str) -> None:
        """Replace the content without notifying (syncing from the store)."""
        self._content = content

    def contains_anchor(self, anchor_id: str) -> bool:
        return contains_anchor(self._content, anchor_id)

    def selection(self, start: int, end: int) -> Selection | None:
        """Describe the visible-text range ``[start, end)``, or None if blank."""
        text = self.plain_text[start:end]
        trimmed = text.strip()
        if not trimmed:
            return None

        start_offset = start + len(text) - len(text.lstrip())
        return Selection(
            text=trimmed,
            start_offset=start_offset,
            end_offset=start_offset + len(trimmed),
            line_index=self._line_index(start_offset),
        )

    def tag_range(
        self, start: int, end: int, anchor_ids: list[str], color: str | None = None
    ) -> str:
        """Wrap the visible-text range in anchor markers.

        A range crossing element boundaries is wrapped once per text run.
        Ids of an enclosing marker are merged into the new one, so the inner
        span carries every anchor covering it.
        """
        if end <= start or not anchor_ids:
            return self._content

        output: list[str] = []
        span_stack: list[list[str]] = []
        offset = 0
        for token in _TOKEN_PATTERN.split(self._content):
            if not token:
                continue
            if token.startswith("<"):
                output.append(token)
                if _SPAN_OPEN_PATTERN.match(token):
                    span_stack.append(_span_anchor_ids(token))
                elif _SPAN_CLOSE_PATTERN.match(token) and span_stack:
                    span_stack.pop()
                continue

            units = _text_units(token)
            low = max(start - offset, 0)
            high = min(end - offset, len(units))
            if low < high:
                enclosing = next((ids for ids in reversed(span_stack) if ids), [])
                output.append("".join(units[:low]))
                output.append(_anchor_open_tag(_unique(enclosing + anchor_ids), color))
                output.append("".join(units[low:high]))
                output.append("</span>")
                output.append("".join(units[high:]))
            else:
                output.append(token)
            offset += len(units)

        self.set_content("".join(output))
        return self._content

    def strip_anchors(self, valid_ids: set[str]) -> str:
        """Drop marker ids not in ``valid_ids``; unwrap markers left empty."""
        output: list[str] = []
        unwrapped: list[bool] = []
        for token in _TOKEN_PATTERN.split(self._content):
            if not token:
                continue
            if _SPAN_OPEN_PATTERN.match(token):
                match = ANCHOR_ID_ATTR_PATTERN.search(token)
                if match:
                    ids = split_anchor_ids(match.group(1))
                    kept = [anchor_id for anchor_id in ids if anchor_id in valid_ids]
                    if not kept:
                        unwrapped.append(True)
                        continue
                    if kept != ids:
                        before, after = token[: match.start(1)], token[match.end(1) :]
                        token = before + join_anchor_ids(kept) + after
                unwrapped.append(False)
            elif _SPAN_CLOSE_PATTERN.match(token):
                if unwrapped and unwrapped.pop():
                    continue
            output.append(token)

        stripped = "".join(output)
        if stripped != self._content:
            logger.debug("Stripped stale anchor markers from document")
            self.set_content(stripped)
        return self._content

    def _line_index(self, visible_offset: int) -> int:
        blocks = 0
        offset = 0
        for token in _TOKEN_PATTERN.split(self._content):
            if not token:
                continue
            if token.startswith("<"):
                if _BLOCK_OPEN_PATTERN.match(token):
                    blocks += 1
                continue
            length = len(_text_units(token))
            if offset + length > visible_offset:
                break
            offset += length
        return max(blocks - 1, 0)
