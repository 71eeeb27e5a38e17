"""Memo search over importance-filtered text.

The annotation engine only extracts visible text; matching happens here.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from .annotations.render import LevelFilter, extract_text, is_attachment_visible
from .core.blocks import AttachmentBlock, ContentBlock, Memo, TextBlock

__all__ = ["SearchHit", "filtered_block_text", "flexible_match", "normalize_text", "search_memos"]

LOGGER = logging.getLogger(__name__)
_WHITESPACE = re.compile(r"\s+")
_METADATA_FIELDS: dict[str, tuple[str, ...]] = {
    "file": ("name",),
    "image": ("alt",),
    "bookmark": ("title", "description", "url"),
    "callout": ("content",),
    "quote": ("content", "author"),
    "code": ("content",),
}


@dataclass(slots=True, frozen=True)
class SearchHit:
    memo_id: str
    block_id: str | None
    text: str


def normalize_text(text: str) -> str:
    """Lower-case ``text`` and drop all whitespace."""

    return _WHITESPACE.sub("", (text or "").lower())


def flexible_match(text: str, query: str) -> bool:
    """Whitespace-insensitive match, falling back to "every query word appears"."""

    needle = normalize_text(query)
    if not needle:
        return False
    if needle in normalize_text(text):
        return True
    words = [word for word in (query or "").lower().split() if word]
    if len(words) > 1:
        haystack = (text or "").lower()
        return all(word in haystack for word in words)
    return False


def filtered_block_text(
    block: ContentBlock,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> str:
    if not isinstance(block, TextBlock) or not block.content:
        return ""
    return extract_text(block.content, block.ranges, active_levels, show_general)


def _metadata_matches(block: AttachmentBlock, query: str) -> str | None:
    for key in _METADATA_FIELDS.get(block.kind, ()):
        value = block.payload.get(key)
        if isinstance(value, str) and flexible_match(value, query):
            return value
    return None


def search_memos(
    memos: Iterable[Memo],
    query: str,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> list[SearchHit]:
    """Return hits for memo titles, filtered text blocks and attachment metadata."""

    if not normalize_text(query):
        return []
    levels = None if active_levels is None else list(active_levels)
    hits: list[SearchHit] = []
    for memo in memos:
        if flexible_match(memo.title, query):
            hits.append(SearchHit(memo_id=memo.id, block_id=None, text=memo.title))
        for block in memo.blocks:
            if isinstance(block, TextBlock):
                text = filtered_block_text(block, levels, show_general)
                if text and flexible_match(text, query):
                    hits.append(SearchHit(memo_id=memo.id, block_id=block.id, text=text))
                continue
            if not is_attachment_visible(block.importance, levels, show_general):
                continue
            matched = _metadata_matches(block, query)
            if matched is not None:
                hits.append(SearchHit(memo_id=memo.id, block_id=block.id, text=matched))
    LOGGER.debug("Search %r matched %d hit(s)", query, len(hits))
    return hits
