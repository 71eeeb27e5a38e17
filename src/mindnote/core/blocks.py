"""Memo and content block models plus their JSON codec."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Protocol, runtime_checkable

from .levels import CLEAR, ImportanceLevel, coerce_level
from .ranges import AnnotationRange

TEXT_BLOCK_TYPE = "text"
ATTACHMENT_KINDS: frozenset[str] = frozenset({"image", "file", "bookmark", "callout", "quote", "code"})


class BlockFormatError(ValueError):
    """Raised when a persisted block payload cannot be decoded."""


@runtime_checkable
class Visibility(Protocol):
    """Anything that can answer whether it survives the current importance filter."""

    def is_visible(
        self,
        active_levels: Iterable[ImportanceLevel | str] | None = None,
        show_general: bool | None = None,
    ) -> bool:
        ...


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True, frozen=True)
class TextBlock:
    """Plain-text block annotated with non-overlapping importance ranges."""

    id: str = field(default_factory=_new_id)
    content: str = ""
    ranges: tuple[AnnotationRange, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ranges", tuple(AnnotationRange.from_value(item) for item in self.ranges))

    def with_ranges(self, ranges: Iterable[AnnotationRange]) -> TextBlock:
        return replace(self, ranges=tuple(ranges))

    def with_content(self, content: str) -> TextBlock:
        """Return a copy holding ``content``; existing range offsets are kept as-is."""

        return replace(self, content=content)

    def is_visible(
        self,
        active_levels: Iterable[ImportanceLevel | str] | None = None,
        show_general: bool | None = None,
    ) -> bool:
        from ..annotations.render import is_text_visible

        return is_text_visible(self.content, self.ranges, active_levels, show_general)


@dataclass(slots=True, frozen=True)
class AttachmentBlock:
    """Non-text block (image, file, bookmark, callout, quote, code) with one optional tag."""

    kind: str
    id: str = field(default_factory=_new_id)
    importance: ImportanceLevel | None = None
    payload: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if self.kind not in ATTACHMENT_KINDS:
            raise BlockFormatError(f"Unsupported attachment kind: {self.kind!r}")
        importance = self.importance
        if importance is not None:
            importance = coerce_level(importance)
            if importance == CLEAR:
                importance = None
        object.__setattr__(self, "importance", importance)
        object.__setattr__(self, "payload", dict(self.payload))

    def with_importance(self, importance: ImportanceLevel | None) -> AttachmentBlock:
        return replace(self, importance=importance)

    def is_visible(
        self,
        active_levels: Iterable[ImportanceLevel | str] | None = None,
        show_general: bool | None = None,
    ) -> bool:
        from ..annotations.render import is_attachment_visible

        return is_attachment_visible(self.importance, active_levels, show_general)


ContentBlock = TextBlock | AttachmentBlock


@dataclass(slots=True, frozen=True)
class Memo:
    """A memo on the canvas: a title plus an ordered list of blocks."""

    id: str = field(default_factory=_new_id)
    title: str = ""
    blocks: tuple[ContentBlock, ...] = ()
    importance: ImportanceLevel | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", tuple(self.blocks))

    def with_blocks(self, blocks: Iterable[ContentBlock]) -> Memo:
        return replace(self, blocks=tuple(blocks))

    def block(self, block_id: str) -> ContentBlock | None:
        for item in self.blocks:
            if item.id == block_id:
                return item
        return None


# ---------------------------------------------------------------------------
# JSON codec
# ---------------------------------------------------------------------------
def block_to_dict(block: ContentBlock) -> dict[str, Any]:
    """Serialize ``block`` into the persisted JSON shape."""

    if isinstance(block, TextBlock):
        return {
            "id": block.id,
            "type": TEXT_BLOCK_TYPE,
            "content": block.content,
            "importanceRanges": [item.to_dict() for item in block.ranges],
        }
    payload: dict[str, Any] = dict(block.payload)
    payload["id"] = block.id
    payload["type"] = block.kind
    if block.importance is not None:
        payload["importance"] = block.importance.value
    else:
        payload.pop("importance", None)
    return payload


def block_from_dict(payload: Mapping[str, Any]) -> ContentBlock:
    """Decode a persisted block payload."""

    if not isinstance(payload, Mapping):
        raise BlockFormatError("Block payload must be a mapping")
    block_type = payload.get("type")
    block_id = payload.get("id")
    if not isinstance(block_id, str) or not block_id:
        raise BlockFormatError("Block payload requires a non-empty string id")
    if block_type == TEXT_BLOCK_TYPE:
        content = payload.get("content") or ""
        if not isinstance(content, str):
            raise BlockFormatError(f"Text block {block_id} content must be a string")
        raw_ranges = payload.get("importanceRanges") or []
        try:
            ranges = tuple(AnnotationRange.from_value(item) for item in raw_ranges)
        except (TypeError, ValueError) as exc:
            raise BlockFormatError(f"Text block {block_id} has an invalid range: {exc}") from exc
        return TextBlock(id=block_id, content=content, ranges=ranges)
    if block_type in ATTACHMENT_KINDS:
        extra = {key: value for key, value in payload.items() if key not in {"id", "type", "importance"}}
        try:
            return AttachmentBlock(
                kind=block_type,
                id=block_id,
                importance=payload.get("importance"),
                payload=extra,
            )
        except ValueError as exc:
            raise BlockFormatError(f"Attachment block {block_id}: {exc}") from exc
    raise BlockFormatError(f"Unknown block type: {block_type!r}")


def memo_to_dict(memo: Memo) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": memo.id,
        "title": memo.title,
        "blocks": [block_to_dict(item) for item in memo.blocks],
    }
    if memo.importance is not None:
        payload["importance"] = memo.importance.value
    return payload


def memo_from_dict(payload: Mapping[str, Any]) -> Memo:
    if not isinstance(payload, Mapping):
        raise BlockFormatError("Memo payload must be a mapping")
    memo_id = payload.get("id")
    if not isinstance(memo_id, str) or not memo_id:
        raise BlockFormatError("Memo payload requires a non-empty string id")
    importance = payload.get("importance")
    if importance is not None:
        try:
            importance = coerce_level(importance)
        except ValueError as exc:
            raise BlockFormatError(f"Memo {memo_id}: {exc}") from exc
        if importance == CLEAR:
            importance = None
    blocks = tuple(block_from_dict(item) for item in payload.get("blocks") or ())
    return Memo(id=memo_id, title=str(payload.get("title") or ""), blocks=blocks, importance=importance)


__all__ = [
    "ATTACHMENT_KINDS",
    "AttachmentBlock",
    "BlockFormatError",
    "ContentBlock",
    "Memo",
    "TEXT_BLOCK_TYPE",
    "TextBlock",
    "Visibility",
    "block_from_dict",
    "block_to_dict",
    "memo_from_dict",
    "memo_to_dict",
]
