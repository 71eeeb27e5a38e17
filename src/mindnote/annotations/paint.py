"""Painter's-overwrite operations over importance range collections."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..core.blocks import AttachmentBlock, Memo, TextBlock
from ..core.levels import CLEAR, ImportanceLevel, PaintLevel, coerce_level
from ..core.ranges import AnnotationRange

__all__ = [
    "BlockSelection",
    "clamp_span",
    "paint",
    "paint_block",
    "paint_selections",
    "tag_attachment",
]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class BlockSelection:
    """Selected ``[start, end)`` span inside one text block of a memo."""

    block_id: str
    start: int
    end: int


def clamp_span(start: int, end: int, length: int | None = None) -> tuple[int, int] | None:
    """Clamp ``[start, end)`` to ``[0, length]``; return ``None`` when nothing is left."""

    lower = max(0, int(start))
    upper = max(0, int(end))
    if length is not None:
        lower = min(lower, length)
        upper = min(upper, length)
    if upper <= lower:
        return None
    return lower, upper


def paint(
    ranges: Iterable[AnnotationRange] | None,
    start: int,
    end: int,
    level: PaintLevel | str,
    *,
    content_length: int | None = None,
) -> list[AnnotationRange]:
    """Assign ``level`` to ``[start, end)`` (or clear it) and return the new ranges.

    Every existing range overlapping the span loses the overlapping part; at
    most a left and a right remainder survive. Unless ``level`` is the clear
    command, the span itself is appended last as one range. ``ranges`` is not
    modified.
    """

    resolved = coerce_level(level)
    existing = list(ranges or ())
    span = clamp_span(start, end, content_length)
    if span is None:
        LOGGER.debug(
            "Ignoring paint over empty span [%s, %s) (content_length=%s)", start, end, content_length
        )
        return existing
    if span != (start, end):
        LOGGER.debug("Clamped paint span [%s, %s) to [%s, %s)", start, end, *span)
    s, e = span

    updated: list[AnnotationRange] = []
    for item in existing:
        if item.end <= s or item.start >= e:
            updated.append(item)
            continue
        if item.start < s:
            updated.append(AnnotationRange(item.start, s, item.level))
        if item.end > e:
            updated.append(AnnotationRange(e, item.end, item.level))

    if resolved != CLEAR:
        updated.append(AnnotationRange(s, e, resolved))  # type: ignore[arg-type]
    return updated


def paint_block(block: TextBlock, start: int, end: int, level: PaintLevel | str) -> TextBlock:
    """Return ``block`` with ``[start, end)`` painted, clamped to its content."""

    ranges = paint(block.ranges, start, end, level, content_length=len(block.content))
    return block.with_ranges(ranges)


def paint_selections(
    memo: Memo,
    selections: Iterable[BlockSelection] | Mapping[str, tuple[int, int]],
    level: PaintLevel | str,
) -> Memo:
    """Apply one level to a selection in each of several text blocks of ``memo``."""

    if isinstance(selections, Mapping):
        by_block = {block_id: span for block_id, span in selections.items()}
    else:
        by_block = {item.block_id: (item.start, item.end) for item in selections}
    if not by_block:
        return memo

    painted = 0
    blocks = []
    for block in memo.blocks:
        span = by_block.get(block.id)
        if span is None or not isinstance(block, TextBlock):
            blocks.append(block)
            continue
        blocks.append(paint_block(block, span[0], span[1], level))
        painted += 1
    LOGGER.debug("Painted %d block(s) of memo %s with %s", painted, memo.id, level)
    return memo.with_blocks(blocks)


def tag_attachment(block: AttachmentBlock, level: PaintLevel | str) -> AttachmentBlock:
    """Set the whole-block importance of an attachment, or clear it."""

    resolved = coerce_level(level)
    importance: ImportanceLevel | None = None if resolved == CLEAR else resolved  # type: ignore[assignment]
    return block.with_importance(importance)
