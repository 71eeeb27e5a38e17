"""Filter and render importance-annotated text.

Two render modes share one segment walk:

* extraction: only visible text, concatenated. Used for read-only display and
  as the haystack handed to search.
* positional: every segment, visible or not, so an overlay painted under a
  live editor stays aligned with the unfiltered content character by character.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import overload, Literal

from ..core.blocks import AttachmentBlock, Memo, TextBlock
from ..core.levels import ALL_LEVELS, ImportanceLevel, coerce_level, priority
from ..core.ranges import AnnotationRange, sort_ranges

__all__ = [
    "FilterState",
    "RenderMode",
    "Segment",
    "extract_text",
    "hidden_run_spacer",
    "highest_level",
    "importance_counts",
    "is_attachment_visible",
    "is_default_filter_state",
    "is_text_visible",
    "positional_segments",
    "render",
    "segments",
]

LOGGER = logging.getLogger(__name__)

LevelFilter = Iterable[ImportanceLevel | str] | None


class RenderMode(str, enum.Enum):
    EXTRACTION = "extraction"
    POSITIONAL = "positional"


@dataclass(slots=True, frozen=True)
class FilterState:
    """Importance filter as chosen in the UI.

    ``active_levels=None`` means every level is shown; an empty set means none
    is. ``show_general=None`` behaves like ``True``.
    """

    active_levels: frozenset[ImportanceLevel] | None = None
    show_general: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "active_levels", _normalize_levels(self.active_levels))

    @property
    def is_default(self) -> bool:
        return is_default_filter_state(self.active_levels, self.show_general)


@dataclass(slots=True, frozen=True)
class Segment:
    """Maximal run of content that is either one range or a general gap."""

    text: str
    start: int
    end: int
    level: ImportanceLevel | None
    visible: bool

    @property
    def is_general(self) -> bool:
        return self.level is None


def _normalize_levels(active_levels: LevelFilter) -> frozenset[ImportanceLevel] | None:
    if active_levels is None:
        return None
    normalized = set()
    for value in active_levels:
        level = coerce_level(value)
        if level in ALL_LEVELS:
            normalized.add(level)
    return frozenset(normalized)


def is_default_filter_state(active_levels: LevelFilter = None, show_general: bool | None = None) -> bool:
    """Return ``True`` when every level and the general content are visible."""

    levels = _normalize_levels(active_levels)
    levels_default = levels is None or levels == ALL_LEVELS
    return levels_default and show_general is not False


def _level_visible(level: ImportanceLevel, levels: frozenset[ImportanceLevel] | None) -> bool:
    return levels is None or level in levels


def _walk(
    content: str,
    ranges: Iterable[AnnotationRange] | None,
    levels: frozenset[ImportanceLevel] | None,
    show_general: bool | None,
) -> Iterator[Segment]:
    length = len(content)
    general_visible = show_general is not False
    cursor = 0
    for item in sort_ranges(ranges):
        start = max(item.start, cursor)
        end = min(item.end, length)
        if start >= end:
            if item.start >= length:
                LOGGER.debug("Skipping range %s beyond content length %d", item, length)
            continue
        if start > cursor:
            yield Segment(content[cursor:start], cursor, start, None, general_visible)
        yield Segment(content[start:end], start, end, item.level, _level_visible(item.level, levels))
        cursor = end
    if cursor < length:
        yield Segment(content[cursor:], cursor, length, None, general_visible)


def segments(
    content: str,
    ranges: Iterable[AnnotationRange] | None = None,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> list[Segment]:
    """Split ``content`` into labelled and general segments with visibility flags."""

    return list(_walk(content or "", ranges, _normalize_levels(active_levels), show_general))


@overload
def render(
    content: str,
    ranges: Iterable[AnnotationRange] | None,
    active_levels: LevelFilter,
    show_general: bool | None,
    mode: Literal[RenderMode.EXTRACTION] = ...,
) -> str: ...


@overload
def render(
    content: str,
    ranges: Iterable[AnnotationRange] | None,
    active_levels: LevelFilter,
    show_general: bool | None,
    mode: Literal[RenderMode.POSITIONAL],
) -> list[Segment]: ...


def render(
    content: str,
    ranges: Iterable[AnnotationRange] | None = None,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
    mode: RenderMode | str = RenderMode.EXTRACTION,
) -> str | list[Segment]:
    """Render ``content`` under a filter in extraction or positional mode."""

    resolved = RenderMode(mode)
    parts = segments(content, ranges, active_levels, show_general)
    if resolved is RenderMode.POSITIONAL:
        return parts
    return "".join(part.text for part in parts if part.visible)


def extract_text(
    content: str,
    ranges: Iterable[AnnotationRange] | None = None,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> str:
    return render(content, ranges, active_levels, show_general, RenderMode.EXTRACTION)


def positional_segments(
    content: str,
    ranges: Iterable[AnnotationRange] | None = None,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> list[Segment]:
    return render(content, ranges, active_levels, show_general, RenderMode.POSITIONAL)


def highest_level(ranges: Iterable[AnnotationRange] | None) -> ImportanceLevel | None:
    """Return the highest-priority level present in ``ranges``."""

    levels = {item.level for item in ranges or ()}
    if not levels:
        return None
    return min(levels, key=priority)


# ---------------------------------------------------------------------------
# Block visibility
# ---------------------------------------------------------------------------
def is_text_visible(
    content: str,
    ranges: Iterable[AnnotationRange] | None,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> bool:
    """Return ``True`` when a text block keeps any visible segment under the filter."""

    levels = _normalize_levels(active_levels)
    if is_default_filter_state(levels, show_general):
        return True
    if not content:
        return show_general is not False
    return any(part.visible for part in _walk(content, ranges, levels, show_general))


def is_attachment_visible(
    importance: ImportanceLevel | None,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> bool:
    """Visibility of a block carrying a single optional importance tag."""

    if importance is not None:
        return _level_visible(importance, _normalize_levels(active_levels))
    return show_general is not False


def importance_counts(memo: Memo, active_levels: LevelFilter = None) -> tuple[int, int]:
    """Return ``(filtered, total)`` annotation counts for ``memo``.

    ``total`` counts every text range and every tagged attachment; ``filtered``
    counts those whose level is in ``active_levels`` (nothing when absent).
    """

    levels = _normalize_levels(active_levels) or frozenset()
    filtered = total = 0
    for block in memo.blocks:
        if isinstance(block, TextBlock):
            tags = [item.level for item in block.ranges]
        elif isinstance(block, AttachmentBlock) and block.importance is not None:
            tags = [block.importance]
        else:
            continue
        total += len(tags)
        filtered += sum(1 for level in tags if level in levels)
    return filtered, total


def hidden_run_spacer(consecutive_hidden: int) -> str:
    """CSS height collapsing a run of hidden blocks into a small gap."""

    if consecutive_hidden <= 1:
        return "0"
    return "0.8em"
