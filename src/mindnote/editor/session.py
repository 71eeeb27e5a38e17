"""Editing session for one text block.

The session is the single writer of its block: it owns the current content,
the range list and the importance filter, and routes every mutation through
the paint engine and the edit gate.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable

from ..annotations.gate import EditableView, ReadOnlyFilterError, editable_view
from ..annotations.paint import clamp_span, paint_block
from ..annotations.render import FilterState, Segment, highest_level, positional_segments
from ..core.blocks import TextBlock
from ..core.levels import CLEAR, ImportanceLevel, PaintLevel, coerce_level
from ..ui.events import BlockContentEdited, EventBus, FilterChanged, RangesPainted

if TYPE_CHECKING:  # pragma: no cover
    from ..services.autosave import AutosaveScheduler

LOGGER = logging.getLogger(__name__)


class BlockEditorSession:
    """Binds a :class:`TextBlock` to an editable surface.

    Raw edits and paints are refused with :class:`ReadOnlyFilterError` while
    the filter hides anything, because the surface then shows extracted text
    whose offsets do not match the stored content.
    """

    def __init__(
        self,
        block: TextBlock,
        *,
        event_bus: EventBus | None = None,
        autosaver: AutosaveScheduler | None = None,
        on_history_checkpoint: Callable[[TextBlock], None] | None = None,
    ) -> None:
        self._block = block
        self._filter = FilterState()
        self._selection: tuple[int, int] | None = None
        self._bus = event_bus
        self._autosaver = autosaver
        self._on_history_checkpoint = on_history_checkpoint
        self._dirty = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def block(self) -> TextBlock:
        return self._block

    @property
    def filter_state(self) -> FilterState:
        return self._filter

    @property
    def selection(self) -> tuple[int, int] | None:
        return self._selection

    @property
    def dirty(self) -> bool:
        return self._dirty

    def mark_saved(self, saved: TextBlock | None = None) -> None:
        """Clear the dirty flag unless ``saved`` is an older snapshot than the current block."""

        if saved is not None and saved != self._block:
            LOGGER.debug("Block %s saved an outdated snapshot; still dirty", self._block.id)
            return
        self._dirty = False

    def can_edit(self) -> bool:
        return self._filter.is_default

    def view(self) -> EditableView:
        """Return what the editable surface should show right now."""

        return editable_view(self._block, self._filter.active_levels, self._filter.show_general)

    def overlay_segments(self) -> list[Segment]:
        """Positional segments for the highlight layer under the editor."""

        return positional_segments(
            self._block.content,
            self._block.ranges,
            self._filter.active_levels,
            self._filter.show_general,
        )

    def highest_level(self) -> ImportanceLevel | None:
        return highest_level(self._block.ranges)

    # ------------------------------------------------------------------
    # Filter and selection
    # ------------------------------------------------------------------
    def set_filter(
        self,
        active_levels: Iterable[ImportanceLevel | str] | None = None,
        show_general: bool | None = None,
    ) -> None:
        self._filter = FilterState(active_levels, show_general)
        if not self._filter.is_default:
            self._selection = None
        if self._bus is not None:
            self._bus.publish(FilterChanged(block_id=self._block.id, is_default=self._filter.is_default))

    def select(self, start: int, end: int) -> None:
        """Record the surface selection; collapsed or inverted selections clear it."""

        if not self.can_edit() or end <= start:
            self._selection = None
            return
        self._selection = (start, end)

    def clear_selection(self) -> None:
        self._selection = None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def apply_importance(self, level: PaintLevel | str) -> TextBlock:
        """Paint the current selection with ``level`` (or clear it)."""

        self._require_editable("paint")
        if self._selection is None:
            LOGGER.debug("apply_importance(%s) ignored: no selection in block %s", level, self._block.id)
            return self._block
        resolved = coerce_level(level)
        span = clamp_span(*self._selection, len(self._block.content))
        self._selection = None
        if span is None:
            LOGGER.debug(
                "apply_importance(%s) ignored: selection lies past the end of block %s", level, self._block.id
            )
            return self._block
        start, end = span
        self._block = paint_block(self._block, start, end, resolved)
        self._dirty = True
        if self._bus is not None:
            self._bus.publish(
                RangesPainted(
                    block_id=self._block.id,
                    start=start,
                    end=end,
                    level=None if resolved == CLEAR else resolved,  # type: ignore[arg-type]
                    range_count=len(self._block.ranges),
                )
            )
        if self._on_history_checkpoint is not None:
            self._on_history_checkpoint(self._block)
        self._schedule_save()
        return self._block

    def edit_content(self, content: str) -> TextBlock:
        """Replace the raw content. Range offsets are left exactly as stored."""

        self._require_editable("edit")
        if content == self._block.content:
            return self._block
        self._block = self._block.with_content(content)
        self._dirty = True
        if self._bus is not None:
            self._bus.publish(BlockContentEdited(block_id=self._block.id, length=len(content)))
        self._schedule_save()
        return self._block

    def _require_editable(self, action: str) -> None:
        if not self.can_edit():
            raise ReadOnlyFilterError(
                f"Cannot {action} block {self._block.id} while an importance filter is active"
            )

    def _schedule_save(self) -> None:
        if self._autosaver is not None:
            self._autosaver.schedule(self._block)
