"""Edit gating derived from the importance filter state."""

from __future__ import annotations

from dataclasses import dataclass

from ..core.blocks import TextBlock
from .render import LevelFilter, extract_text, is_default_filter_state

__all__ = ["EditableView", "ReadOnlyFilterError", "can_edit", "editable_view"]


class ReadOnlyFilterError(RuntimeError):
    """Raised when content or ranges are mutated while a filter hides part of the block."""


@dataclass(slots=True, frozen=True)
class EditableView:
    """What the editable surface should display for a block."""

    text: str
    read_only: bool


def can_edit(active_levels: LevelFilter = None, show_general: bool | None = None) -> bool:
    """Raw editing is only allowed while nothing is filtered out.

    Under any other filter the surface shows extracted text, whose offsets do
    not map back onto the stored content.
    """

    return is_default_filter_state(active_levels, show_general)


def editable_view(
    block: TextBlock,
    active_levels: LevelFilter = None,
    show_general: bool | None = None,
) -> EditableView:
    if can_edit(active_levels, show_general):
        return EditableView(text=block.content, read_only=False)
    return EditableView(
        text=extract_text(block.content, block.ranges, active_levels, show_general),
        read_only=True,
    )
