"""Importance-annotation engine: paint, render, visibility and edit gating."""

from .gate import EditableView, ReadOnlyFilterError, can_edit, editable_view
from .paint import BlockSelection, clamp_span, paint, paint_block, paint_selections, tag_attachment
from .render import (
    FilterState,
    RenderMode,
    Segment,
    extract_text,
    hidden_run_spacer,
    highest_level,
    importance_counts,
    is_attachment_visible,
    is_default_filter_state,
    is_text_visible,
    positional_segments,
    render,
    segments,
)

__all__ = [
    "BlockSelection",
    "EditableView",
    "FilterState",
    "ReadOnlyFilterError",
    "RenderMode",
    "Segment",
    "can_edit",
    "clamp_span",
    "editable_view",
    "extract_text",
    "hidden_run_spacer",
    "highest_level",
    "importance_counts",
    "is_attachment_visible",
    "is_default_filter_state",
    "is_text_visible",
    "paint",
    "paint_block",
    "paint_selections",
    "positional_segments",
    "render",
    "segments",
    "tag_attachment",
]
