"""Core domain types: importance levels, annotation ranges and blocks."""

from .blocks import (
    AttachmentBlock,
    BlockFormatError,
    ContentBlock,
    Memo,
    TextBlock,
    Visibility,
    block_from_dict,
    block_to_dict,
    memo_from_dict,
    memo_to_dict,
)
from .levels import ALL_LEVELS, CLEAR, LEVEL_ORDER, LEVEL_STYLES, ImportanceLevel, coerce_level, style_for
from .ranges import AnnotationRange, ranges_overlap, sort_ranges

__all__ = [
    "ALL_LEVELS",
    "AnnotationRange",
    "AttachmentBlock",
    "BlockFormatError",
    "CLEAR",
    "ContentBlock",
    "ImportanceLevel",
    "LEVEL_ORDER",
    "LEVEL_STYLES",
    "Memo",
    "TextBlock",
    "Visibility",
    "block_from_dict",
    "block_to_dict",
    "coerce_level",
    "memo_from_dict",
    "memo_to_dict",
    "ranges_overlap",
    "sort_ranges",
    "style_for",
]
