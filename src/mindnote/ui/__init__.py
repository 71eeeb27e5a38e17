"""UI-facing infrastructure shared by the editor and search surfaces."""

from .events import (
    BlockContentEdited,
    BlockSaved,
    BlockSaveFailed,
    Event,
    EventBus,
    FilterChanged,
    RangesPainted,
)

__all__ = [
    "BlockContentEdited",
    "BlockSaveFailed",
    "BlockSaved",
    "Event",
    "EventBus",
    "FilterChanged",
    "RangesPainted",
]
