"""Importance levels and the shared level style table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Final, Literal, Mapping, Tuple, Union

ColorTuple = Tuple[int, int, int]


class ImportanceLevel(str, Enum):
    """Mutually exclusive importance categories, declared highest priority first."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    OPINION = "opinion"
    REFERENCE = "reference"
    QUESTION = "question"
    IDEA = "idea"
    DATA = "data"

    def __str__(self) -> str:
        return self.value


CLEAR: Final = "none"
PaintLevel = Union[ImportanceLevel, Literal["none"]]

LEVEL_ORDER: tuple[ImportanceLevel, ...] = tuple(ImportanceLevel)
ALL_LEVELS: frozenset[ImportanceLevel] = frozenset(LEVEL_ORDER)
_PRIORITY = {level: index for index, level in enumerate(LEVEL_ORDER)}


def coerce_level(value: Any) -> PaintLevel:
    """Return the :class:`ImportanceLevel` (or :data:`CLEAR`) named by ``value``."""

    if isinstance(value, ImportanceLevel):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Importance level must be a string, got {type(value).__name__}")
    normalized = value.strip().lower()
    if normalized == CLEAR:
        return CLEAR
    try:
        return ImportanceLevel(normalized)
    except ValueError as exc:
        raise ValueError(f"Unknown importance level: {value!r}") from exc


def priority(level: ImportanceLevel) -> int:
    """Return the position of ``level`` in :data:`LEVEL_ORDER` (0 is highest)."""

    return _PRIORITY[level]


@dataclass(slots=True, frozen=True)
class LevelStyle:
    """Display attributes for one importance level."""

    label: str
    background: str
    border: str
    weight: int = 500

    def rgb(self) -> ColorTuple:
        """Return the background color as an RGB tuple."""

        text = self.background.lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ValueError(f"Unsupported color format: {self.background!r}")
        return tuple(int(text[i : i + 2], 16) for i in range(0, 6, 2))  # type: ignore[return-value]


LEVEL_STYLES: Mapping[ImportanceLevel, LevelStyle] = MappingProxyType(
    {
        ImportanceLevel.CRITICAL: LevelStyle("Critical", "#ffcdd2", "#f44336", weight=600),
        ImportanceLevel.IMPORTANT: LevelStyle("Important", "#ffcc80", "#ff9800", weight=600),
        ImportanceLevel.OPINION: LevelStyle("Opinion", "#e1bee7", "#9c27b0"),
        ImportanceLevel.REFERENCE: LevelStyle("Reference", "#81d4fa", "#2196f3"),
        ImportanceLevel.QUESTION: LevelStyle("Question", "#fff59d", "#fbc02d"),
        ImportanceLevel.IDEA: LevelStyle("Idea", "#c8e6c9", "#4caf50"),
        ImportanceLevel.DATA: LevelStyle("Data", "#bdbdbd", "#616161"),
    }
)
CLEAR_LABEL = "Clear highlight"


def style_for(level: ImportanceLevel | str) -> LevelStyle:
    """Return the shared style entry for ``level``."""

    resolved = coerce_level(level)
    if resolved == CLEAR:
        raise ValueError("The clear command has no display style")
    return LEVEL_STYLES[resolved]  # type: ignore[index]


__all__ = [
    "ALL_LEVELS",
    "CLEAR",
    "CLEAR_LABEL",
    "ColorTuple",
    "ImportanceLevel",
    "LEVEL_ORDER",
    "LEVEL_STYLES",
    "LevelStyle",
    "PaintLevel",
    "coerce_level",
    "priority",
    "style_for",
]
