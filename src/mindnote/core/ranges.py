"""Structured helpers for representing importance-annotated text spans."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .levels import CLEAR, ImportanceLevel, coerce_level


@dataclass(slots=True, frozen=True)
class AnnotationRange:
    """Half-open ``[start, end)`` span of a text block tagged with one level.

    Offsets are Python string indices into the owning block's content.
    """

    start: int
    end: int
    level: ImportanceLevel

    def __post_init__(self) -> None:
        start = self._coerce_index(self.start, "start")
        end = self._coerce_index(self.end, "end")
        if end <= start:
            raise ValueError(f"AnnotationRange requires start < end (got {start}, {end})")
        level = coerce_level(self.level)
        if level == CLEAR:
            raise ValueError("The clear command cannot be stored in a range")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "level", level)

    @staticmethod
    def _coerce_index(value: Any, label: str) -> int:
        if isinstance(value, bool):
            raise ValueError(f"AnnotationRange {label} must be an integer")
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"AnnotationRange {label} must be an integer") from exc
        if number < 0:
            raise ValueError(f"AnnotationRange {label} must not be negative")
        return number

    @property
    def length(self) -> int:
        """Return the width of the range."""

        return self.end - self.start

    def overlaps(self, start: int, end: int) -> bool:
        """Return ``True`` when ``[start, end)`` shares at least one offset with this range."""

        return not (self.end <= start or self.start >= end)

    def to_dict(self) -> dict[str, Any]:
        """Return the range in the persisted ``{start, end, level}`` shape."""

        return {"start": self.start, "end": self.end, "level": self.level.value}

    @classmethod
    def from_value(cls, value: Any) -> AnnotationRange:
        """Coerce ``value`` into an :class:`AnnotationRange`."""

        if isinstance(value, AnnotationRange):
            return value
        if isinstance(value, Mapping):
            missing = [key for key in ("start", "end", "level") if value.get(key) is None]
            if missing:
                raise ValueError(f"AnnotationRange mappings require {', '.join(missing)}")
            return cls(value["start"], value["end"], value["level"])
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) != 3:
                raise ValueError("AnnotationRange sequences must have exactly three entries")
            return cls(seq[0], seq[1], seq[2])
        raise TypeError("Unsupported AnnotationRange input")


def sort_ranges(ranges: Iterable[AnnotationRange] | None) -> list[AnnotationRange]:
    """Return ``ranges`` ordered by start offset (stable)."""

    return sorted(ranges or (), key=lambda item: item.start)


def ranges_overlap(ranges: Iterable[AnnotationRange] | None) -> bool:
    """Return ``True`` when any two ranges cover the same offset."""

    previous_end = -1
    for item in sort_ranges(ranges):
        if item.start < previous_end:
            return True
        previous_end = max(previous_end, item.end)
    return False


__all__ = ["AnnotationRange", "ranges_overlap", "sort_ranges"]
