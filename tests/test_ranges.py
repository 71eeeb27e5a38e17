"""Tests for :mod:`mindnote.core.ranges`."""

from __future__ import annotations

import pytest

from mindnote.core.levels import ImportanceLevel
from mindnote.core.ranges import AnnotationRange, ranges_overlap, sort_ranges


def test_range_coerces_level_and_offsets() -> None:
    item = AnnotationRange("2", 5, "Critical")

    assert item.start == 2
    assert item.end == 5
    assert item.level is ImportanceLevel.CRITICAL
    assert item.length == 3


@pytest.mark.parametrize(
    "start, end, level",
    [
        (3, 3, "idea"),
        (5, 2, "idea"),
        (-1, 2, "idea"),
        (0, 2, "none"),
        (0, 2, "urgent"),
        (True, 2, "idea"),
    ],
)
def test_range_rejects_invalid_values(start: object, end: object, level: object) -> None:
    with pytest.raises(ValueError):
        AnnotationRange(start, end, level)  # type: ignore[arg-type]


def test_overlaps_uses_half_open_bounds() -> None:
    item = AnnotationRange(2, 5, ImportanceLevel.DATA)

    assert item.overlaps(4, 9)
    assert item.overlaps(0, 3)
    assert not item.overlaps(5, 8)
    assert not item.overlaps(0, 2)


def test_from_value_accepts_mapping_and_sequence() -> None:
    from_mapping = AnnotationRange.from_value({"start": 1, "end": 4, "level": "question"})
    from_sequence = AnnotationRange.from_value((1, 4, "question"))

    assert from_mapping == from_sequence
    assert from_mapping.to_dict() == {"start": 1, "end": 4, "level": "question"}
    assert AnnotationRange.from_value(from_mapping) is from_mapping


def test_from_value_rejects_incomplete_inputs() -> None:
    with pytest.raises(ValueError):
        AnnotationRange.from_value({"start": 1, "end": 4})
    with pytest.raises(ValueError):
        AnnotationRange.from_value((1, 4))
    with pytest.raises(TypeError):
        AnnotationRange.from_value("1-4")


def test_sort_ranges_is_stable_by_start() -> None:
    late = AnnotationRange(6, 8, ImportanceLevel.IDEA)
    early = AnnotationRange(0, 2, ImportanceLevel.DATA)

    assert sort_ranges([late, early]) == [early, late]
    assert sort_ranges(None) == []


def test_ranges_overlap_detects_shared_offsets() -> None:
    disjoint = [AnnotationRange(0, 3, "idea"), AnnotationRange(3, 6, "data")]
    clashing = [AnnotationRange(0, 4, "idea"), AnnotationRange(3, 6, "data")]

    assert not ranges_overlap(disjoint)
    assert ranges_overlap(clashing)
