"""Tests for importance levels and the shared style table."""

from __future__ import annotations

import pytest

from mindnote.core.levels import (
    ALL_LEVELS,
    CLEAR,
    LEVEL_ORDER,
    LEVEL_STYLES,
    ImportanceLevel,
    coerce_level,
    priority,
    style_for,
)


def test_level_order_is_highest_priority_first() -> None:
    assert [level.value for level in LEVEL_ORDER] == [
        "critical",
        "important",
        "opinion",
        "reference",
        "question",
        "idea",
        "data",
    ]
    assert priority(ImportanceLevel.CRITICAL) == 0
    assert priority(ImportanceLevel.DATA) == 6
    assert len(ALL_LEVELS) == 7


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("critical", ImportanceLevel.CRITICAL),
        ("  Idea ", ImportanceLevel.IDEA),
        ("DATA", ImportanceLevel.DATA),
        (ImportanceLevel.OPINION, ImportanceLevel.OPINION),
        ("none", CLEAR),
        ("NONE", CLEAR),
    ],
)
def test_coerce_level_accepts_enum_and_strings(raw: object, expected: object) -> None:
    assert coerce_level(raw) == expected


@pytest.mark.parametrize("raw", ["urgent", "", 3, None])
def test_coerce_level_rejects_unknown_values(raw: object) -> None:
    with pytest.raises(ValueError):
        coerce_level(raw)


def test_every_level_has_one_style() -> None:
    assert set(LEVEL_STYLES) == set(ALL_LEVELS)
    assert LEVEL_STYLES[ImportanceLevel.CRITICAL].background == "#ffcdd2"
    assert LEVEL_STYLES[ImportanceLevel.DATA].background == "#bdbdbd"
    assert LEVEL_STYLES[ImportanceLevel.CRITICAL].weight > LEVEL_STYLES[ImportanceLevel.IDEA].weight


def test_style_for_converts_background_to_rgb() -> None:
    style = style_for("important")

    assert style.label == "Important"
    assert style.rgb() == (0xFF, 0xCC, 0x80)


def test_style_for_rejects_clear_command() -> None:
    with pytest.raises(ValueError):
        style_for(CLEAR)


def test_str_of_level_is_its_wire_value() -> None:
    assert str(ImportanceLevel.QUESTION) == "question"
