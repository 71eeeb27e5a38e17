"""Tests for memo and block models and the JSON codec."""

from __future__ import annotations

import pytest

from mindnote.core.blocks import (
    AttachmentBlock,
    BlockFormatError,
    Memo,
    TextBlock,
    Visibility,
    block_from_dict,
    block_to_dict,
    memo_from_dict,
    memo_to_dict,
)
from mindnote.core.levels import ImportanceLevel
from mindnote.core.ranges import AnnotationRange


def test_text_block_payload_matches_persisted_shape(hello_block: TextBlock) -> None:
    payload = block_to_dict(hello_block)

    assert payload == {
        "id": "block-hello",
        "type": "text",
        "content": "Hello World",
        "importanceRanges": [
            {"start": 0, "end": 3, "level": "critical"},
            {"start": 3, "end": 8, "level": "important"},
        ],
    }
    assert block_from_dict(payload) == hello_block


def test_text_block_without_ranges_decodes_to_empty_tuple() -> None:
    block = block_from_dict({"id": "b1", "type": "text", "content": "plain"})

    assert isinstance(block, TextBlock)
    assert block.ranges == ()


def test_with_content_keeps_range_offsets(hello_block: TextBlock) -> None:
    edited = hello_block.with_content("Hi")

    assert edited.content == "Hi"
    assert edited.ranges == hello_block.ranges
    assert hello_block.content == "Hello World"


def test_attachment_payload_keeps_kind_specific_fields() -> None:
    payload = {
        "id": "q1",
        "type": "quote",
        "content": "Simplicity is prerequisite for reliability.",
        "author": "Dijkstra",
        "importance": "opinion",
    }

    block = block_from_dict(payload)

    assert isinstance(block, AttachmentBlock)
    assert block.kind == "quote"
    assert block.importance is ImportanceLevel.OPINION
    assert block.payload["author"] == "Dijkstra"
    assert block_to_dict(block) == payload


def test_attachment_importance_none_decodes_to_untagged() -> None:
    block = block_from_dict({"id": "img", "type": "image", "alt": "diagram", "importance": "none"})

    assert isinstance(block, AttachmentBlock)
    assert block.importance is None
    assert "importance" not in block_to_dict(block)


def test_unknown_block_type_raises() -> None:
    with pytest.raises(BlockFormatError):
        block_from_dict({"id": "x", "type": "video"})


def test_invalid_range_raises_block_format_error() -> None:
    payload = {
        "id": "b1",
        "type": "text",
        "content": "abc",
        "importanceRanges": [{"start": 2, "end": 1, "level": "idea"}],
    }

    with pytest.raises(BlockFormatError):
        block_from_dict(payload)


def test_missing_id_raises() -> None:
    with pytest.raises(BlockFormatError):
        block_from_dict({"type": "text", "content": "abc"})


def test_memo_round_trip(sample_memo: Memo) -> None:
    payload = memo_to_dict(sample_memo)
    restored = memo_from_dict(payload)

    assert restored == sample_memo
    assert [item["type"] for item in payload["blocks"]] == ["text", "text", "bookmark", "file"]
    assert restored.block("block-link") == sample_memo.blocks[2]
    assert restored.block("missing") is None


def test_blocks_satisfy_visibility_protocol(hello_block: TextBlock) -> None:
    attachment = AttachmentBlock(kind="code", payload={"content": "print()"})

    assert isinstance(hello_block, Visibility)
    assert isinstance(attachment, Visibility)
    assert hello_block.is_visible()
    assert not attachment.is_visible(show_general=False)


def test_text_block_coerces_range_inputs() -> None:
    block = TextBlock(content="abcdef", ranges=[{"start": 0, "end": 2, "level": "data"}])  # type: ignore[list-item]

    assert block.ranges == (AnnotationRange(0, 2, ImportanceLevel.DATA),)
    assert block.id
