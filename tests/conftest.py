"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from mindnote.core.blocks import AttachmentBlock, Memo, TextBlock
from mindnote.core.levels import ImportanceLevel
from mindnote.core.ranges import AnnotationRange


@pytest.fixture
def hello_block() -> TextBlock:
    return TextBlock(
        id="block-hello",
        content="Hello World",
        ranges=(
            AnnotationRange(0, 3, ImportanceLevel.CRITICAL),
            AnnotationRange(3, 8, ImportanceLevel.IMPORTANT),
        ),
    )


@pytest.fixture
def sample_memo(hello_block: TextBlock) -> Memo:
    return Memo(
        id="memo-1",
        title="Quarterly planning",
        blocks=(
            hello_block,
            TextBlock(id="block-plain", content="General notes only"),
            AttachmentBlock(
                kind="bookmark",
                id="block-link",
                importance=ImportanceLevel.REFERENCE,
                payload={"url": "https://example.com/roadmap", "title": "Roadmap draft"},
            ),
            AttachmentBlock(kind="file", id="block-file", payload={"name": "budget.xlsx"}),
        ),
    )
