"""Qt highlighter painting importance ranges underneath a live editor."""

from __future__ import annotations

from typing import Iterable

from PySide6.QtGui import QColor, QSyntaxHighlighter, QTextCharFormat, QTextDocument

from ..annotations.render import FilterState, Segment, positional_segments
from ..core.levels import LEVEL_STYLES, ImportanceLevel
from ..core.ranges import AnnotationRange

__all__ = ["ImportanceHighlighter"]


class ImportanceHighlighter(QSyntaxHighlighter):
    """Formats a :class:`QTextDocument` from positional-mode segments.

    Hidden segments keep their characters but are drawn with the page
    background as foreground, so nothing shows and offsets stay aligned with
    the unfiltered text. Offsets are Python string indices; documents holding
    characters outside the BMP will drift against Qt's UTF-16 positions.
    """

    def __init__(self, document: QTextDocument, *, background: str = "#ffffff") -> None:
        super().__init__(document)
        self._ranges: tuple[AnnotationRange, ...] = ()
        self._filter = FilterState()
        self._segments: list[Segment] = []
        self._segments_source: str | None = None
        self._formats = {level: self._level_format(level) for level in ImportanceLevel}
        self._hidden_format = QTextCharFormat()
        self._hidden_format.setBackground(QColor(0, 0, 0, 0))
        self._hidden_format.setForeground(QColor(background))

    def set_annotations(
        self,
        ranges: Iterable[AnnotationRange],
        active_levels: Iterable[ImportanceLevel | str] | None = None,
        show_general: bool | None = None,
    ) -> None:
        self._ranges = tuple(ranges)
        self._filter = FilterState(active_levels, show_general)
        self._segments_source = None
        self.rehighlight()

    def formats_for_block(self, text: str, block_start: int) -> list[tuple[int, int, QTextCharFormat]]:
        """Return ``(offset, length, format)`` triples local to one text block."""

        block_end = block_start + len(text)
        result: list[tuple[int, int, QTextCharFormat]] = []
        for segment in self._current_segments():
            if segment.end <= block_start or segment.start >= block_end:
                continue
            if segment.visible and segment.level is None:
                continue
            lower = max(segment.start, block_start)
            upper = min(segment.end, block_end)
            fmt = self._formats[segment.level] if segment.visible else self._hidden_format
            result.append((lower - block_start, upper - lower, fmt))
        return result

    def highlightBlock(self, text: str) -> None:  # noqa: N802 - Qt override
        block_start = self.currentBlock().position()
        for offset, length, fmt in self.formats_for_block(text, block_start):
            self.setFormat(offset, length, fmt)

    def _current_segments(self) -> list[Segment]:
        document = self.document()
        content = document.toPlainText() if document is not None else ""
        if content != self._segments_source:
            self._segments = positional_segments(
                content, self._ranges, self._filter.active_levels, self._filter.show_general
            )
            self._segments_source = content
        return self._segments

    @staticmethod
    def _level_format(level: ImportanceLevel) -> QTextCharFormat:
        style = LEVEL_STYLES[level]
        fmt = QTextCharFormat()
        fmt.setBackground(QColor(style.background))
        fmt.setFontWeight(style.weight)
        return fmt
