"""Soft wrapping: logical lines to visual rows and back."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from edit_engine.buffer.document import TextBuffer
from edit_engine.buffer.state import Position
from edit_engine.runtime import telemetry

from .width import EPSILON, FontMetrics


@dataclass(frozen=True, slots=True)
class VisualRow:
    """Columns ``[start, end)`` of logical ``line`` drawn as one screen row."""

    line: int
    segment: int
    start: int
    end: int

    @property
    def is_first_segment(self) -> bool:
        return self.segment == 0

    def __len__(self) -> int:
        return self.end - self.start


class VisualRowMap:
    """Ordered visual rows for a whole document, indexed per logical line."""

    def __init__(self, per_line: Sequence[Sequence[VisualRow]]) -> None:
        self._per_line: Tuple[Tuple[VisualRow, ...], ...] = tuple(
            tuple(rows) for rows in per_line
        )
        self._rows: Tuple[VisualRow, ...] = tuple(
            row for rows in self._per_line for row in rows
        )
        first: List[int] = []
        running = 0
        for rows in self._per_line:
            first.append(running)
            running += len(rows)
        self._first_row = tuple(first)

    @property
    def rows(self) -> Tuple[VisualRow, ...]:
        return self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> VisualRow:
        return self._rows[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VisualRowMap):
            return NotImplemented
        return self._rows == other._rows

    def __repr__(self) -> str:
        return f"VisualRowMap(rows={len(self._rows)}, lines={len(self._per_line)})"

    @property
    def line_count(self) -> int:
        return len(self._per_line)

    def rows_for_line(self, line: int) -> Tuple[VisualRow, ...]:
        return self._per_line[line]

    def first_row_of(self, line: int) -> int:
        return self._first_row[line]

    def row_index(self, position: Tuple[int, int]) -> int:
        """Visual row holding the caret at ``position``.

        A caret exactly on a row boundary belongs to the following row,
        except at the end of the line's last row.
        """

        line, column = position
        rows = self._per_line[line]
        for offset, row in enumerate(rows):
            if row.start <= column < row.end:
                return self._first_row[line] + offset
        return self._first_row[line] + len(rows) - 1

    def to_visual(self, position: Tuple[int, int]) -> Tuple[int, int]:
        """``(visual row, column offset within that row)`` for ``position``."""

        index = self.row_index(position)
        return index, position[1] - self._rows[index].start

    def to_logical(self, row_index: int, offset: int) -> Position:
        """Position for a column ``offset`` inside visual row ``row_index``.

        Offsets clamp to the row; on every row but a line's last one the
        caret cannot sit on ``end`` (that spot belongs to the next row).
        """

        row = self._rows[row_index]
        limit = row.end
        if not self.is_last_segment(row) and row.end > row.start:
            limit = row.end - 1
        column = max(row.start, min(row.start + offset, limit))
        return Position(row.line, column)

    def is_last_segment(self, row: VisualRow) -> bool:
        return row.segment == len(self._per_line[row.line]) - 1


def wrap_line(
    text: str, line: int, width: Optional[float], metrics: FontMetrics
) -> List[VisualRow]:
    """Split one logical line at character boundaries so each row fits ``width``.

    A row always keeps at least one character, even if that character alone
    is wider than ``width``. ``width=None`` disables wrapping.
    """

    if width is None or not text:
        return [VisualRow(line, 0, 0, len(text))]

    rows: List[VisualRow] = []
    segment = 0
    row_start = 0
    used = 0.0
    for index, char in enumerate(text):
        advance = metrics.advance(char)
        # zero-width marks stay on the row of the glyph they attach to
        if advance > 0 and used + advance > width + EPSILON and index > row_start:
            rows.append(VisualRow(line, segment, row_start, index))
            segment += 1
            row_start = index
            used = 0.0
        used += advance
    rows.append(VisualRow(line, segment, row_start, len(text)))
    return rows


class WrapMapper:
    """Builds and caches the visual row map for a buffer.

    The cached map is a pure function of the buffer content, the wrap
    settings and the metrics. Any settings change marks it dirty; a buffer
    version change is detected on the next ``row_map`` call. ``refresh_lines``
    rebuilds only the given lines and yields the same map a full rebuild
    would.
    """

    def __init__(
        self,
        *,
        enabled: bool = False,
        width: Optional[float] = None,
        wrap_column: Optional[int] = None,
        metrics: Optional[FontMetrics] = None,
    ) -> None:
        self.enabled = enabled
        self.width = width
        self.wrap_column = wrap_column
        self.metrics = metrics or FontMetrics.fallback()
        self.logger = telemetry.get_logger("edit_engine.layout")
        self._per_line: List[Tuple[VisualRow, ...]] = []
        self._map: Optional[VisualRowMap] = None
        self._version: Optional[int] = None
        self.dirty = True

    def effective_width(self) -> Optional[float]:
        """Wrap width in advance units, or ``None`` when wrapping is off."""

        if not self.enabled:
            return None
        if self.wrap_column is not None:
            return self.wrap_column * self.metrics.narrow_advance
        if self.width is None:
            return None
        return max(self.width, self.metrics.narrow_advance)

    def set_enabled(self, enabled: bool) -> None:
        if enabled != self.enabled:
            self.enabled = enabled
            self.dirty = True

    def set_width(self, width: Optional[float]) -> None:
        if width != self.width:
            self.width = width
            self.dirty = True

    def set_wrap_column(self, column: Optional[int]) -> None:
        if column != self.wrap_column:
            self.wrap_column = column
            self.dirty = True

    def set_metrics(self, metrics: FontMetrics) -> None:
        if metrics != self.metrics:
            self.metrics = metrics
            self.dirty = True

    def invalidate(self) -> None:
        self.dirty = True

    def build(self, buffer: TextBuffer) -> VisualRowMap:
        """Full rebuild from the current buffer content."""

        width = self.effective_width()
        self._per_line = [
            tuple(wrap_line(text, line, width, self.metrics))
            for line, text in enumerate(buffer.snapshot())
        ]
        self._map = VisualRowMap(self._per_line)
        self._version = buffer.version
        self.dirty = False
        self.logger.debug(
            f"layout::rebuild rows={len(self._map)} lines={buffer.line_count()}"
        )
        return self._map

    def refresh_lines(
        self,
        buffer: TextBuffer,
        lines: Iterable[int],
        *,
        since_version: Optional[int] = None,
    ) -> VisualRowMap:
        """Rebuild only ``lines``; falls back to a full rebuild when the
        cache is dirty, the line count changed, or the cache was not built
        from ``since_version`` (the buffer version before the edit)."""

        stale = self.dirty or self._map is None
        if since_version is not None and self._version != since_version:
            stale = True
        if stale or len(self._per_line) != buffer.line_count():
            return self.build(buffer)
        width = self.effective_width()
        for line in lines:
            self._per_line[line] = tuple(
                wrap_line(buffer.line_text(line), line, width, self.metrics)
            )
        self._map = VisualRowMap(self._per_line)
        self._version = buffer.version
        return self._map

    def row_map(self, buffer: TextBuffer) -> VisualRowMap:
        if self.dirty or self._map is None or self._version != buffer.version:
            return self.build(buffer)
        return self._map


__all__ = [
    "VisualRow",
    "VisualRowMap",
    "WrapMapper",
    "wrap_line",
]
