"""Caret motions as pure functions of (position, document) -> position."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from edit_engine.buffer import Position, TextBuffer
from edit_engine.layout import VisualRowMap


class Motion(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    LINE_START = "line_start"
    LINE_END = "line_end"
    DOC_START = "doc_start"
    DOC_END = "doc_end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


VERTICAL_MOTIONS = frozenset({Motion.UP, Motion.DOWN})


def move_left(buffer: TextBuffer, position: Position) -> Position:
    return buffer.position_before(position)


def move_right(buffer: TextBuffer, position: Position) -> Position:
    return buffer.position_after(position)


def line_start(buffer: TextBuffer, position: Position) -> Position:
    del buffer
    return Position(position.line, 0)


def line_end(buffer: TextBuffer, position: Position) -> Position:
    return Position(position.line, buffer.line_length(position.line))


def doc_start(buffer: TextBuffer, position: Position) -> Position:
    del buffer, position
    return Position(0, 0)


def doc_end(buffer: TextBuffer, position: Position) -> Position:
    del position
    return buffer.end_position()


def move_vertical(
    rows: VisualRowMap,
    position: Position,
    delta: int,
    desired_offset: Optional[int] = None,
) -> Tuple[Position, int]:
    """Move ``delta`` visual rows, aiming for ``desired_offset`` within the row.

    Returns the new position and the offset to remember for the next
    vertical move. Moving past the first or last row leaves the caret alone.
    """

    row_index, offset = rows.to_visual(position)
    desired = offset if desired_offset is None else desired_offset
    target = row_index + delta
    if target < 0 or target >= len(rows):
        return position, desired
    return rows.to_logical(target, desired), desired


def move_page(buffer: TextBuffer, position: Position, lines: int) -> Position:
    """Move ``lines`` logical lines (negative is up), clamping the column."""

    target = max(0, min(position.line + lines, buffer.line_count() - 1))
    return Position(target, min(position.column, buffer.line_length(target)))


def resolve_motion(
    motion: Motion,
    buffer: TextBuffer,
    rows: VisualRowMap,
    position: Position,
    *,
    desired_offset: Optional[int] = None,
    lines_per_page: int = 20,
) -> Tuple[Position, Optional[int]]:
    """Target position for ``motion`` plus the desired offset to keep.

    The desired offset is only carried by vertical motions; every other
    motion returns ``None`` so the next vertical move starts fresh.
    """

    motion = Motion(motion)
    if motion is Motion.UP:
        return move_vertical(rows, position, -1, desired_offset)
    if motion is Motion.DOWN:
        return move_vertical(rows, position, 1, desired_offset)
    if motion is Motion.PAGE_UP:
        return move_page(buffer, position, -lines_per_page), None
    if motion is Motion.PAGE_DOWN:
        return move_page(buffer, position, lines_per_page), None
    simple = {
        Motion.LEFT: move_left,
        Motion.RIGHT: move_right,
        Motion.LINE_START: line_start,
        Motion.LINE_END: line_end,
        Motion.DOC_START: doc_start,
        Motion.DOC_END: doc_end,
    }
    return simple[motion](buffer, position), None


__all__ = [
    "Motion",
    "VERTICAL_MOTIONS",
    "doc_end",
    "doc_start",
    "line_end",
    "line_start",
    "move_left",
    "move_page",
    "move_right",
    "move_vertical",
    "resolve_motion",
]
