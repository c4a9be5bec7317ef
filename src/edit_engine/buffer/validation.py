"""Validation and clamping helpers shared across buffer services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

from edit_engine.errors import OutOfRange

from .state import Position

if TYPE_CHECKING:
    from .document import TextBuffer


def ensure_position(buffer: "TextBuffer", position: Tuple[int, int]) -> Position:
    line, column = position
    if line < 0 or line >= buffer.line_count():
        raise OutOfRange("Line out of range", position=(line, column))
    if column < 0 or column > buffer.line_length(line):
        raise OutOfRange("Column out of range", position=(line, column))
    return Position(line, column)


def clamp_position(buffer: "TextBuffer", position: Tuple[int, int]) -> Position:
    line, column = position
    line = max(0, min(line, buffer.line_count() - 1))
    column = max(0, min(column, buffer.line_length(line)))
    return Position(line, column)


__all__ = ["clamp_position", "ensure_position"]
