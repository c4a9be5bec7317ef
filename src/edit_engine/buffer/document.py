"""Line-oriented text storage with character-indexed mutation."""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from edit_engine.errors import OutOfRange

from .state import Position, normalize_range
from .validation import ensure_position

LINE_SEPARATOR = "\n"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split on ``\\r\\n``, ``\\r`` or ``\\n``; always returns at least one line."""

    return _LINE_BREAK.split(text)


class TextBuffer:
    """Document held as a list of lines.

    Every index is a character (code point) column, never a storage offset.
    The document always has at least one line and no line contains a line
    terminator. ``version`` increases on every mutation so derived views can
    tell whether they are stale.
    """

    def __init__(self, text: str = "") -> None:
        self._lines: List[str] = split_lines(text)
        self.version = 0

    @classmethod
    def from_text(cls, text: str) -> "TextBuffer":
        return cls(text)

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    def line_count(self) -> int:
        return len(self._lines)

    def line_length(self, index: int) -> int:
        return len(self.line_text(index))

    def line_text(self, index: int) -> str:
        if index < 0 or index >= len(self._lines):
            raise OutOfRange("Line out of range", position=(index, 0))
        return self._lines[index]

    def full_text(self) -> str:
        return LINE_SEPARATOR.join(self._lines)

    def end_position(self) -> Position:
        last = len(self._lines) - 1
        return Position(last, len(self._lines[last]))

    def text_range(self, start: Tuple[int, int], end: Tuple[int, int]) -> str:
        first, last = normalize_range(
            ensure_position(self, start), ensure_position(self, end)
        )
        if first.line == last.line:
            return self._lines[first.line][first.column : last.column]
        parts = [self._lines[first.line][first.column :]]
        parts.extend(self._lines[first.line + 1 : last.line])
        parts.append(self._lines[last.line][: last.column])
        return LINE_SEPARATOR.join(parts)

    def position_before(self, position: Tuple[int, int]) -> Position:
        """Caret one character to the left, crossing to the previous line end."""

        line, column = ensure_position(self, position)
        if column > 0:
            return Position(line, column - 1)
        if line > 0:
            return Position(line - 1, len(self._lines[line - 1]))
        return Position(0, 0)

    def position_after(self, position: Tuple[int, int]) -> Position:
        """Caret one character to the right, crossing to the next line start."""

        line, column = ensure_position(self, position)
        if column < len(self._lines[line]):
            return Position(line, column + 1)
        if line + 1 < len(self._lines):
            return Position(line + 1, 0)
        return Position(line, column)

    def insert_char(self, position: Tuple[int, int], char: str) -> None:
        if len(char) != 1:
            raise ValueError("insert_char expects exactly one character")
        if char in "\r\n":
            raise ValueError("use insert_newline for line terminators")
        line, column = ensure_position(self, position)
        current = self._lines[line]
        self._lines[line] = current[:column] + char + current[column:]
        self._touch()

    def insert_newline(self, position: Tuple[int, int]) -> Position:
        line, column = ensure_position(self, position)
        current = self._lines[line]
        self._lines[line : line + 1] = [current[:column], current[column:]]
        self._touch()
        return Position(line + 1, 0)

    def insert_text(self, position: Tuple[int, int], text: str) -> Position:
        """Insert possibly multi-line ``text``; return the caret after it."""

        line, column = ensure_position(self, position)
        if not text:
            return Position(line, column)
        pieces = split_lines(text)
        current = self._lines[line]
        head, tail = current[:column], current[column:]
        if len(pieces) == 1:
            self._lines[line] = head + pieces[0] + tail
            self._touch()
            return Position(line, column + len(pieces[0]))
        replacement = [head + pieces[0], *pieces[1:-1], pieces[-1] + tail]
        self._lines[line : line + 1] = replacement
        self._touch()
        return Position(line + len(pieces) - 1, len(pieces[-1]))

    def delete_char_before(self, position: Tuple[int, int]) -> str:
        """Delete the character left of ``position``; joins lines at column 0."""

        end = ensure_position(self, position)
        start = self.position_before(end)
        return self.delete_range(start, end)

    def delete_char_after(self, position: Tuple[int, int]) -> str:
        """Delete the character right of ``position``; joins lines at line end."""

        start = ensure_position(self, position)
        end = self.position_after(start)
        return self.delete_range(start, end)

    def delete_range(self, start: Tuple[int, int], end: Tuple[int, int]) -> str:
        """Delete ``[start, end)`` (order-insensitive) and return the removed text."""

        first, last = normalize_range(
            ensure_position(self, start), ensure_position(self, end)
        )
        if first == last:
            return ""
        removed = self.text_range(first, last)
        head = self._lines[first.line][: first.column]
        tail = self._lines[last.line][last.column :]
        self._lines[first.line : last.line + 1] = [head + tail]
        self._touch()
        return removed

    def replace_content(self, text: str) -> None:
        self._lines = split_lines(text)
        self._touch()

    def _touch(self) -> None:
        self.version += 1
        assert self._lines, "document must keep at least one line"


__all__ = ["LINE_SEPARATOR", "TextBuffer", "split_lines"]
