"""Reversible edit records: insert, delete and composite.

The set of command kinds is closed. Each one knows how to ``apply`` itself to
a buffer + cursor and how to ``revert`` that application, restoring both the
text and the caret to exactly what they were before ``apply``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

from .document import TextBuffer, split_lines
from .state import CursorState, Position, normalize_range


def end_of_insert(position: Tuple[int, int], text: str) -> Position:
    """Caret position after inserting ``text`` at ``position``."""

    line, column = position
    pieces = split_lines(text)
    if len(pieces) == 1:
        return Position(line, column + len(pieces[0]))
    return Position(line + len(pieces) - 1, len(pieces[-1]))


@dataclass(frozen=True, slots=True)
class InsertCommand:
    position: Position
    text: str
    cursor_before: Position

    kind: ClassVar[str] = "insert"

    def apply(self, buffer: TextBuffer, cursor: CursorState) -> None:
        if self.text == "\n":
            end = buffer.insert_newline(self.position)
        elif len(self.text) == 1 and self.text != "\r":
            buffer.insert_char(self.position, self.text)
            end = Position(self.position.line, self.position.column + 1)
        else:
            end = buffer.insert_text(self.position, self.text)
        cursor.place(end)

    def revert(self, buffer: TextBuffer, cursor: CursorState) -> None:
        buffer.delete_range(self.position, end_of_insert(self.position, self.text))
        cursor.place(self.cursor_before)

    @property
    def cursor_after(self) -> Position:
        return end_of_insert(self.position, self.text)


@dataclass(frozen=True, slots=True)
class DeleteCommand:
    start: Position
    end: Position
    text: str
    cursor_before: Position

    kind: ClassVar[str] = "delete"

    def apply(self, buffer: TextBuffer, cursor: CursorState) -> None:
        removed = buffer.delete_range(self.start, self.end)
        assert removed == self.text, "delete replayed against diverged content"
        cursor.place(self.start)

    def revert(self, buffer: TextBuffer, cursor: CursorState) -> None:
        buffer.insert_text(self.start, self.text)
        cursor.place(self.cursor_before)

    @property
    def cursor_after(self) -> Position:
        return self.start


@dataclass(frozen=True, slots=True)
class CompositeCommand:
    """Ordered sub-edits applied and reverted as one unit."""

    label: str
    commands: Tuple["Command", ...]

    kind: ClassVar[str] = "composite"

    def apply(self, buffer: TextBuffer, cursor: CursorState) -> None:
        for command in self.commands:
            command.apply(buffer, cursor)

    def revert(self, buffer: TextBuffer, cursor: CursorState) -> None:
        for command in reversed(self.commands):
            command.revert(buffer, cursor)

    def __len__(self) -> int:
        return len(self.commands)


Command = Union[InsertCommand, DeleteCommand, CompositeCommand]


def insert(
    position: Tuple[int, int], text: str, cursor_before: Tuple[int, int]
) -> InsertCommand:
    return InsertCommand(Position(*position), text, Position(*cursor_before))


def delete_span(
    buffer: TextBuffer,
    start: Tuple[int, int],
    end: Tuple[int, int],
    cursor_before: Tuple[int, int],
) -> Optional[DeleteCommand]:
    """Build a delete over ``[start, end)``; ``None`` when the span is empty."""

    first, last = normalize_range(start, end)
    if first == last:
        return None
    text = buffer.text_range(first, last)
    return DeleteCommand(first, last, text, Position(*cursor_before))


def delete_before(
    buffer: TextBuffer, position: Tuple[int, int], cursor_before: Tuple[int, int]
) -> Optional[DeleteCommand]:
    return delete_span(
        buffer, buffer.position_before(position), position, cursor_before
    )


def delete_after(
    buffer: TextBuffer, position: Tuple[int, int], cursor_before: Tuple[int, int]
) -> Optional[DeleteCommand]:
    return delete_span(
        buffer, position, buffer.position_after(position), cursor_before
    )


def replace_span(
    buffer: TextBuffer,
    start: Tuple[int, int],
    end: Tuple[int, int],
    text: str,
    cursor_before: Tuple[int, int],
    *,
    label: str = "replace",
) -> CompositeCommand:
    """Delete ``[start, end)`` then insert ``text`` at the start, as one unit."""

    first, last = normalize_range(start, end)
    parts: list[Command] = []
    removal = delete_span(buffer, first, last, cursor_before)
    caret = Position(*cursor_before)
    if removal is not None:
        parts.append(removal)
        caret = removal.cursor_after
    if text:
        parts.append(insert(first, text, caret))
    return CompositeCommand(label, tuple(parts))


__all__ = [
    "Command",
    "CompositeCommand",
    "DeleteCommand",
    "InsertCommand",
    "delete_after",
    "delete_before",
    "delete_span",
    "end_of_insert",
    "insert",
    "replace_span",
]
