"""Text buffer, cursor state, reversible commands and undo history."""

from .commands import (
    Command,
    CompositeCommand,
    DeleteCommand,
    InsertCommand,
    delete_after,
    delete_before,
    delete_span,
    end_of_insert,
    insert,
    replace_span,
)
from .document import LINE_SEPARATOR, TextBuffer, split_lines
from .state import CursorState, Position, Selection, normalize_range
from .sync import BufferMirror, BufferSync
from .undo import CommandHistory
from .validation import clamp_position, ensure_position

__all__ = [
    "BufferMirror",
    "BufferSync",
    "Command",
    "CommandHistory",
    "CompositeCommand",
    "CursorState",
    "DeleteCommand",
    "InsertCommand",
    "LINE_SEPARATOR",
    "Position",
    "Selection",
    "TextBuffer",
    "clamp_position",
    "delete_after",
    "delete_before",
    "delete_span",
    "end_of_insert",
    "ensure_position",
    "insert",
    "normalize_range",
    "replace_span",
    "split_lines",
]
