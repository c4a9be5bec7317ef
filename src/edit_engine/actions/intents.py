"""Key-bindable intent handlers.

Every handler takes the session first and accepts extra keyword arguments
from the dispatcher, ignoring the ones it has no use for.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .motion import Motion

if TYPE_CHECKING:
    from edit_engine.session import EditOutcome, EditorSession


def undo(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.undo()


def redo(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.redo()


def move(
    motion: Motion, session: "EditorSession", *, extend: bool = False, **_: Any
) -> "EditOutcome":
    return session.move(motion, extend=extend)


def delete_before(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.delete_before()


def delete_after(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.delete_after()


def delete_selection(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.delete_selection()


def insert_newline(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.insert_newline()


def insert_tab(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.insert_tab()


def select_all(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.select_all()


def next_match(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.next_match()


def previous_match(session: "EditorSession", **_: Any) -> "EditOutcome":
    return session.previous_match()


def replace_current(
    session: "EditorSession", *, replacement: str = "", **_: Any
) -> "EditOutcome":
    return session.replace_current(replacement)


def replace_all(
    session: "EditorSession", *, replacement: str = "", **_: Any
) -> "EditOutcome":
    return session.replace_all(replacement)


__all__ = [
    "delete_after",
    "delete_before",
    "delete_selection",
    "insert_newline",
    "insert_tab",
    "move",
    "next_match",
    "previous_match",
    "redo",
    "replace_all",
    "replace_current",
    "select_all",
    "undo",
]
