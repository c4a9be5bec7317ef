"""Editing sessions and the containers that compose or share them."""

from .editor import TYPING_GROUP, EditOutcome, EditorSession
from .registry import SessionRegistry
from .shared import SharedSession

__all__ = [
    "EditOutcome",
    "EditorSession",
    "SessionRegistry",
    "SharedSession",
    "TYPING_GROUP",
]
