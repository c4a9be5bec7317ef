"""Caret motions and the key-bindable intent handlers built on them."""

from . import intents
from .motion import (
    VERTICAL_MOTIONS,
    Motion,
    doc_end,
    doc_start,
    line_end,
    line_start,
    move_left,
    move_page,
    move_right,
    move_vertical,
    resolve_motion,
)

__all__ = [
    "Motion",
    "VERTICAL_MOTIONS",
    "doc_end",
    "doc_start",
    "intents",
    "line_end",
    "line_start",
    "move_left",
    "move_page",
    "move_right",
    "move_vertical",
    "resolve_motion",
]
