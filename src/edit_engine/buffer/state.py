"""Caret position, selection and cursor state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple


class Position(NamedTuple):
    """Zero-based (line, column) caret address; columns count characters."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Selection:
    """Anchor/active pair; the anchor stays where the drag started."""

    anchor: Position
    active: Position

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.active

    def normalized(self) -> Tuple[Position, Position]:
        if self.active < self.anchor:
            return self.active, self.anchor
        return self.anchor, self.active


@dataclass(slots=True)
class CursorState:
    """Mutable caret + optional selection anchor.

    ``desired_offset`` remembers the column (relative to the start of the
    caret's visual row) that vertical movement tries to return to when it
    passes through shorter rows.
    """

    position: Position = Position(0, 0)
    anchor: Optional[Position] = None
    desired_offset: Optional[int] = None

    @property
    def selection(self) -> Optional[Selection]:
        if self.anchor is None:
            return None
        return Selection(self.anchor, self.position)

    @property
    def has_selection(self) -> bool:
        return self.anchor is not None and self.anchor != self.position

    def place(self, position: Tuple[int, int]) -> None:
        """Move the caret and collapse any selection."""

        self.position = Position(*position)
        self.anchor = None
        self.desired_offset = None

    def move_to(
        self,
        position: Tuple[int, int],
        *,
        extend: bool = False,
        keep_desired: bool = False,
    ) -> None:
        target = Position(*position)
        if extend:
            if self.anchor is None:
                self.anchor = self.position
        else:
            self.anchor = None
        self.position = target
        if not keep_desired:
            self.desired_offset = None

    def select(self, anchor: Tuple[int, int], active: Tuple[int, int]) -> None:
        self.anchor = Position(*anchor)
        self.position = Position(*active)
        self.desired_offset = None

    def clear_selection(self) -> None:
        self.anchor = None

    def normalized_range(self) -> Optional[Tuple[Position, Position]]:
        selection = self.selection
        if selection is None:
            return None
        return selection.normalized()


def normalize_range(
    start: Tuple[int, int], end: Tuple[int, int]
) -> Tuple[Position, Position]:
    first, second = Position(*start), Position(*end)
    if second < first:
        return second, first
    return first, second


__all__ = [
    "CursorState",
    "Position",
    "Selection",
    "normalize_range",
]
