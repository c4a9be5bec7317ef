"""Adapter boundary types for syncing sessions with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

from .state import Position


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing what the rendering layer should draw."""

    text: str
    cursor: Position
    selection: Optional[Tuple[Position, Position]]
    version: int
    modified: bool
    match_index: Optional[int] = None
    match_count: int = 0
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """How adapters exchange data with an editing session."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest snapshot that the host should render."""
        ...

    def push_host_text(self, text: str) -> None:
        """Submit externally produced text (IME commit, clipboard paste)."""
        ...


__all__ = ["BufferMirror", "BufferSync"]
