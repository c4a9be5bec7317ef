"""Error types and status signals reported by the editing engine."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple


class EditEngineError(RuntimeError):
    """Base class for every error raised by the engine."""


class OutOfRange(EditEngineError):
    """Raised when a position or range lies outside the current document."""

    def __init__(
        self, message: str, *, position: Optional[Tuple[int, int]] = None
    ) -> None:
        super().__init__(message)
        self.position = position


class UnbalancedGroup(EditEngineError):
    """Raised on a nested ``begin_group`` or an ``end_group`` with no open group."""

    def __init__(self, message: str, *, open_label: Optional[str] = None) -> None:
        super().__init__(message)
        self.open_label = open_label


class Status(str, Enum):
    """Outcome signal attached to every session operation.

    Only ``OK`` means the intent was carried out; the others are recoverable
    no-op feedback a host can surface as a status message.
    """

    OK = "ok"
    NOOP = "noop"
    NO_HISTORY = "no_history"
    UNBALANCED_GROUP = "unbalanced_group"
    EMPTY_QUERY = "empty_query"
    NO_MATCHES = "no_matches"


__all__ = [
    "EditEngineError",
    "OutOfRange",
    "UnbalancedGroup",
    "Status",
]
