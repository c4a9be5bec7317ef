"""Bounded undo/redo history with command grouping and a save point."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from edit_engine.config import DEFAULT_HISTORY_CAPACITY
from edit_engine.errors import UnbalancedGroup
from edit_engine.runtime import telemetry

from .commands import Command, CompositeCommand
from .document import TextBuffer
from .state import CursorState


class CommandHistory:
    """Undo and redo stacks of applied commands.

    ``push`` applies a command and records it. While a group is open, pushed
    commands accumulate and are recorded as a single ``CompositeCommand`` when
    the group closes. The undo stack never grows past ``capacity``; the oldest
    entry is evicted first.

    The save point is the undo depth at the last ``mark_saved``. It becomes
    unreachable (``None``) when eviction drops the state it refers to or when
    a new edit discards the redo branch that contained it; from then on the
    document reports as modified until the next ``mark_saved``.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_HISTORY_CAPACITY,
        *,
        logger_name: str | None = "edit_engine.history",
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._undo: Deque[Command] = deque()
        self._redo: List[Command] = []
        self._group_label: Optional[str] = None
        self._group: List[Command] = []
        self._save_point: Optional[int] = 0
        self._logger_name = logger_name
        self.logger = telemetry.get_logger(logger_name)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def group_open(self) -> bool:
        return self._group_label is not None

    @property
    def group_label(self) -> Optional[str]:
        return self._group_label

    @property
    def save_point(self) -> Optional[int]:
        return self._save_point

    def can_undo(self) -> bool:
        return bool(self._undo) or bool(self._group)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def push(self, command: Command, buffer: TextBuffer, cursor: CursorState) -> None:
        """Apply ``command`` and record it (into the open group, if any)."""

        command.apply(buffer, cursor)
        self._discard_redo()
        if self.group_open:
            self._group.append(command)
        else:
            self._record(command)

    def begin_group(self, label: str) -> None:
        if self._group_label is not None:
            raise UnbalancedGroup(
                f"Group '{self._group_label}' is already open; cannot begin '{label}'",
                open_label=self._group_label,
            )
        self._group_label = label
        self._group = []

    def end_group(self) -> Optional[CompositeCommand]:
        """Close the open group; returns the recorded composite (``None`` if empty)."""

        if self._group_label is None:
            raise UnbalancedGroup("end_group called with no open group")
        label, commands = self._group_label, tuple(self._group)
        self._group_label = None
        self._group = []
        if not commands:
            return None
        composite = CompositeCommand(label, commands)
        self._record(composite)
        return composite

    def undo(self, buffer: TextBuffer, cursor: CursorState) -> Optional[Command]:
        """Revert the newest entry; ``None`` when there is nothing to undo."""

        if self.group_open:
            self.end_group()
        if not self._undo:
            return None
        command = self._undo.pop()
        with telemetry.span(
            "history::undo",
            logger_name=self._logger_name,
            component="history",
            metadata={"kind": command.kind},
        ):
            command.revert(buffer, cursor)
        self._redo.append(command)
        return command

    def redo(self, buffer: TextBuffer, cursor: CursorState) -> Optional[Command]:
        """Re-apply the newest undone entry; ``None`` when the redo stack is empty."""

        if self.group_open:
            self.end_group()
        if not self._redo:
            return None
        command = self._redo.pop()
        with telemetry.span(
            "history::redo",
            logger_name=self._logger_name,
            component="history",
            metadata={"kind": command.kind},
        ):
            command.apply(buffer, cursor)
        self._undo.append(command)
        return command

    def mark_saved(self) -> None:
        if self.group_open:
            self.end_group()
        self._save_point = len(self._undo)

    def is_modified(self) -> bool:
        if self._save_point is None or self._group:
            return True
        return len(self._undo) != self._save_point

    def set_capacity(self, capacity: int) -> None:
        """Change the bound, evicting the oldest entries that no longer fit."""

        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._evict()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self._group_label = None
        self._group = []
        self._save_point = 0

    def _discard_redo(self) -> None:
        if not self._redo:
            return
        if self._save_point is not None and self._save_point > len(self._undo):
            self._save_point = None
        self._redo.clear()

    def _record(self, command: Command) -> None:
        self._undo.append(command)
        self._evict()

    def _evict(self) -> None:
        while len(self._undo) > self.capacity:
            self._undo.popleft()
            if self._save_point is not None:
                self._save_point -= 1
                if self._save_point < 0:
                    self._save_point = None
            self.logger.debug(
                f"history::evict capacity={self.capacity} save_point={self._save_point}"
            )


__all__ = ["CommandHistory"]
