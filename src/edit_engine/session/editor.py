"""Editing session façade combining buffer, cursor, history, layout and search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from edit_engine.actions import VERTICAL_MOTIONS, Motion, resolve_motion
from edit_engine.buffer import (
    BufferMirror,
    Command,
    CommandHistory,
    CompositeCommand,
    CursorState,
    DeleteCommand,
    InsertCommand,
    Position,
    TextBuffer,
    clamp_position,
    delete_after,
    delete_before,
    delete_span,
    ensure_position,
    insert,
    replace_span,
)
from edit_engine.config import EngineConfig
from edit_engine.errors import Status, UnbalancedGroup
from edit_engine.layout import (
    FontMetrics,
    VisualRowMap,
    WrapMapper,
    segment_geometry,
)
from edit_engine.runtime import telemetry
from edit_engine.search import Match, MatchSet, SearchEngine

TYPING_GROUP = "Typing"


@dataclass(slots=True)
class EditOutcome:
    """Result of one intent: status signal, whether content changed, caret."""

    status: Status
    changed: bool
    position: Position
    selection: Optional[Tuple[Position, Position]]
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.OK


class EditorSession:
    """One editing surface's worth of state.

    Every content-changing intent is turned into a command and pushed
    through the history, so each one can be undone. Consecutive
    ``insert_char`` calls share one "Typing" group; any other intent closes
    that group first. The session is single-writer: wrap it in
    :class:`edit_engine.session.shared.SharedSession` to share it.
    """

    def __init__(
        self,
        text: str = "",
        *,
        config: Optional[EngineConfig] = None,
        name: str = "default",
        session_id: Optional[int] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.name = name
        self.session_id = session_id
        self.buffer = TextBuffer(text)
        self.cursor = CursorState()
        self.history = CommandHistory(self.config.history_capacity)
        self.search_engine = SearchEngine(
            case_sensitive=self.config.case_sensitive,
            max_matches=self.config.max_matches,
        )
        self.metrics = FontMetrics(
            self.config.narrow_advance, self.config.wide_advance
        )
        self.wrap = WrapMapper(
            enabled=self.config.wrap_enabled,
            width=self.config.wrap_width,
            wrap_column=self.config.wrap_column,
            metrics=self.metrics,
        )
        self.logger = telemetry.get_logger("edit_engine.session")
        self._typing = False
        self._drag_anchor: Optional[Position] = None

    @classmethod
    def from_text(cls, text: str, **kwargs: object) -> "EditorSession":
        return cls(text, **kwargs)  # type: ignore[arg-type]

    # ------------------------------------------------------------------ queries

    @property
    def text(self) -> str:
        return self.buffer.full_text()

    @property
    def position(self) -> Position:
        return self.cursor.position

    @property
    def selection(self) -> Optional[Tuple[Position, Position]]:
        """Normalized (start, end) of the selection, ``None`` without one."""

        return self.cursor.normalized_range()

    @property
    def match_set(self) -> MatchSet:
        return self.search_engine.match_set

    def selected_text(self) -> Optional[str]:
        selection = self.selection
        if selection is None or selection[0] == selection[1]:
            return None
        return self.buffer.text_range(*selection)

    def is_modified(self) -> bool:
        return self.history.is_modified()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def visual_rows(self) -> VisualRowMap:
        return self.wrap.row_map(self.buffer)

    def caret_location(self) -> Tuple[int, float]:
        """``(visual row, x offset)`` where the caret should be drawn."""

        rows = self.visual_rows()
        row_index, _ = rows.to_visual(self.cursor.position)
        row = rows[row_index]
        line = self.buffer.line_text(row.line)
        return row_index, self.metrics.measure(line[row.start : self.cursor.position.column])

    def segment_geometry(self, text: str, start: int, end: int) -> Tuple[float, float]:
        """``(x, width)`` of ``text[start:end]`` under the session's metrics."""

        return segment_geometry(
            text, start, end, self.metrics.narrow_advance, self.metrics.wide_advance
        )

    def match_geometry(self, match: Match) -> Tuple[int, float, float]:
        """``(visual row, x, width)`` for highlighting the start row of ``match``."""

        rows = self.visual_rows()
        row_index = rows.row_index(match.start_position)
        row = rows[row_index]
        segment = self.buffer.line_text(row.line)[row.start : row.end]
        x, width = self.segment_geometry(
            segment, match.start - row.start, match.end - row.start
        )
        return row_index, x, width

    def match_status(self) -> Tuple[int, int]:
        """One-based current match number (0 if none) and the match count."""

        current = self.match_set.current_index
        return (0 if current is None else current + 1), len(self.match_set)

    def status_line(self) -> str:
        if not self.search_engine.active:
            return ""
        current, total = self.match_status()
        if not total:
            return "no matches"
        if not current:
            return f"{total} matches" if total > 1 else "1 match"
        return f"match {current} of {total}"

    def mirror(self) -> BufferMirror:
        current, total = self.match_status()
        return BufferMirror(
            text=self.text,
            cursor=self.cursor.position,
            selection=self.selection,
            version=self.buffer.version,
            modified=self.is_modified(),
            match_index=current or None,
            match_count=total,
        )

    def pull_buffer(self) -> BufferMirror:
        return self.mirror()

    def push_host_text(self, text: str) -> None:
        """Committed text from the host (IME commit, clipboard) acts as a paste."""

        self.paste(text)

    # ------------------------------------------------------------- edit intents

    def insert_char(self, char: str) -> EditOutcome:
        if not char:
            return self._outcome(Status.NOOP)
        if char in ("\n", "\r", "\r\n"):
            return self.insert_newline()
        self.cursor.clear_selection()
        if not self.history.group_open:
            self.history.begin_group(TYPING_GROUP)
            self._typing = True
        position = self.cursor.position
        return self._execute(insert(position, char, position), "insert_char")

    def insert_text(self, text: str) -> EditOutcome:
        self._close_typing()
        if not text:
            return self._outcome(Status.NOOP)
        self.cursor.clear_selection()
        position = self.cursor.position
        return self._execute(insert(position, text, position), "insert_text")

    def insert_newline(self) -> EditOutcome:
        self._close_typing()
        self.cursor.clear_selection()
        position = self.cursor.position
        return self._execute(insert(position, "\n", position), "insert_newline")

    def insert_tab(self) -> EditOutcome:
        self._close_typing()
        self.cursor.clear_selection()
        position = self.cursor.position
        spaces = " " * self.config.tab_width
        return self._execute(insert(position, spaces, position), "insert_tab")

    def paste(self, text: str) -> EditOutcome:
        """Insert ``text`` in place of the selection (if any) as one undo step."""

        self._close_typing()
        selection = self.selection
        position = self.cursor.position
        if selection is not None and selection[0] != selection[1]:
            command: Command = replace_span(
                self.buffer, *selection, text, position, label="paste"
            )
            return self._execute(command, "paste")
        if not text:
            self.cursor.clear_selection()
            return self._outcome(Status.NOOP)
        self.cursor.clear_selection()
        return self._execute(insert(position, text, position), "paste")

    def delete_before(self) -> EditOutcome:
        self._close_typing()
        if self.cursor.has_selection:
            return self.delete_selection()
        self.cursor.clear_selection()
        position = self.cursor.position
        command = delete_before(self.buffer, position, position)
        if command is None:
            return self._outcome(Status.NOOP)
        return self._execute(command, "delete_before")

    def delete_after(self) -> EditOutcome:
        self._close_typing()
        if self.cursor.has_selection:
            return self.delete_selection()
        self.cursor.clear_selection()
        position = self.cursor.position
        command = delete_after(self.buffer, position, position)
        if command is None:
            return self._outcome(Status.NOOP)
        return self._execute(command, "delete_after")

    def delete_range(
        self, start: Tuple[int, int], end: Tuple[int, int]
    ) -> EditOutcome:
        self._close_typing()
        start = ensure_position(self.buffer, start)
        end = ensure_position(self.buffer, end)
        command = delete_span(self.buffer, start, end, self.cursor.position)
        if command is None:
            return self._outcome(Status.NOOP)
        return self._execute(command, "delete_range")

    def delete_selection(self) -> EditOutcome:
        self._close_typing()
        selection = self.selection
        self.cursor.clear_selection()
        if selection is None or selection[0] == selection[1]:
            return self._outcome(Status.NOOP)
        command = delete_span(self.buffer, *selection, self.cursor.position)
        assert command is not None
        return self._execute(command, "delete_selection")

    def undo(self) -> EditOutcome:
        self._close_typing()
        before = self.buffer.version
        command = self.history.undo(self.buffer, self.cursor)
        if command is None:
            return self._signal(Status.NO_HISTORY, "nothing to undo")
        self._content_changed(command, before)
        return self._outcome(Status.OK, changed=True)

    def redo(self) -> EditOutcome:
        self._close_typing()
        before = self.buffer.version
        command = self.history.redo(self.buffer, self.cursor)
        if command is None:
            return self._signal(Status.NO_HISTORY, "nothing to redo")
        self._content_changed(command, before)
        return self._outcome(Status.OK, changed=True)

    def begin_group(self, label: str) -> EditOutcome:
        self._close_typing()
        try:
            self.history.begin_group(label)
        except UnbalancedGroup as exc:
            return self._signal(Status.UNBALANCED_GROUP, str(exc))
        return self._outcome(Status.OK)

    def end_group(self) -> EditOutcome:
        self._close_typing()
        try:
            self.history.end_group()
        except UnbalancedGroup as exc:
            return self._signal(Status.UNBALANCED_GROUP, str(exc))
        return self._outcome(Status.OK)

    def mark_saved(self) -> EditOutcome:
        self._close_typing()
        self.history.mark_saved()
        return self._outcome(Status.OK)

    def reset(self, text: str) -> EditOutcome:
        """Replace the whole document and drop cursor, history and search state."""

        self.buffer.replace_content(text)
        self.cursor = CursorState()
        self.history.clear()
        self.search_engine.clear()
        self.wrap.invalidate()
        self._typing = False
        self._drag_anchor = None
        return self._outcome(Status.OK, changed=True)

    # ------------------------------------------------------- navigation intents

    def move(self, motion: Motion | str, *, extend: bool = False) -> EditOutcome:
        self._close_typing()
        motion = Motion(motion)
        target, desired = resolve_motion(
            motion,
            self.buffer,
            self.visual_rows(),
            self.cursor.position,
            desired_offset=self.cursor.desired_offset,
            lines_per_page=self.config.lines_per_page,
        )
        vertical = motion in VERTICAL_MOTIONS
        self.cursor.move_to(target, extend=extend, keep_desired=vertical)
        if vertical:
            self.cursor.desired_offset = desired
        return self._outcome(Status.OK)

    def set_cursor(
        self, position: Tuple[int, int], *, extend: bool = False
    ) -> EditOutcome:
        self._close_typing()
        self.cursor.move_to(clamp_position(self.buffer, position), extend=extend)
        return self._outcome(Status.OK)

    def select_all(self) -> EditOutcome:
        self._close_typing()
        self.cursor.select(Position(0, 0), self.buffer.end_position())
        return self._outcome(Status.OK)

    def hit_test(self, row_index: int, x: float) -> Position:
        """Position under a pointer at visual row ``row_index``, offset ``x``.

        Rows below the last one resolve to the end of the document.
        """

        rows = self.visual_rows()
        if row_index >= len(rows):
            return self.buffer.end_position()
        row = rows[max(0, row_index)]
        segment = self.buffer.line_text(row.line)[row.start : row.end]
        return Position(row.line, row.start + self.metrics.index_at_offset(segment, x))

    def click(self, row_index: int, x: float, *, extend: bool = False) -> EditOutcome:
        self._close_typing()
        target = self.hit_test(row_index, x)
        if extend:
            self.cursor.move_to(target, extend=True)
        else:
            self.cursor.place(target)
        self._drag_anchor = self.cursor.anchor or target
        return self._outcome(Status.OK)

    def drag(self, row_index: int, x: float) -> EditOutcome:
        self._close_typing()
        target = self.hit_test(row_index, x)
        anchor = self._drag_anchor or self.cursor.position
        self.cursor.select(anchor, target)
        return self._outcome(Status.OK)

    def release(self) -> EditOutcome:
        self._drag_anchor = None
        return self._outcome(Status.OK)

    # ----------------------------------------------------------- search intents

    def search(self, query: str, case_sensitive: Optional[bool] = None) -> EditOutcome:
        self._close_typing()
        matches = self.search_engine.search(self.buffer, query, case_sensitive)
        if not query:
            return self._signal(Status.EMPTY_QUERY, "empty query", level="info")
        if matches.is_empty:
            return self._signal(Status.NO_MATCHES, "no matches", level="info")
        return self._outcome(Status.OK, message=self.status_line())

    def next_match(self) -> EditOutcome:
        return self._navigate_match(self.search_engine.next_match)

    def previous_match(self) -> EditOutcome:
        return self._navigate_match(self.search_engine.previous_match)

    def replace_current(self, replacement: str) -> EditOutcome:
        self._close_typing()
        blocked = self._search_precondition()
        if blocked is not None:
            return blocked
        before = self.buffer.version
        replaced = self.search_engine.replace_current(
            replacement, self.buffer, self.cursor, self.history
        )
        if replaced is None:
            return self._signal(Status.NO_MATCHES, "no matches", level="info")
        self._layout_changed(None, before)
        return self._outcome(Status.OK, changed=True, message=self.status_line())

    def replace_all(self, replacement: str) -> EditOutcome:
        self._close_typing()
        blocked = self._search_precondition()
        if blocked is not None:
            return blocked
        before = self.buffer.version
        count = self.search_engine.replace_all(
            replacement, self.buffer, self.cursor, self.history
        )
        if not count:
            return self._signal(Status.NO_MATCHES, "no matches", level="info")
        self._layout_changed(None, before)
        return self._outcome(Status.OK, changed=True, message=f"replaced {count}")

    def close_search(self) -> EditOutcome:
        self.search_engine.clear()
        return self._outcome(Status.OK)

    def set_case_sensitive(self, case_sensitive: bool) -> EditOutcome:
        self.search_engine.case_sensitive = case_sensitive
        if self.search_engine.active:
            return self.search(self.search_engine.query)
        return self._outcome(Status.OK)

    # ------------------------------------------------------------ configuration

    def set_wrap(self, enabled: bool, width: Optional[float] = None) -> None:
        self.wrap.set_enabled(enabled)
        if width is not None:
            self.wrap.set_width(width)

    def set_viewport_width(self, width: Optional[float]) -> None:
        self.wrap.set_width(width)

    def set_wrap_column(self, column: Optional[int]) -> None:
        self.wrap.set_wrap_column(column)

    def set_metrics(self, narrow_advance: float, wide_advance: float) -> None:
        self.metrics = FontMetrics(narrow_advance, wide_advance)
        self.wrap.set_metrics(self.metrics)

    def set_history_capacity(self, capacity: int) -> None:
        """Bound the undo history; closes the typing group so it counts as one entry."""

        self._close_typing()
        self.history.set_capacity(capacity)

    # ---------------------------------------------------------------- internals

    def _execute(self, command: Command, label: str) -> EditOutcome:
        before = self.buffer.version
        with telemetry.span(
            f"session::{label}",
            logger_name="edit_engine.session",
            component="session",
            metadata={"session": self.name, "kind": command.kind},
        ):
            self.history.push(command, self.buffer, self.cursor)
        self._content_changed(command, before)
        return self._outcome(Status.OK, changed=True)

    def _content_changed(self, command: Command, version_before: int) -> None:
        self._layout_changed(_single_line(command), version_before)
        if self.search_engine.active:
            self.search_engine.refresh(self.buffer, near=self.cursor.position)

    def _layout_changed(self, line: Optional[int], version_before: int) -> None:
        if line is None:
            self.wrap.invalidate()
        else:
            self.wrap.refresh_lines(self.buffer, (line,), since_version=version_before)

    def _close_typing(self) -> None:
        if not self._typing:
            return
        self._typing = False
        if self.history.group_open and self.history.group_label == TYPING_GROUP:
            self.history.end_group()

    def _navigate_match(self, step) -> EditOutcome:
        self._close_typing()
        blocked = self._search_precondition()
        if blocked is not None:
            return blocked
        match: Optional[Match] = step()
        if match is None:
            return self._signal(Status.NO_MATCHES, "no matches", level="info")
        self.cursor.select(match.start_position, match.end_position)
        return self._outcome(Status.OK, message=self.status_line())

    def _search_precondition(self) -> Optional[EditOutcome]:
        if not self.search_engine.active:
            return self._signal(Status.EMPTY_QUERY, "empty query", level="info")
        if self.search_engine.dirty:
            self.search_engine.refresh(self.buffer, near=self.cursor.position)
        if self.match_set.is_empty:
            return self._signal(Status.NO_MATCHES, "no matches", level="info")
        return None

    def _signal(
        self, status: Status, message: str, *, level: str = "warning"
    ) -> EditOutcome:
        telemetry.record_event(
            f"session.{status.value}",
            level=level,
            data={"session": self.name, "message": message},
            logger_name="edit_engine.session",
        )
        return self._outcome(status, message=message)

    def _outcome(
        self,
        status: Status,
        *,
        changed: bool = False,
        message: Optional[str] = None,
    ) -> EditOutcome:
        return EditOutcome(
            status=status,
            changed=changed,
            position=self.cursor.position,
            selection=self.selection,
            message=message,
        )


def _single_line(command: Command) -> Optional[int]:
    """The one line an edit touched without changing the line count, if any."""

    if isinstance(command, InsertCommand):
        if "\n" in command.text or "\r" in command.text:
            return None
        return command.position.line
    if isinstance(command, DeleteCommand):
        if command.start.line != command.end.line:
            return None
        return command.start.line
    assert isinstance(command, CompositeCommand)
    lines = {_single_line(part) for part in command.commands}
    if len(lines) != 1 or None in lines:
        return None
    return lines.pop()


__all__ = ["EditOutcome", "EditorSession", "TYPING_GROUP"]
