"""Search and replace resolution on top of the command history."""

from __future__ import annotations

from typing import List, Optional, Tuple

from edit_engine.buffer import (
    Command,
    CommandHistory,
    CompositeCommand,
    CursorState,
    Position,
    TextBuffer,
    delete_span,
    end_of_insert,
    insert,
    replace_span,
)
from edit_engine.config import DEFAULT_MAX_MATCHES
from edit_engine.runtime import telemetry

from .matches import Match, MatchSet, find_matches


class SearchEngine:
    """Holds the active query and its match set.

    Matches are never patched after an edit: any content change marks the
    set dirty and the next ``refresh`` rescans the whole buffer.
    """

    def __init__(
        self,
        *,
        case_sensitive: bool = False,
        max_matches: int = DEFAULT_MAX_MATCHES,
        logger_name: str | None = "edit_engine.search",
    ) -> None:
        self.query = ""
        self.case_sensitive = case_sensitive
        self.max_matches = max_matches
        self.match_set = MatchSet()
        self.dirty = False
        self._logger_name = logger_name
        self.logger = telemetry.get_logger(logger_name)

    @property
    def active(self) -> bool:
        return bool(self.query)

    def search(
        self,
        buffer: TextBuffer,
        query: str,
        case_sensitive: Optional[bool] = None,
    ) -> MatchSet:
        """Scan ``buffer`` for ``query``; an empty query yields an empty set."""

        self.query = query
        if case_sensitive is not None:
            self.case_sensitive = case_sensitive
        self.match_set = MatchSet(self._scan(buffer))
        self.dirty = False
        self.logger.debug(
            f"search::scan matches={len(self.match_set)} "
            f"case_sensitive={self.case_sensitive}"
        )
        return self.match_set

    def invalidate(self) -> None:
        if self.active:
            self.dirty = True

    def refresh(
        self, buffer: TextBuffer, near: Optional[Tuple[int, int]] = None
    ) -> MatchSet:
        """Rescan after an edit, keeping the current match close to ``near``."""

        if not self.active:
            self.match_set = MatchSet()
            self.dirty = False
            return self.match_set
        self.match_set = MatchSet(self._scan(buffer))
        self.dirty = False
        if near is not None:
            self.match_set.select_nearest(near)
        return self.match_set

    def clear(self) -> None:
        self.query = ""
        self.match_set = MatchSet()
        self.dirty = False

    def next_match(self) -> Optional[Match]:
        return self.match_set.next_match()

    def previous_match(self) -> Optional[Match]:
        return self.match_set.previous_match()

    def replace_current(
        self,
        replacement: str,
        buffer: TextBuffer,
        cursor: CursorState,
        history: CommandHistory,
    ) -> Optional[Match]:
        """Replace the current match as one undo step; returns the replaced match.

        With no current match the first match at or after the caret is used.
        Afterwards the buffer is rescanned and the first match at or after
        the end of the inserted text becomes current.
        """

        if self.match_set.is_empty:
            return None
        target = self.match_set.current() or self.match_set.select_at_or_after(
            cursor.position
        )
        assert target is not None
        command = replace_span(
            buffer,
            target.start_position,
            target.end_position,
            replacement,
            cursor.position,
            label="replace",
        )
        with telemetry.span(
            "search::replace_current",
            logger_name=self._logger_name,
            component="search",
            metadata={"line": target.line, "column": target.start},
        ):
            history.push(command, buffer, cursor)
        resume = end_of_insert(target.start_position, replacement)
        self.match_set = MatchSet(self._scan(buffer))
        self.dirty = False
        self.match_set.select_at_or_after(resume)
        return target

    def replace_all(
        self,
        replacement: str,
        buffer: TextBuffer,
        cursor: CursorState,
        history: CommandHistory,
    ) -> int:
        """Replace every match in one composite command; returns the count.

        Sub-edits run from the last match to the first so that each edit
        only moves text after itself, leaving earlier match columns valid.
        """

        matches = self.match_set.matches
        if not matches:
            return 0
        command = build_replace_all(buffer, matches, replacement, cursor.position)
        with telemetry.span(
            "search::replace_all",
            logger_name=self._logger_name,
            component="search",
            metadata={"matches": len(matches)},
        ):
            history.push(command, buffer, cursor)
        self.match_set = MatchSet(self._scan(buffer))
        self.dirty = False
        return len(matches)

    def _scan(self, buffer: TextBuffer) -> List[Match]:
        return find_matches(
            buffer, self.query, self.case_sensitive, limit=self.max_matches
        )


def build_replace_all(
    buffer: TextBuffer,
    matches: Tuple[Match, ...],
    replacement: str,
    cursor_before: Tuple[int, int],
) -> CompositeCommand:
    caret = Position(*cursor_before)
    parts: List[Command] = []
    for match in reversed(matches):
        removal = delete_span(buffer, match.start_position, match.end_position, caret)
        if removal is not None:
            parts.append(removal)
            caret = removal.cursor_after
        if replacement:
            addition = insert(match.start_position, replacement, caret)
            parts.append(addition)
            caret = addition.cursor_after
    return CompositeCommand("replace_all", tuple(parts))


__all__ = ["SearchEngine", "build_replace_all"]
