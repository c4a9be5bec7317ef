"""Match scanning and the paginated match set."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from edit_engine.buffer import Position, TextBuffer
from edit_engine.config import DEFAULT_MAX_MATCHES


@dataclass(frozen=True, slots=True)
class Match:
    """One hit: columns ``[start, end)`` of ``line``."""

    line: int
    start: int
    end: int

    @property
    def start_position(self) -> Position:
        return Position(self.line, self.start)

    @property
    def end_position(self) -> Position:
        return Position(self.line, self.end)


def find_matches(
    buffer: TextBuffer,
    query: str,
    case_sensitive: bool,
    *,
    limit: Optional[int] = DEFAULT_MAX_MATCHES,
) -> List[Match]:
    """Non-overlapping hits, left to right within a line, top to bottom.

    Case-insensitive scanning matches against the original line rather than
    a lowered copy, so reported columns always index the original text.
    """

    if not query:
        return []
    flags = 0 if case_sensitive else re.IGNORECASE
    pattern = re.compile(re.escape(query), flags)
    found: List[Match] = []
    for line_index, text in enumerate(buffer.snapshot()):
        if len(text) < len(query):
            continue
        for hit in pattern.finditer(text):
            found.append(Match(line_index, hit.start(), hit.end()))
            if limit is not None and len(found) >= limit:
                return found
    return found


class MatchSet:
    """Ordered matches plus a circular "current" cursor for pagination."""

    def __init__(
        self, matches: Sequence[Match] = (), current_index: Optional[int] = None
    ) -> None:
        self._matches: Tuple[Match, ...] = tuple(matches)
        if not self._matches:
            current_index = None
        elif current_index is not None:
            current_index = max(0, min(current_index, len(self._matches) - 1))
        self._current = current_index

    @property
    def matches(self) -> Tuple[Match, ...]:
        return self._matches

    @property
    def current_index(self) -> Optional[int]:
        return self._current

    def __len__(self) -> int:
        return len(self._matches)

    def __iter__(self):
        return iter(self._matches)

    @property
    def is_empty(self) -> bool:
        return not self._matches

    def current(self) -> Optional[Match]:
        if self._current is None:
            return None
        return self._matches[self._current]

    def next_match(self) -> Optional[Match]:
        """Advance circularly; ``None`` when there are no matches."""

        if not self._matches:
            return None
        if self._current is None:
            self._current = 0
        else:
            self._current = (self._current + 1) % len(self._matches)
        return self._matches[self._current]

    def previous_match(self) -> Optional[Match]:
        if not self._matches:
            return None
        if self._current is None:
            self._current = len(self._matches) - 1
        else:
            self._current = (self._current - 1) % len(self._matches)
        return self._matches[self._current]

    def select_at_or_after(self, position: Tuple[int, int]) -> Optional[Match]:
        """Make the first match starting at or after ``position`` current,
        wrapping to the first match when none does."""

        if not self._matches:
            return None
        target = Position(*position)
        for index, match in enumerate(self._matches):
            if match.start_position >= target:
                self._current = index
                break
        else:
            self._current = 0
        return self._matches[self._current]

    def select_nearest(self, position: Tuple[int, int]) -> Optional[Match]:
        """Make the match closest to ``position`` current.

        Line distance dominates: it is weighted 1000x over column distance.
        """

        if not self._matches:
            self._current = None
            return None
        line, column = position
        self._current = min(
            range(len(self._matches)),
            key=lambda index: abs(self._matches[index].line - line) * 1000
            + abs(self._matches[index].start - column),
        )
        return self._matches[self._current]

    def visible_range(self, first_line: int, last_line: int) -> range:
        """Indices of matches on lines ``first_line..last_line`` inclusive."""

        start = 0
        while start < len(self._matches) and self._matches[start].line < first_line:
            start += 1
        end = start
        while end < len(self._matches) and self._matches[end].line <= last_line:
            end += 1
        return range(start, end)


__all__ = ["Match", "MatchSet", "find_matches"]
