"""Width classification and advance accumulation for mixed-width text.

Advances come from the host's font metrics; this module only classifies
characters and sums advances. When metrics are unavailable,
``FontMetrics.fallback`` uses a narrow advance of half the wide advance.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, NamedTuple, Tuple

from wcwidth import wcwidth

from edit_engine.config import DEFAULT_WIDE_ADVANCE

EPSILON = 0.001


class CharWidth(Enum):
    ZERO = 0
    NARROW = 1
    WIDE = 2


def classify(char: str) -> CharWidth:
    """East-Asian-width class of a single character.

    Control characters and combining marks are zero-width, CJK ideographs and
    full-width forms are wide, everything else is narrow.
    """

    cells = wcwidth(char)
    if cells <= 0:
        return CharWidth.ZERO
    if cells >= 2:
        return CharWidth.WIDE
    return CharWidth.NARROW


@dataclass(frozen=True, slots=True)
class FontMetrics:
    narrow_advance: float
    wide_advance: float

    @classmethod
    def fallback(cls, wide_advance: float = DEFAULT_WIDE_ADVANCE) -> "FontMetrics":
        return cls(narrow_advance=wide_advance / 2, wide_advance=wide_advance)

    def advance(self, char: str) -> float:
        return char_advance(char, self.narrow_advance, self.wide_advance)

    def measure(self, text: str) -> float:
        return measure(text, self.narrow_advance, self.wide_advance)

    def index_at_offset(self, text: str, target_offset: float) -> int:
        return index_at_offset(
            text, target_offset, self.narrow_advance, self.wide_advance
        )


def char_advance(char: str, narrow_advance: float, wide_advance: float) -> float:
    kind = classify(char)
    if kind is CharWidth.WIDE:
        return wide_advance
    if kind is CharWidth.NARROW:
        return narrow_advance
    return 0.0


def measure(text: str, narrow_advance: float, wide_advance: float) -> float:
    return sum(char_advance(char, narrow_advance, wide_advance) for char in text)


def index_at_offset(
    text: str, target_offset: float, narrow_advance: float, wide_advance: float
) -> int:
    """Caret index for a horizontal hit at ``target_offset``.

    A hit lands before a character only while it is left of that character's
    midpoint; a hit exactly on the midpoint selects the following position.
    Hits past the end clamp to ``len(text)``.
    """

    x = 0.0
    for index, char in enumerate(text):
        advance = char_advance(char, narrow_advance, wide_advance)
        if target_offset < x + advance / 2:
            return index
        x += advance
    return len(text)


def segment_geometry(
    text: str,
    start: int,
    end: int,
    narrow_advance: float,
    wide_advance: float,
) -> Tuple[float, float]:
    """Return ``(x, width)`` of characters ``[start, end)`` within ``text``."""

    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    x = measure(text[:start], narrow_advance, wide_advance)
    width = measure(text[start:end], narrow_advance, wide_advance)
    return x, width


class StyleSpan(NamedTuple):
    """Externally supplied styled run ``[start, end)`` of one line."""

    start: int
    end: int
    style: object = None


class SpanGeometry(NamedTuple):
    span: StyleSpan
    x: float
    width: float


def span_geometry(
    text: str, spans: Iterable[StyleSpan], metrics: FontMetrics
) -> List[SpanGeometry]:
    placed: List[SpanGeometry] = []
    for span in spans:
        x, width = segment_geometry(
            text, span.start, span.end, metrics.narrow_advance, metrics.wide_advance
        )
        placed.append(SpanGeometry(span, x, width))
    return placed


def compare_floats(left: float, right: float) -> int:
    """-1, 0 or 1, treating values within ``EPSILON`` as equal."""

    if abs(left - right) < EPSILON:
        return 0
    return 1 if left > right else -1


__all__ = [
    "EPSILON",
    "CharWidth",
    "FontMetrics",
    "SpanGeometry",
    "StyleSpan",
    "char_advance",
    "classify",
    "compare_floats",
    "index_at_offset",
    "measure",
    "segment_geometry",
    "span_geometry",
]
