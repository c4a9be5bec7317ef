"""Width-aware measurement and soft line wrapping."""

from .width import (
    CharWidth,
    FontMetrics,
    SpanGeometry,
    StyleSpan,
    char_advance,
    classify,
    compare_floats,
    index_at_offset,
    measure,
    segment_geometry,
    span_geometry,
)
from .wrapping import VisualRow, VisualRowMap, WrapMapper, wrap_line

__all__ = [
    "CharWidth",
    "FontMetrics",
    "SpanGeometry",
    "StyleSpan",
    "VisualRow",
    "VisualRowMap",
    "WrapMapper",
    "char_advance",
    "classify",
    "compare_floats",
    "index_at_offset",
    "measure",
    "segment_geometry",
    "span_geometry",
    "wrap_line",
]
