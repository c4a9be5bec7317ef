"""Search/replace: match scanning, pagination and replacement commands."""

from .engine import SearchEngine, build_replace_all
from .matches import Match, MatchSet, find_matches

__all__ = [
    "Match",
    "MatchSet",
    "SearchEngine",
    "build_replace_all",
    "find_matches",
]
