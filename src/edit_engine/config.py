"""Engine configuration: history bound, wrapping, search and metric defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from edit_engine.runtime.telemetry import env, env_flag

DEFAULT_WIDE_ADVANCE = 14.0
DEFAULT_NARROW_ADVANCE = DEFAULT_WIDE_ADVANCE / 2
DEFAULT_HISTORY_CAPACITY = 100
DEFAULT_MAX_MATCHES = 10_000


@dataclass(slots=True)
class EngineConfig:
    """Fixed configuration inputs accepted by an editing session."""

    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    wrap_enabled: bool = False
    wrap_width: Optional[float] = None
    wrap_column: Optional[int] = None
    case_sensitive: bool = False
    narrow_advance: float = DEFAULT_NARROW_ADVANCE
    wide_advance: float = DEFAULT_WIDE_ADVANCE
    tab_width: int = 4
    lines_per_page: int = 20
    max_matches: int = DEFAULT_MAX_MATCHES

    def __post_init__(self) -> None:
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be at least 1")
        if self.wrap_width is not None and self.wrap_width <= 0:
            raise ValueError("wrap_width must be positive")
        if self.wrap_column is not None and self.wrap_column < 1:
            raise ValueError("wrap_column must be at least 1")
        if self.narrow_advance < 0 or self.wide_advance < 0:
            raise ValueError("advances cannot be negative")
        if self.tab_width < 1:
            raise ValueError("tab_width must be at least 1")
        if self.lines_per_page < 1:
            raise ValueError("lines_per_page must be at least 1")
        if self.max_matches < 1:
            raise ValueError("max_matches must be at least 1")

    @classmethod
    def from_env(cls, **overrides: object) -> "EngineConfig":
        """Build a config from ``EDIT_ENGINE_*`` variables; keyword overrides win."""

        values: dict[str, object] = {
            "history_capacity": _env_int("HISTORY_CAPACITY", DEFAULT_HISTORY_CAPACITY),
            "wrap_enabled": env_flag("WRAP", False),
            "wrap_width": _env_float("WRAP_WIDTH"),
            "wrap_column": _env_optional_int("WRAP_COLUMN"),
            "case_sensitive": env_flag("CASE_SENSITIVE", False),
            "tab_width": _env_int("TAB_WIDTH", 4),
            "lines_per_page": _env_int("LINES_PER_PAGE", 20),
        }
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


def _env_int(name: str, fallback: int) -> int:
    raw = env(name)
    if raw is None or not raw.strip():
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"EDIT_ENGINE_{name} must be an integer, got {raw!r}") from exc


def _env_optional_int(name: str) -> Optional[int]:
    raw = env(name)
    if raw is None or not raw.strip():
        return None
    return _env_int(name, 0)


def _env_float(name: str) -> Optional[float]:
    raw = env(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"EDIT_ENGINE_{name} must be a number, got {raw!r}") from exc


__all__ = [
    "DEFAULT_HISTORY_CAPACITY",
    "DEFAULT_MAX_MATCHES",
    "DEFAULT_NARROW_ADVANCE",
    "DEFAULT_WIDE_ADVANCE",
    "EngineConfig",
]
