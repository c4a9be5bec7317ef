"""Declarative key bindings mapped onto session intents."""

from .models import ActionRef, Binding, KeyChord, WhenClause
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats, shadows
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .defaults import (
    DEFAULT_ACTIONS,
    DEFAULT_BINDINGS,
    build_default_registry,
    load_default_keymaps,
)

__all__ = [
    "ActionRef",
    "Binding",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "KeyChord",
    "KeymapConflictError",
    "KeymapRegistry",
    "KeymapResolver",
    "RegistryStats",
    "ResolutionMatch",
    "ResolutionResult",
    "WhenClause",
    "build_default_registry",
    "load_default_keymaps",
    "shadows",
]
