"""UI-agnostic text editing engine."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "errors",
    "keymaps",
    "layout",
    "runtime",
    "search",
    "session",
]

__version__ = "0.1.0"
