"""Textual host bridge. The demo app lives in ``app`` and imports textual."""

from .controller import TextualEditorAdapter, TextualUIHooks, chord_from_textual

__all__ = ["TextualEditorAdapter", "TextualUIHooks", "chord_from_textual"]
