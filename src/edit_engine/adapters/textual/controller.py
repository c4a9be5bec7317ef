"""Textual adapter that turns key/pointer events into session intents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from edit_engine.buffer import BufferMirror
from edit_engine.keymaps import KeyChord, KeymapResolver, build_default_registry
from edit_engine.runtime.telemetry import get_logger
from edit_engine.session import EditOutcome, EditorSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


def chord_from_textual(key: str) -> KeyChord:
    """Textual key names (``"shift+left"``, ``"ctrl+z"``) as chords."""

    return KeyChord.parse(key)


class TextualEditorAdapter:
    """Bridges an :class:`EditorSession` to a Textual-friendly surface.

    The adapter owns the host-side flags the default bindings look at
    (``search_open`` and ``replace_open``) and the pending replacement text.
    """

    def __init__(
        self,
        session: EditorSession,
        hooks: TextualUIHooks,
        *,
        resolver: Optional[KeymapResolver] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.resolver = resolver or KeymapResolver(build_default_registry())
        self.search_open = False
        self.replace_open = False
        self.replacement = ""
        self.logger = get_logger("edit_engine.adapters")
        self._refresh()

    def context(self) -> Dict[str, bool]:
        return {
            "search_open": self.search_open,
            "replace_open": self.replace_open,
            "has_selection": self.session.cursor.has_selection,
        }

    def handle_textual_key(
        self, key: str, *, text: Optional[str] = None
    ) -> Optional[EditOutcome]:
        """Dispatch one key event; ``None`` when nothing was bound to it."""

        chord = chord_from_textual(key)
        self._log_state("key ->", key=chord.token, text=text)
        outcome = self.resolver.dispatch(
            self.session,
            chord,
            text=text,
            context=self.context(),
            replacement=self.replacement,
        )
        if outcome is not None:
            self._after_outcome(outcome)
            self._log_state(
                "result <-",
                status=outcome.status.value,
                changed=outcome.changed,
                message=outcome.message,
            )
        return outcome

    def handle_click(self, row: int, x: float, *, extend: bool = False) -> EditOutcome:
        outcome = self.session.click(row, x, extend=extend)
        self._after_outcome(outcome)
        return outcome

    def handle_drag(self, row: int, x: float) -> EditOutcome:
        outcome = self.session.drag(row, x)
        self._after_outcome(outcome)
        return outcome

    def handle_release(self) -> EditOutcome:
        return self.session.release()

    def paste(self, text: str) -> EditOutcome:
        outcome = self.session.paste(text)
        self._after_outcome(outcome)
        return outcome

    def copy_selection(self) -> Optional[str]:
        """Selected text for the host clipboard."""

        return self.session.selected_text()

    def open_search(
        self,
        query: str,
        *,
        replace: bool = False,
        replacement: str = "",
        case_sensitive: Optional[bool] = None,
    ) -> EditOutcome:
        self.search_open = True
        self.replace_open = replace
        self.replacement = replacement
        outcome = self.session.search(query, case_sensitive)
        self._after_outcome(outcome)
        return outcome

    def close_search(self) -> EditOutcome:
        self.search_open = False
        self.replace_open = False
        outcome = self.session.close_search()
        self._after_outcome(outcome)
        return outcome

    def resize(self, width: Optional[float]) -> None:
        self.session.set_viewport_width(width)
        self._refresh()

    def status_text(self, outcome: Optional[EditOutcome] = None) -> str:
        if outcome is not None and not outcome.ok and outcome.message:
            return outcome.message
        return self.session.status_line()

    def _after_outcome(self, outcome: EditOutcome) -> None:
        self.hooks.update_status(self.status_text(outcome))
        self._refresh()

    def _refresh(self) -> None:
        self.hooks.update_buffer(self.session.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        line = " ".join(parts)
        self.logger.debug(line)
        self.hooks.log(line)

    def _state_metadata(self) -> Dict[str, object]:
        session = self.session
        return {
            "session": session.name,
            "cursor": tuple(session.position),
            "selection": session.selection,
            "search_open": self.search_open,
            "buffer_version": session.buffer.version,
        }


__all__ = ["TextualEditorAdapter", "TextualUIHooks", "chord_from_textual"]
