"""Executable Textual app that hosts an editing session."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use edit_engine.adapters.textual.app"
    ) from exc

from edit_engine.buffer import BufferMirror
from edit_engine.config import EngineConfig
from edit_engine.session import EditorSession

from .controller import TextualEditorAdapter, TextualUIHooks

CARET = "│"

SAMPLE_TEXT = (
    "Edit engine demo.\n"
    "Type to insert, Ctrl+Z / Ctrl+Y to undo and redo, Ctrl+F to search.\n"
    "Wide characters wrap too: 漢字とかなを混ぜた行。\n"
)


def render_rows(session: EditorSession) -> str:
    """Visual rows as plain lines with the caret drawn as a bar."""

    rows = session.visual_rows()
    caret_row, caret_offset = rows.to_visual(session.position)
    lines = []
    for index, row in enumerate(rows.rows):
        segment = session.buffer.line_text(row.line)[row.start : row.end]
        if index == caret_row:
            segment = segment[:caret_offset] + CARET + segment[caret_offset:]
        lines.append(segment)
    return "\n".join(lines)


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""


class EditEngineApp(App[None]):
    """Minimal Textual UI embedding one editor session."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		content-align: left top;
		overflow: auto;
	}

	#search-input {
		display: none;
	}

	#search-input.open {
		display: block;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+f", "toggle_search", "Search"),
    ]

    def __init__(self, *, config: Optional[EngineConfig] = None, text: str = SAMPLE_TEXT) -> None:
        super().__init__()
        self._state = UIState()
        self.session = EditorSession(text, config=config or EngineConfig.from_env(), name="demo")
        self.adapter: TextualEditorAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._search_widget: Input | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view", markup=False)
            yield self._buffer_widget
        self._search_widget = Input(placeholder="search", id="search-input")
        yield self._search_widget
        self._status_widget = Static("", id="status-line", markup=False)
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)

    def on_resize(self, event: events.Resize) -> None:
        if self.adapter and self.session.config.wrap_enabled:
            # one terminal cell per narrow advance unit
            self.adapter.resize(max(1, event.size.width - 4) * self.session.metrics.narrow_advance)

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or (self._search_widget and self._search_widget.has_focus):
            return
        if event.key in {"ctrl+q", "ctrl+f"}:
            return
        outcome = self.adapter.handle_textual_key(event.key, text=event.character)
        if outcome is not None:
            event.stop()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.adapter:
            self.adapter.open_search(event.value)
        self.set_focus(None)

    def action_toggle_search(self) -> None:
        if not self._search_widget or not self.adapter:
            return
        if self._search_widget.has_class("open"):
            self._search_widget.remove_class("open")
            self.adapter.close_search()
        else:
            self._search_widget.add_class("open")
            self._search_widget.focus()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = render_rows(self.session)
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)
        if mirror.modified:
            self.sub_title = "modified"
        else:
            self.sub_title = ""

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the edit engine Textual demo.")
    parser.add_argument(
        "--wrap",
        action="store_true",
        help="Soft-wrap lines to the terminal width",
    )
    parser.add_argument(
        "--wrap-column",
        type=int,
        default=None,
        help="Soft-wrap at a fixed column instead of the terminal width",
    )
    parser.add_argument(
        "--case-sensitive",
        action="store_true",
        help="Make searches case sensitive",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    overrides = {}
    if args.wrap or args.wrap_column is not None:
        overrides["wrap_enabled"] = True
    if args.wrap_column is not None:
        overrides["wrap_column"] = args.wrap_column
    if args.case_sensitive:
        overrides["case_sensitive"] = True
    app = EditEngineApp(config=EngineConfig.from_env(**overrides))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
