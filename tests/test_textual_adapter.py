from __future__ import annotations

from typing import List

from edit_engine.adapters.textual import TextualEditorAdapter, TextualUIHooks, chord_from_textual
from edit_engine.buffer import BufferMirror, Position
from edit_engine.errors import Status
from edit_engine.session import EditorSession


def make_adapter(
    text: str = "",
) -> tuple[TextualEditorAdapter, List[BufferMirror], List[str], List[str]]:
    mirrors: List[BufferMirror] = []
    statuses: List[str] = []
    logs: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=mirrors.append,
        update_status=statuses.append,
        log=logs.append,
    )
    return TextualEditorAdapter(EditorSession(text), hooks), mirrors, statuses, logs


def test_chord_from_textual_key_names() -> None:
    assert chord_from_textual("shift+left").token == "shift+left"
    assert chord_from_textual("ctrl+z").modifiers == ("ctrl",)


def test_adapter_pushes_initial_snapshot() -> None:
    _, mirrors, _, _ = make_adapter("hello")

    assert mirrors[-1].text == "hello"
    assert mirrors[-1].cursor == Position(0, 0)


def test_typed_keys_update_buffer_mirror() -> None:
    adapter, mirrors, _, logs = make_adapter()

    adapter.handle_textual_key("h", text="h")
    adapter.handle_textual_key("i", text="i")

    assert mirrors[-1].text == "hi"
    assert mirrors[-1].modified
    assert any(line.startswith("key ->") for line in logs)


def test_unbound_keys_return_none() -> None:
    adapter, mirrors, _, _ = make_adapter("x")
    before = len(mirrors)

    assert adapter.handle_textual_key("f12") is None
    assert len(mirrors) == before


def test_status_line_reports_match_position() -> None:
    adapter, _, statuses, _ = make_adapter("ab ab ab")

    adapter.open_search("ab")
    adapter.handle_textual_key("f3")
    adapter.handle_textual_key("f3")

    assert statuses[-1] == "match 2 of 3"


def test_failed_search_surfaces_message() -> None:
    adapter, _, statuses, _ = make_adapter("abc")

    outcome = adapter.open_search("zzz")

    assert outcome.status is Status.NO_MATCHES
    assert statuses[-1] == "no matches"


def test_replace_keys_use_adapter_replacement() -> None:
    adapter, mirrors, _, _ = make_adapter("a-b-c")

    adapter.open_search("-", replace=True, replacement="+")
    adapter.handle_textual_key("ctrl+alt+enter")

    assert mirrors[-1].text == "a+b+c"


def test_closing_search_disables_search_keys() -> None:
    adapter, _, _, _ = make_adapter("ab ab")
    adapter.open_search("ab")

    adapter.close_search()

    assert adapter.handle_textual_key("f3") is None
    assert adapter.session.status_line() == ""


def test_pointer_events_and_clipboard_helpers() -> None:
    adapter, mirrors, _, _ = make_adapter("hello")

    adapter.handle_click(0, 0.0)
    adapter.handle_drag(0, 35.0)
    adapter.handle_release()
    assert adapter.copy_selection() == "hello"

    adapter.paste("bye")
    assert mirrors[-1].text == "bye"


def test_resize_rewraps_rows() -> None:
    adapter, _, _, _ = make_adapter("x" * 10)
    adapter.session.set_wrap(True)

    adapter.resize(35.0)

    assert len(adapter.session.visual_rows()) == 2
