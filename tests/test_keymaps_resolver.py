from __future__ import annotations

from edit_engine.buffer import Position
from edit_engine.errors import Status
from edit_engine.keymaps import (
    ActionRef,
    Binding,
    KeyChord,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
    build_default_registry,
)
from edit_engine.session import EditorSession


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: action_id)


def make_binding(
    binding_id: str,
    *,
    chord: str = "ctrl+k",
    action_id: str = "edit.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        chord=KeyChord.parse(chord),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def make_resolver() -> KeymapResolver:
    return KeymapResolver(build_default_registry())


def test_resolver_matches_chord() -> None:
    binding = make_binding("edit.kill")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("ctrl+k")

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "panel.kill", when=(WhenClause("panel_open"),), action_id="edit.panel"
    )
    resolver = KeymapResolver(build_registry([gating]))

    assert resolver.resolve("ctrl+k", context={}).status == "miss"
    assert resolver.resolve("ctrl+k", context={"panel_open": True}).status == "match"


def test_resolver_prefers_higher_priority() -> None:
    low = make_binding("low", action_id="edit.low", when=(WhenClause("a"),))
    high = make_binding(
        "high", action_id="edit.high", when=(WhenClause("b"),), priority=5
    )
    resolver = KeymapResolver(build_registry([low, high]))

    result = resolver.resolve("ctrl+k", context={"a": True, "b": True})

    assert result.match is not None
    assert result.match.binding.id == "high"


def test_resolver_sees_registry_changes() -> None:
    registry = build_registry([make_binding("edit.kill")])
    resolver = KeymapResolver(registry)
    assert resolver.resolve("ctrl+k").status == "match"

    registry.unregister_binding("edit.kill")

    assert resolver.resolve("ctrl+k").status == "miss"


def test_printable_text_without_command_modifier_is_typed() -> None:
    resolver = make_resolver()

    assert resolver.resolve("a", text="a").status == "text"
    assert resolver.resolve("shift+a", text="A").status == "text"
    assert resolver.resolve("ctrl+q", text="q").status == "miss"
    assert resolver.resolve("f5").status == "miss"


def test_dispatch_types_and_undoes() -> None:
    resolver = make_resolver()
    session = EditorSession()

    for char in "hi":
        resolver.dispatch(session, char, text=char)
    outcome = resolver.dispatch(session, "ctrl+z")

    assert outcome is not None
    assert outcome.status is Status.OK
    assert session.text == ""

    resolver.dispatch(session, "ctrl+shift+z")
    assert session.text == "hi"


def test_dispatch_shift_arrows_extend_selection() -> None:
    resolver = make_resolver()
    session = EditorSession("hello")

    resolver.dispatch(session, "shift+right")
    resolver.dispatch(session, "shift+right")
    assert session.selected_text() == "he"

    resolver.dispatch(session, "backspace")
    assert session.text == "llo"


def test_dispatch_document_motions_and_select_all() -> None:
    resolver = make_resolver()
    session = EditorSession("ab\ncd")

    resolver.dispatch(session, "ctrl+end")
    assert session.position == Position(1, 2)

    resolver.dispatch(session, "ctrl+shift+home")
    assert session.selected_text() == "ab\ncd"

    resolver.dispatch(session, "shift+delete")
    assert session.text == ""


def test_search_bindings_require_open_search() -> None:
    resolver = make_resolver()
    session = EditorSession("x x x")
    session.search("x")

    assert resolver.dispatch(session, "f3") is None

    resolver.dispatch(session, "f3", context={"search_open": True})
    resolver.dispatch(session, "f3", context={"search_open": True})
    assert session.match_status() == (2, 3)

    resolver.dispatch(session, "shift+f3", context={"search_open": True})
    assert session.match_status() == (1, 3)


def test_replace_bindings_pass_replacement_text() -> None:
    resolver = make_resolver()
    session = EditorSession("x x x")
    session.search("x")
    context = {"search_open": True, "replace_open": True}

    resolver.dispatch(session, "ctrl+enter", context=context, replacement="y")
    assert session.text == "y x x"

    resolver.dispatch(session, "ctrl+alt+enter", context=context, replacement="z")
    assert session.text == "y z z"


def test_enter_and_tab_bindings() -> None:
    resolver = make_resolver()
    session = EditorSession("ab")
    session.set_cursor((0, 1))

    resolver.dispatch(session, "enter")
    resolver.dispatch(session, "tab")

    assert session.text == "a\n    b"
