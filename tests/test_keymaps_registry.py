import pytest

from edit_engine.keymaps import (
    DEFAULT_BINDINGS,
    ActionRef,
    Binding,
    KeyChord,
    KeymapConflictError,
    KeymapRegistry,
    WhenClause,
    build_default_registry,
    load_default_keymaps,
    shadows,
)


def make_action(action_id: str = "edit.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    chord: str = "ctrl+k",
    action_id: str = "edit.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        chord=KeyChord.parse(chord),
        action_id=action_id,
        when=when,
    )


def test_chord_parsing_normalizes_modifiers() -> None:
    chord = KeyChord.parse("Shift+Control+Z")

    assert chord.modifiers == ("ctrl", "shift")
    assert chord.token == "ctrl+shift+z"
    assert chord.has_command_modifier


def test_chord_parsing_handles_plus_key() -> None:
    assert KeyChord.parse("ctrl++") == KeyChord("+", ("ctrl",))
    assert KeyChord.parse("+").token == "+"


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="edit.kill")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings("ctrl+k")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="edit.kill"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="edit.kill.duplicate"))


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="panel", when=(WhenClause("panel_open"),))
    )
    registry.register_binding(
        make_binding(binding_id="no_panel", when=(WhenClause.parse("!panel_open"),))
    )

    assert registry.stats().binding_count == 3


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", chord="ctrl+j")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]
    assert registry.stats().chords == ("ctrl+j",)


def test_update_binding_changes_chord() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))
    before = registry.revision()

    updated = registry.update_binding(
        "binding", chord=KeyChord.parse("alt+d"), description="delete word"
    )

    assert updated.key_signature == "alt+d"
    assert updated.description == "delete word"
    assert registry.revision() == before + 1


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_default_keymaps_register_without_conflicts() -> None:
    registry = build_default_registry()

    assert registry.stats().binding_count == len(DEFAULT_BINDINGS)
    assert registry.get_binding("edit.redo_shift").key_signature == "ctrl+shift+z"
    assert registry.get_binding("select.line_start").key_signature == "shift+home"
    assert registry.get_binding("select.doc_end").key_signature == "ctrl+shift+end"


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("edit.undo",),
        include_bindings=("edit.undo",),
    )

    assert registry.stats().binding_count == 1
    assert registry.get_binding("edit.undo").action_id == "edit.undo"


def test_shadows_compares_when_flags() -> None:
    plain = make_binding(binding_id="plain")
    gated = Binding(id="gated", chord="ctrl+k", action_id="edit.test", when=("panel_open",))
    same = Binding(id="same", chord="ctrl+k", action_id="edit.test", when=("panel_open",))

    assert shadows(plain, make_binding(binding_id="other"))
    assert not shadows(plain, gated)
    assert shadows(gated, same)
    assert gated.when == (WhenClause("panel_open"),)


def test_update_binding_conflict_keeps_original() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="first"))
    registry.register_binding(make_binding(binding_id="second", chord="ctrl+j"))

    with pytest.raises(KeymapConflictError):
        registry.update_binding("second", chord=KeyChord.parse("ctrl+k"))

    assert registry.get_binding("second").key_signature == "ctrl+j"
    assert [b.id for b in registry.iter_bindings("ctrl+k")] == ["first"]
