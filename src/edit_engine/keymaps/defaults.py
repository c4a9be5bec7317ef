"""Built-in key bindings for a conventional (non-modal) editing surface."""

from __future__ import annotations

from functools import partial
from typing import Any, Iterable, Sequence

from edit_engine.actions import Motion
from edit_engine.actions import intents

from .models import ActionRef, Binding, KeyChord
from .registry import KeymapRegistry

_MOTION_KEYS: tuple[tuple[Motion, str], ...] = (
    (Motion.LEFT, "left"),
    (Motion.RIGHT, "right"),
    (Motion.UP, "up"),
    (Motion.DOWN, "down"),
    (Motion.LINE_START, "home"),
    (Motion.LINE_END, "end"),
    (Motion.PAGE_UP, "pageup"),
    (Motion.PAGE_DOWN, "pagedown"),
    (Motion.DOC_START, "ctrl+home"),
    (Motion.DOC_END, "ctrl+end"),
)


def _motion_actions() -> tuple[ActionRef, ...]:
    actions: list[ActionRef] = []
    for motion, _ in _MOTION_KEYS:
        actions.append(
            ActionRef(
                id=f"move.{motion.value}",
                handler=partial(intents.move, motion),
                description=f"Move caret: {motion.value.replace('_', ' ')}",
            )
        )
        actions.append(
            ActionRef(
                id=f"select.{motion.value}",
                handler=partial(_extend, motion),
                description=f"Extend selection: {motion.value.replace('_', ' ')}",
            )
        )
    return tuple(actions)


def _extend(motion: Motion, session: Any, **arguments: Any) -> Any:
    arguments["extend"] = True
    return intents.move(motion, session, **arguments)


def _motion_bindings() -> tuple[Binding, ...]:
    bindings: list[Binding] = []
    for motion, token in _MOTION_KEYS:
        chord = KeyChord.parse(token)
        bindings.append(
            Binding(id=f"move.{motion.value}", chord=chord, action_id=f"move.{motion.value}")
        )
        extended = chord.with_modifier("shift")
        bindings.append(
            Binding(
                id=f"select.{motion.value}",
                chord=extended,
                action_id=f"select.{motion.value}",
            )
        )
    return tuple(bindings)


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(id="edit.undo", handler=intents.undo, description="Undo last edit"),
    ActionRef(id="edit.redo", handler=intents.redo, description="Redo last undone edit"),
    ActionRef(
        id="edit.delete_before",
        handler=intents.delete_before,
        description="Delete the selection or the character before the caret",
    ),
    ActionRef(
        id="edit.delete_after",
        handler=intents.delete_after,
        description="Delete the selection or the character after the caret",
    ),
    ActionRef(
        id="edit.delete_selection",
        handler=intents.delete_selection,
        description="Delete the selection",
    ),
    ActionRef(
        id="edit.newline", handler=intents.insert_newline, description="Split the line"
    ),
    ActionRef(id="edit.tab", handler=intents.insert_tab, description="Insert indentation"),
    ActionRef(id="select.all", handler=intents.select_all, description="Select everything"),
    ActionRef(
        id="search.next", handler=intents.next_match, description="Go to next match"
    ),
    ActionRef(
        id="search.previous",
        handler=intents.previous_match,
        description="Go to previous match",
    ),
    ActionRef(
        id="search.replace_current",
        handler=intents.replace_current,
        description="Replace the current match",
    ),
    ActionRef(
        id="search.replace_all",
        handler=intents.replace_all,
        description="Replace every match",
    ),
) + _motion_actions()

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(id="edit.undo", chord=KeyChord.parse("ctrl+z"), action_id="edit.undo"),
    Binding(id="edit.redo", chord=KeyChord.parse("ctrl+y"), action_id="edit.redo"),
    Binding(
        id="edit.redo_shift",
        chord=KeyChord.parse("ctrl+shift+z"),
        action_id="edit.redo",
    ),
    Binding(
        id="edit.backspace",
        chord=KeyChord.parse("backspace"),
        action_id="edit.delete_before",
    ),
    Binding(
        id="edit.delete", chord=KeyChord.parse("delete"), action_id="edit.delete_after"
    ),
    Binding(
        id="edit.delete_selection",
        chord=KeyChord.parse("shift+delete"),
        action_id="edit.delete_selection",
    ),
    Binding(id="edit.enter", chord=KeyChord.parse("enter"), action_id="edit.newline"),
    Binding(id="edit.tab", chord=KeyChord.parse("tab"), action_id="edit.tab"),
    Binding(id="select.all", chord=KeyChord.parse("ctrl+a"), action_id="select.all"),
    Binding(
        id="search.next",
        chord=KeyChord.parse("f3"),
        action_id="search.next",
        when=("search_open",),
    ),
    Binding(
        id="search.previous",
        chord=KeyChord.parse("shift+f3"),
        action_id="search.previous",
        when=("search_open",),
    ),
    Binding(
        id="search.replace_current",
        chord=KeyChord.parse("ctrl+enter"),
        action_id="search.replace_current",
        when=("replace_open",),
    ),
    Binding(
        id="search.replace_all",
        chord=KeyChord.parse("ctrl+alt+enter"),
        action_id="search.replace_all",
        when=("replace_open",),
    ),
) + _motion_bindings()


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    extra_bindings: Iterable[Binding] | None = None,
) -> None:
    """Register built-in actions and bindings."""

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        if not _selected(binding.action_id, allowed_actions):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)


def build_default_registry() -> KeymapRegistry:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    return registry


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "build_default_registry",
    "load_default_keymaps",
]
