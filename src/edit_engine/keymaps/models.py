"""Key chords, context flags, actions and the bindings that join them."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

_MODIFIER_ALIASES = {
    "control": "ctrl",
    "ctl": "ctrl",
    "option": "alt",
    "meta": "alt",
}
# Chords holding one of these never produce typed text.
COMMAND_MODIFIERS = frozenset({"ctrl", "alt"})


def _canonical_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    names = {
        _MODIFIER_ALIASES.get(name, name)
        for name in (modifier.strip().lower() for modifier in modifiers)
        if name
    }
    return tuple(sorted(names))


@dataclass(frozen=True, slots=True)
class KeyChord:
    """A key name plus the modifiers held with it, e.g. ``ctrl+shift+z``.

    Key names and modifiers are lowercased and modifiers sorted, so two
    spellings of the same chord compare equal and share a ``token``.
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        key = self.key.strip().lower() or self.key
        if not key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "modifiers", _canonical_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        return "+".join(self.modifiers + (self.key,))

    @property
    def has_command_modifier(self) -> bool:
        return not COMMAND_MODIFIERS.isdisjoint(self.modifiers)

    def with_modifier(self, modifier: str) -> "KeyChord":
        return KeyChord(self.key, self.modifiers + (modifier,))

    @classmethod
    def parse(cls, token: str) -> "KeyChord":
        """Read ``"ctrl+shift+z"``; a trailing ``"++"`` names the plus key."""

        text = token.strip()
        if not text:
            raise ValueError("key token cannot be empty")
        if text == "+" or text.endswith("++"):
            head, key = text[:-1], "+"
        else:
            head, _, key = text.rpartition("+")
        return cls(key, tuple(part for part in head.split("+") if part))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """A context flag that must be set (or, with ``!flag``, unset)."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        return cls(text[1:].strip() if negated else text, not negated)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) == self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Session intent invoked as ``handler(session, **arguments)``."""

    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Runs ``action_id`` for ``chord`` while every ``when`` clause holds.

    ``chord`` may be given as a token string and ``when`` entries as
    ``"flag"``/``"!flag"`` expressions. Among bindings that apply to the same
    chord the highest ``priority`` wins.
    """

    id: str
    chord: KeyChord
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        if isinstance(self.chord, str):
            object.__setattr__(self, "chord", KeyChord.parse(self.chord))
        clauses = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(clause)
            for clause in self.when
        )
        object.__setattr__(self, "when", clauses)

    @property
    def key_signature(self) -> str:
        return self.chord.token

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)


__all__ = [
    "ActionRef",
    "Binding",
    "COMMAND_MODIFIERS",
    "KeyChord",
    "WhenClause",
]
