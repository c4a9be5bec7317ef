"""Chord resolution and dispatch onto an editor session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Literal, Mapping, Optional

from edit_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyChord
from .registry import KeymapRegistry

if TYPE_CHECKING:
    from edit_engine.session import EditOutcome, EditorSession


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver.

    ``"text"`` means no binding applied but the key produced printable text
    with no Ctrl/Alt held, so it should be typed.
    """

    status: Literal["match", "text", "miss"]
    match: Optional[ResolutionMatch] = None
    text: Optional[str] = None


class KeymapResolver:
    """Resolves chords against a registry, caching the chord index per revision."""

    def __init__(
        self,
        registry: KeymapRegistry,
        *,
        logger_name: str | None = "edit_engine.keymaps",
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Optional[tuple[int, Dict[str, tuple[str, ...]]]] = None

    def resolve(
        self,
        chord: KeyChord | str,
        *,
        text: Optional[str] = None,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        if isinstance(chord, str):
            chord = KeyChord.parse(chord)
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"chord": chord.token},
        ) as handle:
            match = self._select_match(chord.token, ctx)
            if match:
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", match.binding.id)
                return ResolutionResult(status="match", match=match)

            if text and text.isprintable() and not chord.has_command_modifier:
                handle.add_metadata("status", "text")
                return ResolutionResult(status="text", text=text)

            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss")

    def dispatch(
        self,
        session: "EditorSession",
        chord: KeyChord | str,
        *,
        text: Optional[str] = None,
        context: Optional[Mapping[str, bool]] = None,
        **arguments: Any,
    ) -> Optional["EditOutcome"]:
        """Run whatever ``chord`` resolves to; ``None`` when nothing applies."""

        result = self.resolve(chord, text=text, context=context)
        if result.status == "match":
            assert result.match is not None
            return result.match.action(session, **arguments)  # type: ignore[return-value]
        if result.status == "text":
            assert result.text is not None
            if len(result.text) == 1:
                return session.insert_char(result.text)
            return session.insert_text(result.text)
        return None

    def reset(self) -> None:
        self._cache = None

    def _chord_table(self) -> Dict[str, tuple[str, ...]]:
        revision = self._registry.revision()
        if self._cache and self._cache[0] == revision:
            return self._cache[1]
        table: Dict[str, list[str]] = {}
        for binding in self._registry.iter_bindings():
            table.setdefault(binding.key_signature, []).append(binding.id)
        frozen = {token: tuple(ids) for token, ids in table.items()}
        self._cache = (revision, frozen)
        return frozen

    def _select_match(
        self, token: str, context: Mapping[str, bool]
    ) -> Optional[ResolutionMatch]:
        matches: list[ResolutionMatch] = []
        for binding_id in self._chord_table().get(token, ()):
            binding = self._registry.get_binding(binding_id)
            if not binding.allows(context):
                continue
            action = self._registry.get_action(binding.action_id)
            matches.append(ResolutionMatch(binding=binding, action=action))

        if not matches:
            return None

        matches.sort(key=lambda m: (-m.binding.priority, m.binding.id))
        return matches[0]


__all__ = [
    "KeymapResolver",
    "ResolutionMatch",
    "ResolutionResult",
]
