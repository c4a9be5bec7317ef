"""Storage for session actions and the chords bound to them."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional, Sequence

from edit_engine.runtime.telemetry import SpanHandle, span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    chords: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A binding would be reachable under the same chord and context as another."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        taken = ", ".join(repr(other.id) for other in self.conflicts)
        super().__init__(
            f"Binding '{binding.id}' on {binding.key_signature} clashes with {taken}"
        )


def shadows(left: Binding, right: Binding) -> bool:
    """Whether two bindings on one chord are gated by exactly the same flags.

    A gated binding may share a chord with an ungated one (the resolver picks
    the gated binding when its flags hold), and bindings whose flags
    contradict can never be active together.
    """

    return left.when_map == right.when_map


class KeymapRegistry:
    """Actions by id, plus bindings grouped under their chord token.

    ``revision()`` increases on every binding change so resolvers can cache
    lookups between edits of the keymap.
    """

    def __init__(self, *, logger_name: str | None = "edit_engine.keymaps") -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._by_id: Dict[str, Binding] = {}
        self._by_chord: Dict[str, Dict[str, Binding]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"Action '{action_id}' is not registered")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._by_id.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with self._span("register_action", action_id=action.id):
            if action.id in self._actions and not replace:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts its own id and any clash."""

        with self._span(
            "register_binding", binding_id=binding.id, chord=binding.key_signature
        ) as handle:
            self._require_action(binding, handle)
            previous = self._by_id.get(binding.id)
            if previous is not None and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            clashes = self.detect_conflicts(binding, ignore=(binding.id,))
            if clashes and not replace:
                handle.add_metadata("conflicts", ",".join(b.id for b in clashes))
                raise KeymapConflictError(binding, clashes)

            for stale in ([previous] if previous else []) + clashes:
                self._unlink(stale)
            self._link(binding)
        return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with self._span("unregister_binding", binding_id=binding_id):
            binding = self._by_id.get(binding_id)
            if binding is not None:
                self._unlink(binding)
                self._revision += 1
        return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        """Swap in a copy of the binding with ``changes`` applied.

        The stored binding is left untouched when the copy names an unknown
        action or clashes with another binding.
        """

        with self._span("update_binding", binding_id=binding_id) as handle:
            current = self._by_id.get(binding_id)
            if current is None:
                handle.fail("missing_binding")
                raise KeyError(f"Binding '{binding_id}' not found")
            updated = replace(current, **changes)
            self._require_action(updated, handle)

            clashes = self.detect_conflicts(updated, ignore=(binding_id,))
            if clashes:
                handle.add_metadata("conflicts", ",".join(b.id for b in clashes))
                raise KeymapConflictError(updated, clashes)

            self._unlink(current)
            self._link(updated)
        return updated

    def iter_bindings(self, chord: Optional[str] = None) -> Iterator[Binding]:
        """All bindings, or those on the chord token ``chord`` sorted by id."""

        if chord is None:
            yield from self._by_id.values()
            return
        bucket = self._by_chord.get(chord, {})
        for binding_id in sorted(bucket):
            yield bucket[binding_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._by_id),
            chords=tuple(sorted(self._by_chord)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] | None = None
    ) -> list[Binding]:
        skip = set(ignore or ())
        return [
            other
            for other in self.iter_bindings(binding.key_signature)
            if other.id not in skip and shadows(binding, other)
        ]

    @contextmanager
    def _span(self, operation: str, **metadata: object) -> Iterator[SpanHandle]:
        with span(
            f"keymaps::{operation}",
            logger_name=self._logger_name,
            component="keymaps",
            metadata=metadata,
        ) as handle:
            yield handle

    def _require_action(self, binding: Binding, handle: SpanHandle) -> None:
        if binding.action_id not in self._actions:
            handle.add_metadata("missing_action", binding.action_id)
            raise KeyError(
                f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
            )

    def _link(self, binding: Binding) -> None:
        self._by_id[binding.id] = binding
        self._by_chord.setdefault(binding.key_signature, {})[binding.id] = binding
        self._revision += 1

    def _unlink(self, binding: Binding) -> None:
        self._by_id.pop(binding.id, None)
        bucket = self._by_chord.get(binding.key_signature)
        if bucket is None:
            return
        bucket.pop(binding.id, None)
        if not bucket:
            del self._by_chord[binding.key_signature]


__all__ = [
    "KeymapConflictError",
    "KeymapRegistry",
    "RegistryStats",
    "shadows",
]
