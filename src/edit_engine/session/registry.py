"""Explicit focus ownership for hosts that compose several sessions."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from edit_engine.config import EngineConfig
from edit_engine.runtime.telemetry import record_event

from .editor import EditorSession


class SessionRegistry:
    """Owns a set of sessions and the single id that currently has focus.

    Ids come from a counter private to each registry, so two registries
    never interfere and tests can rely on ids starting at 1.
    """

    def __init__(
        self,
        *,
        config: Optional[EngineConfig] = None,
        logger_name: str | None = "edit_engine.session",
    ) -> None:
        self.config = config
        self._sessions: Dict[int, EditorSession] = {}
        self._next_id = 1
        self._active_id: Optional[int] = None
        self._logger_name = logger_name

    def open(
        self,
        text: str = "",
        *,
        name: Optional[str] = None,
        config: Optional[EngineConfig] = None,
    ) -> EditorSession:
        session_id = self._next_id
        self._next_id += 1
        session = EditorSession(
            text,
            config=config or self.config,
            name=name or f"session-{session_id}",
            session_id=session_id,
        )
        self._sessions[session_id] = session
        return session

    def close(self, session_id: int) -> Optional[EditorSession]:
        session = self._sessions.pop(session_id, None)
        if session is not None and self._active_id == session_id:
            self._active_id = None
        return session

    def get(self, session_id: int) -> EditorSession:
        try:
            return self._sessions[session_id]
        except KeyError as exc:
            raise KeyError(f"Session {session_id} is not registered") from exc

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[EditorSession]:
        return iter(self._sessions.values())

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @property
    def active_id(self) -> Optional[int]:
        return self._active_id

    @property
    def active(self) -> Optional[EditorSession]:
        if self._active_id is None:
            return None
        return self._sessions[self._active_id]

    def focus(self, session_id: int) -> EditorSession:
        """Give input focus to ``session_id``, taking it from any other session."""

        session = self.get(session_id)
        previous = self._active_id
        self._active_id = session_id
        if previous != session_id:
            record_event(
                "session.focus",
                level="debug",
                data={"session": session_id, "previous": previous},
                logger_name=self._logger_name,
            )
        return session

    def blur(self, session_id: Optional[int] = None) -> None:
        """Drop focus; with ``session_id`` only if that session holds it."""

        if session_id is None or session_id == self._active_id:
            self._active_id = None

    def is_focused(self, session_id: int) -> bool:
        return self._active_id is not None and self._active_id == session_id


__all__ = ["SessionRegistry"]
