"""Lock-guarded handle for sharing one session between threads."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional, TypeVar

from .editor import EditorSession

T = TypeVar("T")


class SharedSession:
    """Cloneable handle to a single :class:`EditorSession`.

    All handles produced by :meth:`clone` share the session and one
    re-entrant lock. Access only happens inside ``with handle as session:``,
    so edits stay logically sequential; nothing here makes concurrent
    writers meaningful, it only serializes them.
    """

    __slots__ = ("_session", "_lock")

    def __init__(
        self, session: EditorSession, *, lock: Optional[threading.RLock] = None
    ) -> None:
        self._session = session
        self._lock = lock or threading.RLock()

    def clone(self) -> "SharedSession":
        return SharedSession(self._session, lock=self._lock)

    def shares_with(self, other: "SharedSession") -> bool:
        return self._session is other._session and self._lock is other._lock

    def __enter__(self) -> EditorSession:
        self._lock.acquire()
        return self._session

    def __exit__(self, *_exc: Any) -> None:
        self._lock.release()

    def run(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``operation(session, *args, **kwargs)`` while holding the lock."""

        with self as session:
            return operation(session, *args, **kwargs)


__all__ = ["SharedSession"]
