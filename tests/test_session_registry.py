import threading

import pytest

from edit_engine.session import SessionRegistry, SharedSession


def test_registries_hand_out_independent_ids() -> None:
    first = SessionRegistry()
    second = SessionRegistry()

    a = first.open("a")
    b = first.open("b")
    c = second.open("c")

    assert (a.session_id, b.session_id, c.session_id) == (1, 2, 1)
    assert a.name == "session-1"
    assert len(first) == 2


def test_focus_is_exclusive() -> None:
    registry = SessionRegistry()
    left = registry.open()
    right = registry.open()

    registry.focus(left.session_id)
    registry.focus(right.session_id)

    assert registry.active is right
    assert registry.is_focused(right.session_id)
    assert not registry.is_focused(left.session_id)


def test_blur_only_drops_matching_focus() -> None:
    registry = SessionRegistry()
    left = registry.open()
    right = registry.open()
    registry.focus(left.session_id)

    registry.blur(right.session_id)
    assert registry.active_id == left.session_id

    registry.blur()
    assert registry.active is None


def test_closing_focused_session_clears_focus() -> None:
    registry = SessionRegistry()
    session = registry.open()
    registry.focus(session.session_id)

    assert registry.close(session.session_id) is session
    assert registry.active is None
    assert session.session_id not in registry


def test_focus_unknown_session_raises() -> None:
    with pytest.raises(KeyError):
        SessionRegistry().focus(42)


def test_sessions_edit_independently() -> None:
    registry = SessionRegistry()
    left = registry.open("left")
    right = registry.open("right")

    left.insert_text("!")
    left.undo()
    right.insert_text("?")

    assert left.text == "left"
    assert right.text == "?right"
    assert left.can_redo()
    assert not right.can_redo()


def test_clones_share_session_and_lock() -> None:
    registry = SessionRegistry()
    handle = SharedSession(registry.open())
    clone = handle.clone()

    with clone as session:
        session.insert_text("abc")
    with handle as session:
        assert session.text == "abc"
        session.undo()

    assert clone.shares_with(handle)
    assert clone.run(lambda session: session.text) == ""


def test_shared_handle_serializes_writers() -> None:
    handle = SharedSession(SessionRegistry().open())

    def worker() -> None:
        local = handle.clone()
        for _ in range(50):
            with local as session:
                session.insert_text("x")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    with handle as session:
        assert session.text == "x" * 200
        assert session.history.undo_depth == 100
