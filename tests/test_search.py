from edit_engine.buffer import CommandHistory, CursorState, Position, TextBuffer
from edit_engine.search import Match, MatchSet, SearchEngine, find_matches


def make_engine(text: str) -> tuple[SearchEngine, TextBuffer, CursorState, CommandHistory]:
    return SearchEngine(), TextBuffer(text), CursorState(), CommandHistory()


def test_matches_are_ordered_and_non_overlapping() -> None:
    buffer = TextBuffer("aaaa\nxaa")

    matches = find_matches(buffer, "aa", case_sensitive=True)

    assert matches == [Match(0, 0, 2), Match(0, 2, 4), Match(1, 1, 3)]


def test_case_insensitive_columns_index_original_text() -> None:
    # "İ".lower() is two characters long
    buffer = TextBuffer("İstanbul X")

    matches = find_matches(buffer, "x", case_sensitive=False)

    assert matches == [Match(0, 9, 10)]


def test_case_sensitive_search_respects_case() -> None:
    buffer = TextBuffer("Foo foo FOO")

    assert len(find_matches(buffer, "foo", case_sensitive=True)) == 1
    assert len(find_matches(buffer, "foo", case_sensitive=False)) == 3


def test_query_metacharacters_are_literal() -> None:
    buffer = TextBuffer("a.b axb (a.b)")

    assert len(find_matches(buffer, "a.b", case_sensitive=True)) == 2


def test_empty_query_has_no_matches() -> None:
    assert find_matches(TextBuffer("abc"), "", case_sensitive=False) == []


def test_limit_caps_matches() -> None:
    buffer = TextBuffer("x" * 50)

    assert len(find_matches(buffer, "x", case_sensitive=True, limit=10)) == 10


def test_next_match_wraps_around() -> None:
    matches = MatchSet([Match(0, 0, 1), Match(1, 0, 1), Match(2, 0, 1)])

    first = matches.next_match()
    matches.next_match()
    matches.next_match()

    assert matches.next_match() == first
    assert matches.current_index == 0


def test_previous_match_wraps_to_last() -> None:
    matches = MatchSet([Match(0, 0, 1), Match(1, 0, 1)])

    assert matches.previous_match() == Match(1, 0, 1)
    assert matches.previous_match() == Match(0, 0, 1)
    assert matches.previous_match() == Match(1, 0, 1)


def test_empty_match_set_navigation_returns_none() -> None:
    matches = MatchSet()

    assert matches.next_match() is None
    assert matches.previous_match() is None
    assert matches.current() is None


def test_select_nearest_weights_lines_over_columns() -> None:
    matches = MatchSet([Match(0, 900, 901), Match(1, 0, 1), Match(5, 2, 3)])

    assert matches.select_nearest((0, 0)) == Match(0, 900, 901)
    assert matches.select_nearest((4, 0)) == Match(5, 2, 3)


def test_visible_range_limits_to_line_window() -> None:
    matches = MatchSet([Match(line, 0, 1) for line in (0, 2, 2, 5, 9)])

    assert matches.visible_range(2, 5) == range(1, 4)
    assert matches.visible_range(6, 8) == range(4, 4)


def test_replace_all_is_one_undo_step() -> None:
    engine, buffer, cursor, history = make_engine("cat dog cat\ncatalog")
    engine.search(buffer, "cat")

    count = engine.replace_all("lion", buffer, cursor, history)

    assert count == 3
    assert buffer.full_text() == "lion dog lion\nlionalog"
    assert history.undo_depth == 1
    assert engine.match_set.is_empty

    history.undo(buffer, cursor)
    assert buffer.full_text() == "cat dog cat\ncatalog"


def test_replace_all_with_empty_replacement_deletes() -> None:
    engine, buffer, cursor, history = make_engine("a-b-c")
    engine.search(buffer, "-")

    engine.replace_all("", buffer, cursor, history)

    assert buffer.full_text() == "abc"


def test_replace_all_with_growing_replacement_keeps_offsets_valid() -> None:
    engine, buffer, cursor, history = make_engine("xx xx")
    engine.search(buffer, "x")

    engine.replace_all("xyz", buffer, cursor, history)

    assert buffer.full_text() == "xyzxyz xyzxyz"


def test_replace_current_advances_to_following_match() -> None:
    engine, buffer, cursor, history = make_engine("one two one two one")
    engine.search(buffer, "one")
    engine.next_match()
    engine.next_match()

    replaced = engine.replace_current("1", buffer, cursor, history)

    assert replaced == Match(0, 8, 11)
    assert buffer.full_text() == "one two 1 two one"
    assert engine.match_set.current() == Match(0, 14, 17)


def test_replace_current_without_current_uses_match_after_caret() -> None:
    engine, buffer, cursor, history = make_engine("ab ab ab")
    engine.search(buffer, "ab")
    cursor.place((0, 4))

    engine.replace_current("X", buffer, cursor, history)

    assert buffer.full_text() == "ab ab X"


def test_refresh_selects_match_nearest_caret() -> None:
    engine, buffer, _, _ = make_engine("hit\nmiss\nhit")
    engine.search(buffer, "hit")

    buffer.insert_text((1, 0), "hit ")
    refreshed = engine.refresh(buffer, near=Position(1, 2))

    assert len(refreshed) == 3
    assert refreshed.current() == Match(1, 0, 3)


def test_clear_deactivates_search() -> None:
    engine, buffer, _, _ = make_engine("abc")
    engine.search(buffer, "b")

    engine.clear()

    assert not engine.active
    assert engine.match_set.is_empty
