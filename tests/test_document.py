import pytest

from edit_engine.buffer import CursorState, Position, TextBuffer, delete_before
from edit_engine.buffer.validation import clamp_position, ensure_position
from edit_engine.errors import OutOfRange


def make_buffer(*lines: str) -> TextBuffer:
    return TextBuffer("\n".join(lines))


def test_empty_buffer_has_one_empty_line() -> None:
    buffer = TextBuffer()

    assert buffer.snapshot() == ("",)
    assert buffer.line_count() == 1
    assert buffer.end_position() == Position(0, 0)


def test_split_accepts_every_line_terminator() -> None:
    buffer = TextBuffer("a\r\nb\rc\nd")

    assert buffer.snapshot() == ("a", "b", "c", "d")
    assert buffer.full_text() == "a\nb\nc\nd"


def test_insert_char_advances_version() -> None:
    buffer = make_buffer("ac")
    before = buffer.version

    buffer.insert_char((0, 1), "b")

    assert buffer.line_text(0) == "abc"
    assert buffer.version == before + 1


def test_insert_char_rejects_line_terminators_and_strings() -> None:
    buffer = make_buffer("a")

    with pytest.raises(ValueError):
        buffer.insert_char((0, 0), "\n")
    with pytest.raises(ValueError):
        buffer.insert_char((0, 0), "ab")


def test_columns_are_characters_not_bytes() -> None:
    buffer = make_buffer("汉字")

    buffer.insert_char((0, 1), "x")

    assert buffer.line_text(0) == "汉x字"
    assert buffer.line_length(0) == 3


def test_insert_newline_splits_line() -> None:
    buffer = make_buffer("hello")

    caret = buffer.insert_newline((0, 2))

    assert buffer.snapshot() == ("he", "llo")
    assert caret == Position(1, 0)


def test_insert_text_multiline() -> None:
    buffer = make_buffer("[]")

    caret = buffer.insert_text((0, 1), "one\ntwo\nthree")

    assert buffer.snapshot() == ("[one", "two", "three]")
    assert caret == Position(2, 5)


def test_delete_char_before_joins_lines() -> None:
    buffer = make_buffer("ab", "cd")

    removed = buffer.delete_char_before((1, 0))

    assert removed == "\n"
    assert buffer.snapshot() == ("abcd",)


def test_delete_before_command_places_caret_at_join() -> None:
    buffer = make_buffer("ab", "cd")
    cursor = CursorState(position=Position(1, 0))
    command = delete_before(buffer, (1, 0), (1, 0))
    assert command is not None

    command.apply(buffer, cursor)

    assert buffer.snapshot() == ("abcd",)
    assert cursor.position == Position(0, 2)


def test_delete_char_after_at_line_end_joins_next_line() -> None:
    buffer = make_buffer("ab", "cd")

    buffer.delete_char_after((0, 2))

    assert buffer.snapshot() == ("abcd",)


def test_delete_at_document_edges_is_noop() -> None:
    buffer = make_buffer("ab")
    version = buffer.version

    assert buffer.delete_char_before((0, 0)) == ""
    assert buffer.delete_char_after((0, 2)) == ""
    assert buffer.version == version


def test_delete_range_is_order_insensitive() -> None:
    forward = make_buffer("one", "two", "three")
    backward = make_buffer("one", "two", "three")

    assert forward.delete_range((0, 1), (2, 2)) == "ne\ntwo\nth"
    assert backward.delete_range((2, 2), (0, 1)) == "ne\ntwo\nth"
    assert forward.snapshot() == backward.snapshot() == ("oree",)


def test_text_range_spans_lines() -> None:
    buffer = make_buffer("abc", "def")

    assert buffer.text_range((0, 2), (1, 1)) == "c\nd"
    assert buffer.text_range((1, 1), (1, 1)) == ""


def test_out_of_range_positions_raise() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(OutOfRange) as info:
        buffer.insert_char((0, 4), "x")
    assert info.value.position == (0, 4)

    with pytest.raises(OutOfRange):
        buffer.line_text(3)
    with pytest.raises(OutOfRange):
        ensure_position(buffer, (-1, 0))


def test_clamp_position_pulls_into_document() -> None:
    buffer = make_buffer("abc", "d")

    assert clamp_position(buffer, (5, 9)) == Position(1, 1)
    assert clamp_position(buffer, (0, 10)) == Position(0, 3)
    assert clamp_position(buffer, (-2, -1)) == Position(0, 0)


def test_replace_content_resets_lines() -> None:
    buffer = make_buffer("old")

    buffer.replace_content("new\ntext")

    assert buffer.snapshot() == ("new", "text")
