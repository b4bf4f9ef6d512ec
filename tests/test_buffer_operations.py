from __future__ import annotations

import pytest

from ed_engine.buffer import Buffer, LineDocument
from ed_engine.errors import InvalidAddress, InvalidDestination, InvalidRange


def make_buffer(*lines: str) -> Buffer:
    return Buffer.from_text("".join(f"{line}\n" for line in lines))


def test_document_tracks_trailing_newline() -> None:
    with_newline = LineDocument.from_text("a\nb\n")
    without_newline = LineDocument.from_text("a\nb")

    assert with_newline.last_line == 2
    assert with_newline.ends_with_newline
    assert without_newline.last_line == 2
    assert not without_newline.ends_with_newline
    assert LineDocument().last_line == 0


def test_insert_advances_cursor_by_inserted_count() -> None:
    buffer = make_buffer("one", "four")
    buffer.current_line = 1

    inserted = buffer.insert_lines(1, ["two", "three"])

    assert inserted == 2
    assert buffer.lines == ["one", "two", "three", "four", ""]
    assert buffer.current_line == 3


def test_insert_at_end_adds_newline_sentinel() -> None:
    buffer = Buffer.from_text("a\nb")

    buffer.insert_lines(2, ["c"])

    assert buffer.text() == "a\nb\nc\n"
    assert buffer.last_line == 3


def test_insert_into_empty_buffer() -> None:
    buffer = Buffer()

    buffer.insert_lines(0, ["hello"])

    assert buffer.text() == "hello\n"
    assert buffer.current_line == 1


def test_insert_shifts_next_line_when_before_it() -> None:
    buffer = make_buffer("a", "b", "c")
    buffer.state.next_line = 3

    buffer.insert_lines(1, ["x"])
    assert buffer.state.next_line == 4

    buffer.insert_lines(4, ["y"])
    assert buffer.state.next_line == 4


def test_delete_adjusts_current_and_next_line() -> None:
    buffer = make_buffer("a", "b", "c", "d", "e")
    buffer.state.next_line = 5

    buffer.delete_lines(2, 3)

    assert buffer.lines == ["a", "d", "e", ""]
    assert buffer.current_line == 2
    assert buffer.state.next_line == 3


def test_delete_span_containing_next_line_clamps_it() -> None:
    buffer = make_buffer("a", "b", "c", "d")
    buffer.state.next_line = 3

    buffer.delete_lines(2, 3)

    assert buffer.state.next_line == 2


def test_delete_last_lines_moves_cursor_to_new_end() -> None:
    buffer = make_buffer("a", "b", "c")

    buffer.delete_lines(2, 3)

    assert buffer.current_line == 1
    buffer.delete_lines(1, 1)
    assert buffer.last_line == 0
    assert buffer.current_line == 0
    assert buffer.text() == ""


def test_delete_rejects_bad_ranges() -> None:
    buffer = make_buffer("a", "b")

    with pytest.raises(InvalidRange):
        buffer.delete_lines(2, 1)
    with pytest.raises(InvalidAddress):
        buffer.delete_lines(1, 3)
    assert buffer.lines == ["a", "b", ""]


def test_join_concatenates_range() -> None:
    buffer = make_buffer("a", "b", "c", "d")
    buffer.state.next_line = 4

    buffer.join_lines(1, 3)

    assert buffer.lines == ["abc", "d", ""]
    assert buffer.last_line == 2
    assert buffer.current_line == 1
    assert buffer.state.next_line == 2


def test_join_single_line_is_a_no_op_on_content() -> None:
    buffer = make_buffer("a", "b")

    buffer.join_lines(2, 2)

    assert buffer.lines == ["a", "b", ""]
    assert buffer.current_line == 2


def test_move_range_to_top() -> None:
    buffer = make_buffer("L1", "L2", "L3", "L4")

    buffer.move_lines(2, 3, 0)

    assert buffer.lines == ["L2", "L3", "L1", "L4", ""]
    assert buffer.current_line == 2


def test_move_range_down() -> None:
    buffer = make_buffer("L1", "L2", "L3", "L4")

    buffer.move_lines(1, 2, 3)

    assert buffer.lines == ["L3", "L1", "L2", "L4", ""]
    assert buffer.current_line == 3


def test_moved_lines_get_fresh_ids() -> None:
    buffer = make_buffer("a", "b")
    original = buffer.line_id(1)

    buffer.move_lines(1, 1, 2)

    assert buffer.lines == ["b", "a", ""]
    assert buffer.line_id(2) != original


def test_move_rejects_destination_inside_range() -> None:
    buffer = make_buffer("a", "b", "c", "d")

    with pytest.raises(InvalidDestination):
        buffer.move_lines(1, 3, 2)
    with pytest.raises(InvalidDestination):
        buffer.move_lines(1, 1, 9)
    assert buffer.lines == ["a", "b", "c", "d", ""]


def test_replace_text_keeps_line_identity() -> None:
    buffer = make_buffer("a", "b")
    line_id = buffer.line_id(2)

    buffer.replace_text(2, "B")

    assert buffer.line(2) == "B"
    assert buffer.line_id(2) == line_id
