from __future__ import annotations

from typing import Iterable, List, Tuple

import pytest

from ed_engine.buffer import Buffer
from ed_engine.commands import is_global_command, parse_global_command, read_rest_of_command
from ed_engine.errors import RegexNoSlash, RegexUnterminated
from ed_engine.session import EditorSession


def make_session(text: str, inputs: Iterable[str] = ()) -> Tuple[EditorSession, List[str]]:
    pending = list(inputs)
    output: List[str] = []

    def read_line(prompt: str = "") -> str | None:
        return pending.pop(0) if pending else None

    session = EditorSession(
        buffer=Buffer.from_text(text), read_line=read_line, write=output.append
    )
    return session, output


def test_global_delete_visits_each_match_once() -> None:
    session, _ = make_session("a\nfoo\nb\nfoo\nc\n")

    result = session.run_command("g/foo/d")

    assert result.status == "global"
    assert session.buffer.lines == ["a", "b", "c", ""]
    assert session.buffer.modified


def test_inverted_global() -> None:
    session, _ = make_session("a\nfoo\nb\n")

    session.run_command("v/foo/d")

    assert session.buffer.lines == ["foo", ""]


def test_global_with_empty_command_prints_matches() -> None:
    session, output = make_session("foo 1\nbar\nfoo 2\n")

    session.run_command("g/foo/")

    assert output == ["foo 1", "foo 2"]
    assert session.buffer.current_line == 3


def test_global_move_to_top_reverses_buffer() -> None:
    session, _ = make_session("a\nb\nc\n")

    session.run_command("g/^/m0")

    assert session.buffer.lines == ["c", "b", "a", ""]


def test_global_append_skips_inserted_lines() -> None:
    session, _ = make_session("a\nb\na\n", inputs=["aa", ".", "ab", "."])

    result = session.run_command("g/a/a")

    assert result.message == "2"
    assert session.buffer.lines == ["a", "aa", "b", "a", "ab", ""]


def test_global_insert_before_match_keeps_walk_in_step() -> None:
    session, _ = make_session("a\nb\na\n", inputs=["x", ".", "y", "."])

    session.run_command("g/a/i")

    assert session.buffer.lines == ["x", "a", "b", "y", "a", ""]


def test_global_respects_explicit_range() -> None:
    session, _ = make_session("x\nx\nx\nx\n")

    session.run_command("2,3g/x/s/x/y/")

    assert session.buffer.lines == ["x", "y", "y", "x", ""]


def test_global_reads_continuation_lines() -> None:
    session, output = make_session("ab\ncd\nab\n", inputs=["p"])

    session.run_command("g/ab/s/a/A/\\")

    assert session.buffer.lines == ["Ab", "cd", "Ab", ""]
    assert output == ["Ab", "Ab"]


def test_global_is_one_undo_unit() -> None:
    session, _ = make_session("a\nfoo\nb\nfoo\n")
    session.buffer.current_line = 1

    session.run_command("g/foo/d")
    session.run_command("u")

    assert session.buffer.lines == ["a", "foo", "b", "foo", ""]
    assert session.buffer.current_line == 1
    assert not session.buffer.undo_slot.frozen


def test_nested_global_is_rejected() -> None:
    session, output = make_session("a\nb\n")

    result = session.run_command("g/a/g/b/d")

    assert result.status == "error"
    assert session.last_error == "cannot nest global commands"
    assert output == ["?"]
    assert session.buffer.lines == ["a", "b", ""]


def test_failing_sub_command_aborts_and_resets_state() -> None:
    session, _ = make_session("a\na\n")

    result = session.run_command("g/a/s/zzz/y/")

    assert result.status == "error"
    assert session.last_error == "no match"
    assert not session.buffer.state.is_running_global
    assert not session.buffer.undo_slot.frozen


def test_quit_inside_global_ends_session() -> None:
    session, _ = make_session("a\n")

    result = session.run_command("g/a/q")

    assert result.quit
    assert session.quit_requested


def test_is_global_command_has_no_side_effects() -> None:
    buffer = Buffer.from_text("a\nb\nc\n")
    buffer.current_line = 2

    assert is_global_command("1,2g/a/p", buffer.current_line, buffer.last_line)
    assert is_global_command("v/a/p", buffer.current_line, buffer.last_line)
    assert not is_global_command("1p", buffer.current_line, buffer.last_line)
    assert buffer.current_line == 2


def test_read_rest_of_command_joins_with_newlines() -> None:
    parts = iter(["s/a/b/\\", "p"])

    joined = read_rest_of_command("g/a/d\\", lambda: next(parts))

    assert joined == "g/a/d\\\ns/a/b/\\\np"


def test_parse_global_command_strips_continuations() -> None:
    buffer = Buffer.from_text("a\nb\n")

    parsed = parse_global_command(buffer, "g/a/d\\\np")

    assert parsed.pattern == "a"
    assert parsed.commands == ("d", "p")
    assert (parsed.start, parsed.end) == (1, 2)


@pytest.mark.parametrize(
    ("command", "error"), [("gabc", RegexNoSlash), ("g/abc", RegexUnterminated)]
)
def test_parse_global_command_errors(command: str, error: type[Exception]) -> None:
    buffer = Buffer.from_text("a\n")

    with pytest.raises(error):
        parse_global_command(buffer, command)
