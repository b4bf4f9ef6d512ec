"""Global commands: ``[range]g/re/cmds`` and ``[range]v/re/cmds``.

A global command runs in two passes. The first pass records which lines in
the range match (or, for ``v``, do not match). The second walks the buffer
with ``next_line`` and runs the sub-commands on every recorded line that is
still present. Lines are recorded by their stable id, so sub-commands are free
to insert, delete, and move lines while the walk is in progress.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Set

from ed_engine.buffer import Buffer, ensure_range
from ed_engine.errors import EdError, RegexNoSlash, RegexUnterminated
from ed_engine.runtime import telemetry

from .address import AddressRange, parse_range, scan_range
from .base import CommandResult
from .dispatcher import run_command
from .substitute import compile_pattern, find_delimiter

if TYPE_CHECKING:  # pragma: no cover
    from ed_engine.session import EditorSession


@dataclass(frozen=True, slots=True)
class GlobalCommand:
    start: int
    end: int
    pattern: str
    commands: tuple[str, ...]
    is_inverted: bool = False


def is_global_command(command: str, current_line: int, last_line: int) -> bool:
    """Return True iff ``command`` is the first line of a global command."""

    address = scan_range(command, current_line, last_line)
    return command[address.consumed : address.consumed + 1] in ("g", "v")


def does_end_in_continuation(line: str) -> bool:
    return line.endswith("\\")


def read_rest_of_command(
    line: str, read_line: Callable[[], Optional[str]]
) -> str:
    """Append continuation lines while ``line`` ends with a backslash.

    Parts are joined with ``\\n``; the backslashes stay in place and are
    removed by :func:`parse_global_command`.
    """

    while does_end_in_continuation(line):
        part = read_line()
        if part is None:
            break
        line = f"{line}\n{part}"
    return line


def parse_global_command(
    buffer: Buffer, command: str, *, address: AddressRange | None = None
) -> GlobalCommand:
    if address is None:
        address = parse_range(buffer, command)
    rest = command[address.consumed :]
    if address.supplied:
        start, end = ensure_range(buffer.document, address.start, address.end)
    else:
        start, end = 1, buffer.last_line

    is_inverted = rest[:1] == "v"
    body = rest[1:]
    if not body.startswith("/"):
        raise RegexNoSlash()
    pattern_end = find_delimiter(body, 1)
    if pattern_end >= len(body):
        raise RegexUnterminated()

    commands: List[str] = body[pattern_end + 1 :].split("\n")
    for i, sub_command in enumerate(commands[:-1]):
        if does_end_in_continuation(sub_command):
            commands[i] = sub_command[:-1]
    return GlobalCommand(
        start=start,
        end=end,
        pattern=body[1:pattern_end],
        commands=tuple(commands),
        is_inverted=is_inverted,
    )


def match_lines(
    buffer: Buffer, start: int, end: int, pattern: str, is_inverted: bool
) -> Set[int]:
    """First pass: ids of the lines in ``[start, end]`` selected by ``pattern``."""

    regex = compile_pattern(pattern)
    matched: Set[int] = set()
    for line_num in range(start, end + 1):
        found = regex.search(buffer.line(line_num)) is not None
        if found != is_inverted:
            matched.add(buffer.line_id(line_num))
    return matched


def run_global(
    session: "EditorSession",
    start: int,
    end: int,
    pattern: str,
    sub_commands: Sequence[str],
    is_inverted: bool = False,
) -> CommandResult:
    """Run ``sub_commands`` once for every selected line.

    The first failing sub-command aborts the whole global command.
    """

    buffer = session.buffer
    state = buffer.state
    with telemetry.span(
        "commands::global",
        component="global",
        metadata={"pattern": pattern, "inverted": is_inverted},
        expected=(EdError,),
    ) as handle:
        matched = match_lines(buffer, start, end, pattern, is_inverted)
        handle.add_metadata("matched", len(matched))

        visited = 0
        origin_line = buffer.current_line
        state.is_running_global = True
        try:
            state.next_line = 1
            while state.next_line <= buffer.last_line:
                if buffer.line_id(state.next_line) not in matched:
                    state.next_line += 1
                    continue
                buffer.current_line = state.next_line
                state.next_line += 1
                visited += 1
                for sub_command in sub_commands:
                    result = run_command(session, sub_command)
                    if result.quit:
                        return result
        finally:
            if buffer.undo_slot.frozen:
                # Undo returns to where the cursor was before the global ran.
                buffer.undo_slot.pin_cursor(origin_line)
            state.is_running_global = False
            buffer.undo_slot.frozen = False
            handle.add_metadata("visited", visited)

    return CommandResult(status="global", message=str(visited))


def parse_and_run_command(
    session: "EditorSession", command: str, *, address: AddressRange | None = None
) -> CommandResult:
    parsed = parse_global_command(session.buffer, command, address=address)
    return run_global(
        session,
        parsed.start,
        parsed.end,
        parsed.pattern,
        parsed.commands,
        parsed.is_inverted,
    )


__all__ = [
    "GlobalCommand",
    "does_end_in_continuation",
    "is_global_command",
    "match_lines",
    "parse_and_run_command",
    "parse_global_command",
    "read_rest_of_command",
    "run_global",
]
