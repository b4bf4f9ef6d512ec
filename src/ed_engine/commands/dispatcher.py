"""Command dispatch: everything after the address prefix.

Commands come in two tiers. Suffix-bearing commands (``m``, ``w``, ``e``,
``s``) parse the rest of the line themselves. Every other command is exactly
one character (or nothing at all) and any trailing text is an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from ed_engine.buffer import ensure_line, ensure_range
from ed_engine.errors import (
    BadCommandSuffix,
    EdError,
    InvalidAddress,
    InvalidDestination,
    InvalidRange,
    ModifiedBufferWarning,
    NestedGlobal,
    NoFilename,
    UnexpectedAddress,
    UnknownCommand,
)
from ed_engine.fileio import load_file, save_file
from ed_engine.runtime import telemetry

from .address import AddressRange, parse_range, scan_address
from .base import CommandResult
from .substitute import compile_pattern, parse_params, substitute_on_lines

if TYPE_CHECKING:  # pragma: no cover
    from ed_engine.session import EditorSession

SimpleHandler = Callable[["EditorSession", AddressRange, str], CommandResult]
SuffixHandler = Callable[["EditorSession", AddressRange, str, str], CommandResult]


def run_command(session: "EditorSession", command: str) -> CommandResult:
    """Parse and run one single-line command against the session buffer."""

    buffer = session.buffer
    saved_line = buffer.current_line
    with telemetry.span(
        "commands::dispatch",
        component="dispatcher",
        metadata={"command": command},
        expected=(EdError,),
    ):
        address = parse_range(buffer, command)
        rest = command[address.consumed :]
        key = rest[:1]
        try:
            if key in ("g", "v"):
                return _handle_global(session, address, command)
            suffix_handler = _SUFFIX_HANDLERS.get(key)
            if suffix_handler is not None:
                return suffix_handler(session, address, command, rest[1:])
            handler = _SIMPLE_HANDLERS.get(key)
            if handler is None:
                raise UnknownCommand()
            if len(rest) > 1:
                raise BadCommandSuffix()
            return handler(session, address, command)
        except (InvalidAddress, InvalidRange):
            buffer.current_line = min(saved_line, buffer.last_line)
            raise


def _require_no_address(address: AddressRange) -> None:
    if address.supplied:
        raise UnexpectedAddress()


def _confirm_discard(session: "EditorSession", command: str) -> None:
    """Block the first attempt to throw away unsaved changes.

    Repeating the exact same command string right away goes through.
    """

    if session.buffer.modified and command != session.previous_command:
        raise ModifiedBufferWarning()


def _resolve_filename(session: "EditorSession", suffix: str) -> str:
    if suffix and not suffix.startswith(" "):
        raise BadCommandSuffix()
    filename = suffix.strip() or session.filename
    if not filename:
        raise NoFilename()
    return filename


# -- suffix-free commands ------------------------------------------------------


def _handle_quit(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    _require_no_address(address)
    _confirm_discard(session, command)
    return CommandResult(status="quit", quit=True)


def _handle_step(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    buffer = session.buffer
    if not address.supplied and not buffer.state.is_running_global:
        buffer.current_line += 1
    line_num = ensure_line(buffer.document, buffer.current_line)
    session.echo(buffer.line(line_num))
    return CommandResult(status="print")


def _handle_line_number(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    number = address.end if address.supplied else session.buffer.last_line
    session.echo(str(number))
    return CommandResult(status="line_number", message=str(number))


def _print_range(
    session: "EditorSession", address: AddressRange, *, numbered: bool
) -> CommandResult:
    buffer = session.buffer
    start, end = ensure_range(buffer.document, address.start, address.end)
    for line_num in range(start, end + 1):
        text = buffer.line(line_num)
        session.echo(f"{line_num}\t{text}" if numbered else text)
    buffer.current_line = end
    return CommandResult(status="print")


def _handle_print(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    return _print_range(session, address, numbered=False)


def _handle_number(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    return _print_range(session, address, numbered=True)


def _handle_help(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    _require_no_address(address)
    if session.last_error:
        session.echo(session.last_error)
    return CommandResult(status="help", message=session.last_error or None)


def _handle_toggle_help(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    _require_no_address(address)
    session.show_errors = not session.show_errors
    if session.show_errors and session.last_error:
        session.echo(session.last_error)
    return CommandResult(status="help_mode", message=str(session.show_errors))


def _handle_append(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    buffer = session.buffer
    line_num = ensure_line(buffer.document, address.end, allow_zero=True)
    buffer.snapshot()
    inserted = buffer.insert_lines(line_num, session.read_text_block())
    return CommandResult(status="insert", message=str(inserted))


def _handle_insert(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    buffer = session.buffer
    line_num = ensure_line(buffer.document, address.end, allow_zero=True)
    buffer.snapshot()
    inserted = buffer.insert_lines(max(line_num - 1, 0), session.read_text_block())
    return CommandResult(status="insert", message=str(inserted))


def _handle_delete(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    buffer = session.buffer
    start, end = ensure_range(buffer.document, address.start, address.end)
    buffer.snapshot()
    buffer.delete_lines(start, end)
    return CommandResult(status="delete")


def _handle_change(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    buffer = session.buffer
    start, end = ensure_range(buffer.document, address.start, address.end)
    buffer.snapshot()
    texts = session.read_text_block()
    buffer.delete_lines(start, end)
    inserted = buffer.insert_lines(start - 1, texts)
    return CommandResult(status="change", message=str(inserted))


def _handle_join(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    buffer = session.buffer
    start, end = ensure_range(buffer.document, address.start, address.end)
    buffer.snapshot()
    buffer.join_lines(start, end)
    return CommandResult(status="join")


def _handle_undo(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    _require_no_address(address)
    session.buffer.undo()
    return CommandResult(status="undo")


# -- suffix-bearing commands ---------------------------------------------------


def _handle_move(
    session: "EditorSession", address: AddressRange, command: str, suffix: str
) -> CommandResult:
    buffer = session.buffer
    start, end = ensure_range(buffer.document, address.start, address.end)
    dst, consumed = scan_address(suffix, 0, buffer.current_line, buffer.last_line)
    if dst is None or consumed != len(suffix):
        raise InvalidDestination()
    buffer.validate_move(start, end, dst)
    buffer.snapshot()
    buffer.move_lines(start, end, dst)
    return CommandResult(status="move")


def _handle_write(
    session: "EditorSession", address: AddressRange, command: str, suffix: str
) -> CommandResult:
    _require_no_address(address)
    # `wq [file]` and `w q [file]` both write and then quit.
    quit_after = False
    if suffix.startswith("q"):
        quit_after, suffix = True, suffix[1:]
    elif suffix == " q" or suffix.startswith(" q "):
        quit_after, suffix = True, suffix[2:]
    filename = _resolve_filename(session, suffix)
    size = save_file(filename, session.buffer.text(), encoding=session.settings.encoding)
    session.filename = filename
    session.buffer.mark_saved()
    session.report_size(size)
    if quit_after:
        return CommandResult(status="quit", message=str(size), quit=True)
    return CommandResult(status="write", message=str(size))


def _handle_edit(
    session: "EditorSession", address: AddressRange, command: str, suffix: str
) -> CommandResult:
    _require_no_address(address)
    filename = _resolve_filename(session, suffix)
    _confirm_discard(session, command)
    loaded = load_file(filename, encoding=session.settings.encoding)
    session.buffer.load(loaded.text)
    session.filename = filename
    session.report_size(loaded.size)
    return CommandResult(status="edit", message=str(loaded.size))


def _handle_substitute(
    session: "EditorSession", address: AddressRange, command: str, suffix: str
) -> CommandResult:
    buffer = session.buffer
    params = parse_params(suffix)
    start, end = ensure_range(buffer.document, address.start, address.end)
    compile_pattern(params.pattern)
    buffer.snapshot()
    count = substitute_on_lines(
        buffer, params.pattern, params.repl, start, end, params.is_global
    )
    return CommandResult(status="substitute", message=str(count))


def _handle_global(
    session: "EditorSession", address: AddressRange, command: str
) -> CommandResult:
    if session.buffer.state.is_running_global:
        raise NestedGlobal()
    from .global_cmd import parse_and_run_command

    return parse_and_run_command(session, command, address=address)


_SIMPLE_HANDLERS: Dict[str, SimpleHandler] = {
    "": _handle_step,
    "q": _handle_quit,
    "=": _handle_line_number,
    "p": _handle_print,
    "n": _handle_number,
    "h": _handle_help,
    "H": _handle_toggle_help,
    "a": _handle_append,
    "i": _handle_insert,
    "d": _handle_delete,
    "c": _handle_change,
    "j": _handle_join,
    "u": _handle_undo,
}

_SUFFIX_HANDLERS: Dict[str, SuffixHandler] = {
    "m": _handle_move,
    "w": _handle_write,
    "e": _handle_edit,
    "s": _handle_substitute,
}


__all__ = ["run_command"]
