"""Editor session: the context every command runs against.

The session bundles the buffer with everything else a command may need
(remembered filename, last error, error display flag, the previous command
string) and is the single boundary where command errors are caught.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from ed_engine.buffer import Buffer
from ed_engine.commands import (
    CommandResult,
    SessionBus,
    is_global_command,
    read_rest_of_command,
    run_command,
)
from ed_engine.errors import EdError, FileNotFound
from ed_engine.fileio import load_file
from ed_engine.runtime import telemetry
from ed_engine.runtime.settings import EditorSettings

LineSource = Callable[[str], Optional[str]]
OutputSink = Callable[[str], None]

TEXT_TERMINATOR = "."


def _no_input(prompt: str = "") -> Optional[str]:
    del prompt
    return None


class EditorSession:
    def __init__(
        self,
        *,
        buffer: Optional[Buffer] = None,
        filename: Optional[str] = None,
        settings: Optional[EditorSettings] = None,
        read_line: Optional[LineSource] = None,
        write: Optional[OutputSink] = None,
        bus: Optional[SessionBus] = None,
    ) -> None:
        self.buffer = buffer or Buffer()
        self.filename = filename
        self.settings = settings or EditorSettings()
        self.show_errors = self.settings.show_errors
        self.last_error = ""
        self.previous_command: Optional[str] = None
        self.quit_requested = False
        self.bus = bus or SessionBus()
        self._read_line = read_line or _no_input
        self._write = write or print

    # -- io hooks ---------------------------------------------------------------

    def read_line(self, prompt: str = "") -> Optional[str]:
        return self._read_line(prompt)

    def read_text_block(self) -> List[str]:
        """Read input lines up to a lone ``.`` or end of input."""

        lines: List[str] = []
        while True:
            line = self._read_line("")
            if line is None or line == TEXT_TERMINATOR:
                return lines
            lines.append(line)

    def echo(self, text: str) -> None:
        self._write(text)

    def report_size(self, size: int) -> None:
        if not self.settings.quiet:
            self.echo(str(size))

    # -- command boundary ---------------------------------------------------------

    def run_command(self, command: str) -> CommandResult:
        """Run one command (reading global continuation lines as needed).

        Non-fatal errors become the last error and an ``error`` result; fatal
        ones propagate to the caller.
        """

        if is_global_command(command, self.buffer.current_line, self.buffer.last_line):
            command = read_rest_of_command(command, self.read_line)
        self.bus.emit("command.submit", command)
        try:
            result = run_command(self, command)
        except EdError as exc:
            if exc.fatal:
                raise
            self.report_error(exc)
            result = CommandResult(status="error", message=exc.message)
        finally:
            self.previous_command = command

        if result.quit:
            self.quit_requested = True
            self.bus.emit("session.quit", result)
        self.bus.emit("buffer.changed", self.buffer.view())
        return result

    def report_error(self, exc: EdError) -> None:
        self.last_error = exc.message
        telemetry.record_event(
            "command.error",
            level="warning",
            data={"kind": type(exc).__name__, "message": exc.message},
            logger_name="ed_engine.session",
        )
        self.echo("?")
        if self.show_errors:
            self.echo(exc.message)
        self.bus.emit("command.error", exc.message)

    def open_file(self, filename: str) -> None:
        """Load ``filename`` at startup.

        A missing file leaves an empty buffer that remembers the name, so a
        later ``w`` creates it.
        """

        self.filename = filename
        try:
            loaded = load_file(filename, encoding=self.settings.encoding)
        except FileNotFound as exc:
            self.report_error(exc)
            return
        self.buffer.load(loaded.text)
        self.report_size(loaded.size)
        self.bus.emit("buffer.changed", self.buffer.view())


__all__ = ["EditorSession", "LineSource", "OutputSink"]
