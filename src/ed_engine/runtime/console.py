"""Terminal read loop and ``ed-engine`` command-line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from ed_engine.errors import FileUnreadable
from ed_engine.runtime import telemetry
from ed_engine.runtime.settings import EditorSettings
from ed_engine.session import EditorSession

EX_SUCCESS = 0
EX_FAILURE = 1


def stdin_line_source(prompt: str = "") -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


def read_eval_loop(session: EditorSession, *, prompt: str = "") -> int:
    """Feed input lines to ``session`` until it asks to quit.

    End of input is treated as ``q``, so a modified buffer still gets one
    warning before the loop gives up.
    """

    telemetry.record_event("session.start", data={"filename": session.filename or ""})
    while not session.quit_requested:
        line = session.read_line(prompt)
        if line is None:
            line = "q"
        session.run_command(line)
    telemetry.record_event("session.end", data={"modified": session.buffer.modified})
    return EX_SUCCESS


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ed-engine", description="Line-oriented ed-style text editor."
    )
    parser.add_argument(
        "-p",
        "--prompt",
        default=None,
        help="Prompt string shown before each command (env: ED_ENGINE_PROMPT)",
    )
    parser.add_argument(
        "-s",
        "--quiet",
        action="store_true",
        default=None,
        help="Suppress byte counts after reading and writing files",
    )
    parser.add_argument(
        "-v",
        "--verbose-errors",
        dest="show_errors",
        action="store_true",
        default=None,
        help="Print error messages after '?' (same as the H command)",
    )
    parser.add_argument("file", nargs="?", default=None, help="File to edit")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    settings = EditorSettings.from_env().override(
        prompt=args.prompt, quiet=args.quiet, show_errors=args.show_errors
    )
    session = EditorSession(settings=settings, read_line=stdin_line_source)
    try:
        if args.file:
            session.open_file(args.file)
        return read_eval_loop(session, prompt=settings.prompt)
    except FileUnreadable as exc:
        print(f"{exc.filename}: {exc.message}", file=sys.stderr)
        return EX_FAILURE


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
