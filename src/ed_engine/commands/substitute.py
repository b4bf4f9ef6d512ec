"""Regular-expression substitution over buffer lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern, Tuple

from ed_engine.buffer import Buffer, ensure_range
from ed_engine.errors import (
    BadCommandSuffix,
    EdError,
    NoMatch,
    RegexCompileError,
    RegexNoSlash,
    RegexUnterminated,
)
from ed_engine.runtime import telemetry


@dataclass(frozen=True, slots=True)
class SubstitutionParams:
    pattern: str
    repl: str
    is_global: bool = False


def find_delimiter(text: str, pos: int) -> int:
    """Return the index of the next unescaped ``/`` at or after ``pos``.

    Returns ``len(text)`` when there is none. A backslash hides the character
    that follows it.
    """

    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "/":
            return pos
        pos += 1
    return len(text)


def parse_params(command: str) -> SubstitutionParams:
    """Split ``/regex/repl/[g]`` into its parts.

    The closing ``/`` after ``repl`` may be left off; when present it may only
    be followed by ``g``.
    """

    if not command.startswith("/"):
        raise RegexNoSlash("expected '/' after s command")
    pattern_end = find_delimiter(command, 1)
    if pattern_end >= len(command):
        raise RegexUnterminated()
    repl_end = find_delimiter(command, pattern_end + 1)
    suffix = command[repl_end + 1 :]
    if suffix not in ("", "g"):
        raise BadCommandSuffix()
    return SubstitutionParams(
        pattern=command[1:pattern_end],
        repl=command[pattern_end + 1 : repl_end],
        is_global=suffix == "g",
    )


def compile_pattern(pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise RegexCompileError(str(exc)) from exc


def expand_replacement(repl: str, match: re.Match[str]) -> str:
    """Build the literal replacement text for one match.

    ``&`` is the whole match and ``\\1``..``\\9`` are capture groups (empty when
    the group did not take part). A lone trailing backslash stays a backslash;
    any other escaped character stands for itself.
    """

    out: List[str] = []
    pos = 0
    while pos < len(repl):
        char = repl[pos]
        pos += 1
        if char == "&":
            out.append(match.group(0))
            continue
        if char != "\\":
            out.append(char)
            continue
        if pos == len(repl):
            out.append("\\")
            continue
        escaped = repl[pos]
        pos += 1
        if escaped in "123456789":
            group = int(escaped)
            if group <= match.re.groups:
                out.append(match.group(group) or "")
            continue
        out.append(escaped)
    return "".join(out)


def substitute_in_text(
    regex: Pattern[str], text: str, repl: str, *, is_global: bool
) -> Tuple[str, int]:
    """Apply the substitution to one line of text; return (text, count)."""

    count = 0
    pos = 0
    while pos <= len(text):
        match = regex.search(text, pos)
        if match is None:
            break
        replacement = expand_replacement(repl, match)
        text = text[: match.start()] + replacement + text[match.end() :]
        count += 1
        if not is_global:
            break
        pos = match.start() + len(replacement)
        if match.end() == match.start():
            # Step over one character so an empty match cannot repeat in place.
            pos += 1
    return text, count


def substitute_on_lines(
    buffer: Buffer,
    pattern: str,
    repl: str,
    start: int,
    end: int,
    is_global: bool,
) -> int:
    """Substitute on lines ``[start, end]`` and return the substitution count.

    Raises :class:`NoMatch` when no line in the range matched.
    """

    ensure_range(buffer.document, start, end)
    with telemetry.span(
        "commands::substitute",
        component="substitute",
        metadata={"pattern": pattern, "global": is_global},
        expected=(EdError,),
    ) as handle:
        regex = compile_pattern(pattern)
        total = 0
        for line_num in range(start, end + 1):
            new_text, count = substitute_in_text(
                regex, buffer.line(line_num), repl, is_global=is_global
            )
            if count:
                buffer.replace_text(line_num, new_text)
                total += count
        handle.add_metadata("substitutions", total)
        if not total:
            raise NoMatch()
        return total


__all__ = [
    "SubstitutionParams",
    "compile_pattern",
    "expand_replacement",
    "find_delimiter",
    "parse_params",
    "substitute_in_text",
    "substitute_on_lines",
]
