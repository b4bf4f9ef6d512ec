"""Leading address / range parsing for command strings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ed_engine.buffer import Buffer

_ADDRESS = re.compile(r"\d+|[.$]")


@dataclass(frozen=True, slots=True)
class AddressRange:
    start: int
    end: int
    consumed: int

    @property
    def supplied(self) -> bool:
        """False when the command carried no address at all."""

        return self.consumed > 0


def scan_address(
    command: str, pos: int, current_line: int, last_line: int
) -> Tuple[Optional[int], int]:
    match = _ADDRESS.match(command, pos)
    if match is None:
        return None, pos
    token = match.group()
    if token == ".":
        return current_line, match.end()
    if token == "$":
        return last_line, match.end()
    return int(token), match.end()


def scan_range(command: str, current_line: int, last_line: int) -> AddressRange:
    """Parse a leading range without touching any cursor.

    ``,`` and ``%`` mean the whole buffer. ``N`` is a single line, ``N,`` keeps
    the current line as the end, and ``N,M`` gives both ends. Anything else is
    "no address" and defaults to the current line with nothing consumed.
    """

    if command[:1] in (",", "%"):
        return AddressRange(1, last_line, 1)

    start, pos = scan_address(command, 0, current_line, last_line)
    if start is None:
        return AddressRange(current_line, current_line, 0)

    end = start
    if command[pos : pos + 1] == ",":
        pos += 1
        end = current_line
        second, pos = scan_address(command, pos, current_line, last_line)
        if second is not None:
            end = second
    return AddressRange(start, end, pos)


def parse_range(buffer: Buffer, command: str) -> AddressRange:
    """Parse a leading range and move ``current_line`` to its end."""

    parsed = scan_range(command, buffer.current_line, buffer.last_line)
    if parsed.supplied:
        buffer.current_line = parsed.end
    return parsed


__all__ = ["AddressRange", "parse_range", "scan_address", "scan_range"]
