"""Address validation helpers shared across buffer services."""

from __future__ import annotations

from ed_engine.errors import InvalidAddress, InvalidRange

from .document import LineDocument


def ensure_range(document: LineDocument, start: int, end: int) -> tuple[int, int]:
    if start > end:
        raise InvalidRange()
    if start < 1 or end > document.last_line:
        raise InvalidAddress()
    return start, end


def ensure_line(document: LineDocument, line_num: int, *, allow_zero: bool = False) -> int:
    lowest = 0 if allow_zero else 1
    if line_num < lowest or line_num > document.last_line:
        raise InvalidAddress()
    return line_num
