"""Cursor and change tracking state for buffers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CursorState:
    """Mutable cursor info tied to a LineDocument.

    ``current_line`` and ``next_line`` are both 1-based. ``next_line`` only
    matters while a global command is running; every editing operation keeps it
    pointing at the same logical line when lines before it come or go.
    """

    current_line: int = 0
    next_line: int = 1
    modified: bool = False
    is_running_global: bool = False

    def set_current(self, line_num: int) -> None:
        self.current_line = line_num

    def shift_for_insert(self, index: int, count: int) -> None:
        if self.next_line - 1 >= index:
            self.next_line += count

    def shift_for_delete(self, start: int, end: int) -> None:
        if start <= self.next_line <= end:
            self.next_line = start
        elif self.next_line > end:
            self.next_line -= end - start + 1
