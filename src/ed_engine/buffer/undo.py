"""Single-slot undo for buffer operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .document import Line


@dataclass(slots=True)
class UndoEntry:
    lines: Tuple[Line, ...]
    current_line: int


class UndoSlot:
    """Holds at most one backup of (lines, current_line).

    ``Line`` objects are immutable, so keeping them in a tuple is a full copy
    of the buffer content. ``swap`` exchanges live state and backup, which makes
    a second undo revert the first.
    """

    def __init__(self) -> None:
        self._entry: Optional[UndoEntry] = None
        self.frozen = False

    def store(self, lines: Tuple[Line, ...], current_line: int) -> None:
        if self.frozen:
            return
        self._entry = UndoEntry(lines=lines, current_line=current_line)

    def pin_cursor(self, current_line: int) -> None:
        """Rewrite the cursor stored with the backup, if there is one."""

        if self._entry is not None:
            self._entry.current_line = current_line

    def has_backup(self) -> bool:
        return self._entry is not None

    def swap(self, lines: Tuple[Line, ...], current_line: int) -> Optional[UndoEntry]:
        entry = self._entry
        if entry is None:
            return None
        self._entry = UndoEntry(lines=lines, current_line=current_line)
        return entry

    def clear(self) -> None:
        self._entry = None
