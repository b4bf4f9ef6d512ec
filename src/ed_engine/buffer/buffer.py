"""High-level buffer façade combining document, cursor state, and undo.

All line numbers taken or returned here are 1-based; ``index`` arguments are
0-based positions in the underlying list.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Iterable, List, Optional, Sequence

from ed_engine.errors import EdError, InvalidDestination, NoBackup
from ed_engine.runtime import telemetry

from .document import Line, LineDocument
from .state import CursorState
from .undo import UndoSlot
from .validation import ensure_line, ensure_range


@dataclass(slots=True)
class BufferView:
    text: str
    current_line: int
    last_line: int
    modified: bool


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[LineDocument] = None,
        state: Optional[CursorState] = None,
        undo: Optional[UndoSlot] = None,
    ) -> None:
        self.name = name
        self.document = document or LineDocument()
        self.state = state or CursorState()
        self.undo_slot = undo or UndoSlot()

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        buffer = cls(name=name, document=LineDocument.from_text(text))
        buffer.state.current_line = buffer.last_line
        return buffer

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, name: str = "default") -> "Buffer":
        buffer = cls(name=name, document=LineDocument.from_lines(lines))
        buffer.state.current_line = buffer.last_line
        return buffer

    @property
    def last_line(self) -> int:
        return self.document.last_line

    @property
    def current_line(self) -> int:
        return self.state.current_line

    @current_line.setter
    def current_line(self, value: int) -> None:
        self.state.current_line = value

    @property
    def modified(self) -> bool:
        return self.state.modified

    @property
    def lines(self) -> List[str]:
        return self.document.texts()

    def text(self) -> str:
        return self.document.to_text()

    def line(self, line_num: int) -> str:
        return self.document.text_at(line_num)

    def line_id(self, line_num: int) -> int:
        return self.document.get(line_num - 1).id

    def view(self) -> BufferView:
        return BufferView(
            text=self.document.to_text(),
            current_line=self.state.current_line,
            last_line=self.last_line,
            modified=self.state.modified,
        )

    # -- undo ---------------------------------------------------------------

    def snapshot(self) -> None:
        """Save (lines, current_line) as the undo backup and mark modified."""

        self.undo_slot.store(self.document.snapshot(), self.state.current_line)
        self.state.modified = True
        if self.state.is_running_global:
            # A global command is one undo unit: keep the first snapshot.
            self.undo_slot.frozen = True

    def undo(self) -> None:
        entry = self.undo_slot.swap(self.document.snapshot(), self.state.current_line)
        if entry is None:
            raise NoBackup()
        with Transaction(self, "undo"):
            self.document.restore(entry.lines)
            self.state.current_line = entry.current_line
            self.state.modified = True

    def load(self, text: str) -> None:
        """Replace the whole buffer; undo history and modified flag reset."""

        with Transaction(self, "load"):
            self.document = LineDocument.from_text(text)
            self.state.current_line = self.last_line
            self.state.modified = False
            self.undo_slot.clear()

    def mark_saved(self) -> None:
        self.state.modified = False

    # -- editing operations --------------------------------------------------

    def insert_lines(self, index: int, texts: Sequence[str]) -> int:
        """Insert ``texts`` before 0-based ``index`` and return how many went in."""

        with Transaction(self, "insert") as tx:
            count = self._insert(index, [Line(text) for text in texts])
            tx.note(index=index, count=count)
            return count

    def delete_lines(self, start: int, end: int) -> None:
        ensure_range(self.document, start, end)
        with Transaction(self, "delete") as tx:
            self._delete(start, end)
            tx.note(start=start, end=end)

    def join_lines(self, start: int, end: int) -> None:
        ensure_range(self.document, start, end)
        with Transaction(self, "join") as tx:
            joined = "".join(
                self.document.text_at(num) for num in range(start, end + 1)
            )
            self.document.set(start - 1, Line(joined))
            if end > start:
                self.document.remove(start, end)
                self.state.shift_for_delete(start + 1, end)
            self.state.current_line = start
            tx.note(start=start, end=end)

    def move_lines(self, start: int, end: int, dst: int) -> None:
        """Move ``[start, end]`` so it follows line ``dst`` (0 = top of buffer)."""

        self.validate_move(start, end, dst)
        with Transaction(self, "move") as tx:
            copies = [self.document.get(i).copy() for i in range(start - 1, end)]
            moved = len(copies)
            self._insert(dst, copies)
            if dst < start:
                self._delete(start + moved, end + moved)
                self.state.current_line = dst + moved
            else:
                self._delete(start, end)
                self.state.current_line = dst
            tx.note(start=start, end=end, dst=dst)

    def validate_move(self, start: int, end: int, dst: int) -> None:
        ensure_range(self.document, start, end)
        if dst < 0 or dst > self.last_line or start <= dst < end:
            raise InvalidDestination()

    def replace_text(self, line_num: int, text: str) -> None:
        """Swap in new text for a line, keeping the line's identity."""

        ensure_line(self.document, line_num)
        index = line_num - 1
        self.document.set(index, self.document.get(index).with_text(text))

    def _insert(self, index: int, lines: List[Line]) -> int:
        index = max(0, min(index, self.document.count))
        at_end = index == self.document.count
        self.document.insert(index, lines)
        inserted = len(lines)
        if at_end and inserted:
            self.document.insert(self.document.count, [Line("")])
        if inserted:
            self.state.current_line += inserted
            self.state.shift_for_insert(index, inserted)
        return inserted

    def _delete(self, start: int, end: int) -> None:
        self.document.remove(start - 1, end)
        self.state.shift_for_delete(start, end)
        last = self.last_line
        self.state.current_line = start if start <= last else last


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one buffer mutation in a telemetry span."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
            expected=(EdError,),
        )
        self._handle = self._span_cm.__enter__()
        return self

    def note(self, **fields: object) -> None:
        if self._handle is not None:
            for key, value in fields.items():
                self._handle.add_metadata(key, value)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._handle is not None and exc_type is None:
            self._handle.note(
                "buffer::commit",
                lines=self.buffer.document.count,
                current_line=self.buffer.state.current_line,
            )
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
