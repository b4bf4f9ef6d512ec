"""Line storage for ed_engine buffers."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence

_line_ids = itertools.count(1)


def next_line_id() -> int:
    return next(_line_ids)


@dataclass(frozen=True, slots=True)
class Line:
    """One line of text plus a stable identity.

    Ids come from a process-wide monotonic counter and are never reused, so a
    deleted line's id simply stops appearing in any document.
    """

    text: str
    id: int = field(default_factory=next_line_id)

    def with_text(self, text: str) -> "Line":
        """Return the same line (same id) carrying new text."""

        return Line(text=text, id=self.id)

    def copy(self) -> "Line":
        """Return a new line with the same text and a fresh id."""

        return Line(text=self.text)


@dataclass(slots=True)
class LineDocument:
    """Mutable list-of-lines model.

    The list is never empty: an empty file is a single empty line. A trailing
    empty line is the sentinel for "the file ends with a newline".
    """

    _lines: List[Line] = field(default_factory=lambda: [Line("")])

    @classmethod
    def from_text(cls, text: str) -> "LineDocument":
        return cls(_lines=[Line(part) for part in text.split("\n")])

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "LineDocument":
        document = cls(_lines=[Line(text) for text in lines])
        if not document._lines:
            document._lines.append(Line(""))
        return document

    def to_text(self) -> str:
        return "\n".join(line.text for line in self._lines)

    def snapshot(self) -> Sequence[Line]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    def texts(self) -> List[str]:
        return [line.text for line in self._lines]

    def restore(self, lines: Iterable[Line]) -> None:
        self._lines = list(lines) or [Line("")]

    @property
    def count(self) -> int:
        return len(self._lines)

    @property
    def last_line(self) -> int:
        """1-based number of the last real line (the sentinel is not counted)."""

        if self._lines[-1].text:
            return len(self._lines)
        return len(self._lines) - 1

    @property
    def ends_with_newline(self) -> bool:
        return not self._lines[-1].text

    def get(self, index: int) -> Line:
        return self._lines[index]

    def text_at(self, line_num: int) -> str:
        """Return the text of 1-based line ``line_num``."""

        return self._lines[line_num - 1].text

    def set(self, index: int, line: Line) -> None:
        self._lines[index] = line

    def insert(self, index: int, lines: Sequence[Line]) -> None:
        self._lines[index:index] = list(lines)

    def remove(self, start: int, stop: int) -> List[Line]:
        """Remove ``[start:stop)`` (0-based) and return the removed lines."""

        removed = self._lines[start:stop]
        del self._lines[start:stop]
        if not self._lines:
            self._lines.append(Line(""))
        return removed

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


__all__ = ["Line", "LineDocument", "next_line_id"]
