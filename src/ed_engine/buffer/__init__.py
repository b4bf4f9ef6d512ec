"""Buffer abstractions and the single-slot undo store."""

from .buffer import Buffer, BufferView, Transaction
from .document import Line, LineDocument
from .state import CursorState
from .undo import UndoEntry, UndoSlot
from .validation import ensure_line, ensure_range

__all__ = [
    "Buffer",
    "BufferView",
    "CursorState",
    "Line",
    "LineDocument",
    "Transaction",
    "UndoEntry",
    "UndoSlot",
    "ensure_line",
    "ensure_range",
]
