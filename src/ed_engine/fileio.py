"""Byte-exact file load and save for buffers.

Files are decoded with ``surrogateescape`` so bytes that are not valid in the
configured encoding still come back unchanged on save.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ed_engine.errors import (
    FileNotFound,
    FileUnreadable,
    FileWriteError,
    PermissionDenied,
)
from ed_engine.runtime import telemetry

ERRORS = "surrogateescape"


@dataclass(frozen=True, slots=True)
class LoadedFile:
    text: str
    size: int


def load_file(filename: str, *, encoding: str = "utf-8") -> LoadedFile:
    """Read ``filename`` verbatim.

    A missing file is :class:`FileNotFound`; a file that exists but cannot be
    read is the fatal :class:`FileUnreadable`.
    """

    path = Path(filename)
    with telemetry.span(
        "fileio::load",
        component="fileio",
        metadata={"filename": filename},
        expected=(FileNotFound,),
    ) as handle:
        if not path.exists():
            handle.add_metadata("missing", True)
            raise FileNotFound(filename)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise FileUnreadable(filename) from exc
        handle.add_metadata("bytes", len(data))
    return LoadedFile(text=data.decode(encoding, ERRORS), size=len(data))


def save_file(filename: str, text: str, *, encoding: str = "utf-8") -> int:
    """Write ``text`` to ``filename`` and return the number of bytes written."""

    data = text.encode(encoding, ERRORS)
    with telemetry.span(
        "fileio::save",
        component="fileio",
        metadata={"filename": filename, "bytes": len(data)},
    ):
        try:
            Path(filename).write_bytes(data)
        except PermissionError as exc:
            raise PermissionDenied(f"{filename}: permission denied") from exc
        except OSError as exc:
            raise FileWriteError() from exc
    return len(data)


__all__ = ["LoadedFile", "load_file", "save_file"]
