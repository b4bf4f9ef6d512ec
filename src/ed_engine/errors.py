"""Error kinds raised by the command engine.

Every command failure is an :class:`EdError`. The session catches them at the
command boundary, stores the message as the "last error" and prints ``?``.
Only :class:`FileUnreadable` is fatal and is allowed to escape the session.
"""

from __future__ import annotations


class EdError(RuntimeError):
    """Base class for all user-facing editor errors."""

    message = "error"
    fatal = False

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class InvalidAddress(EdError):
    message = "invalid address"


class InvalidRange(EdError):
    message = "invalid range"


class InvalidDestination(EdError):
    message = "invalid destination address"


class UnexpectedAddress(EdError):
    message = "unexpected address"


class BadCommandSuffix(EdError):
    message = "unexpected command suffix"


class UnknownCommand(EdError):
    message = "unknown command"


class NestedGlobal(EdError):
    message = "cannot nest global commands"


class RegexCompileError(EdError):
    message = "invalid regular expression"


class RegexNoSlash(EdError):
    message = "expected '/' to start regular expression"


class RegexUnterminated(EdError):
    message = "expected '/' to end regular expression"


class NoMatch(EdError):
    message = "no match"


class NoBackup(EdError):
    message = "nothing to undo"


class FileNotFound(EdError):
    message = "cannot open file"

    def __init__(self, filename: str | None = None) -> None:
        super().__init__(f"{filename}: no such file" if filename else None)
        self.filename = filename


class NoFilename(EdError):
    message = "no current filename"


class FileUnreadable(EdError):
    message = "error: file may exist but couldn't read it"
    fatal = True

    def __init__(self, filename: str | None = None) -> None:
        super().__init__()
        self.filename = filename


class FileWriteError(EdError):
    message = "error while writing"


class PermissionDenied(EdError):
    message = "permission denied"


class ModifiedBufferWarning(EdError):
    message = "warning: file modified"


__all__ = [
    "EdError",
    "InvalidAddress",
    "InvalidRange",
    "InvalidDestination",
    "UnexpectedAddress",
    "BadCommandSuffix",
    "UnknownCommand",
    "NestedGlobal",
    "RegexCompileError",
    "RegexNoSlash",
    "RegexUnterminated",
    "NoMatch",
    "NoBackup",
    "FileNotFound",
    "NoFilename",
    "FileUnreadable",
    "FileWriteError",
    "PermissionDenied",
    "ModifiedBufferWarning",
]
