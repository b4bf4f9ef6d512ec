"""Shared result type and event bus for command handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass(slots=True)
class CommandResult:
    """Result returned from every command handler."""

    status: str = "ok"
    message: Optional[str] = None
    quit: bool = False


class SessionBus:
    """Minimal event bus letting front ends observe a session."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = ["CommandResult", "SessionBus"]
