"""Textual adapter that wires an EditorSession into UI callbacks.

The session's read loop blocks on input, so the adapter feeds it from a queue:
the UI pushes submitted lines, and the loop runs on a worker thread.
"""

from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ed_engine.buffer import BufferView
from ed_engine.errors import FileUnreadable
from ed_engine.runtime.console import EX_FAILURE, read_eval_loop
from ed_engine.runtime.settings import EditorSettings
from ed_engine.session import EditorSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferView], None]
    append_output: Callable[[str], None] = _noop
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class QueueLineSource:
    """Blocking line source backed by a queue; ``None`` marks end of input."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()

    def push(self, line: str) -> None:
        self._queue.put(line)

    def close(self) -> None:
        self._queue.put(None)

    def __call__(self, prompt: str = "") -> Optional[str]:
        del prompt
        line = self._queue.get()
        if line is None:
            # Keep the source closed for every later reader.
            self._queue.put(None)
        return line


class TextualEdAdapter:
    """Bridges an EditorSession + bus events to a Textual-friendly surface."""

    def __init__(
        self,
        hooks: TextualUIHooks,
        *,
        settings: Optional[EditorSettings] = None,
        filename: Optional[str] = None,
    ) -> None:
        self.hooks = hooks
        self.source = QueueLineSource()
        self.session = EditorSession(
            settings=settings, read_line=self.source, write=self._write
        )
        self._filename = filename
        self._subscribe_events()

    def submit_line(self, text: str) -> None:
        """Queue one line of user input for the session."""

        self._log_state("input ->", text=text)
        self.source.push(text)

    def close_input(self) -> None:
        self.source.close()

    def run(self) -> int:
        """Run the read loop until the session quits; blocks the caller.

        Returns the process exit code: ``EX_FAILURE`` when a file that exists
        cannot be read.
        """

        try:
            if self._filename:
                self.session.open_file(self._filename)
            else:
                self._refresh_buffer()
            return read_eval_loop(self.session)
        except FileUnreadable as exc:
            reason = f"{exc.filename}: {exc.message}"
            self.hooks.append_output(reason)
            self.hooks.handle_event("session.failed", reason)
            return EX_FAILURE

    def _write(self, text: str) -> None:
        self.hooks.append_output(text)

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        for event in (
            "command.submit",
            "command.error",
            "buffer.changed",
            "session.quit",
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name == "buffer.changed" and isinstance(payload, BufferView):
            self.hooks.update_buffer(payload)
            self.hooks.update_status(self._status_text(payload))
        elif name == "command.error" and isinstance(payload, str):
            self.hooks.update_status(f"? {payload}")

    def _refresh_buffer(self) -> None:
        view = self.session.buffer.view()
        self.hooks.update_buffer(view)
        self.hooks.update_status(self._status_text(view))

    def _status_text(self, view: BufferView) -> str:
        name = self.session.filename or "[no file]"
        flag = " [+]" if view.modified else ""
        return f"{name}{flag}  line {view.current_line}/{view.last_line}"

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "current_line": self.session.buffer.current_line,
            "last_line": self.session.buffer.last_line,
            "modified": self.session.buffer.modified,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["QueueLineSource", "TextualEdAdapter", "TextualUIHooks"]
