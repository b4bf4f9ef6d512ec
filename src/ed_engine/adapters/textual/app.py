"""Executable Textual app that hosts an ed session."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Input, RichLog, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use ed_engine.adapters.textual.app"
    ) from exc

from ed_engine.buffer import BufferView
from ed_engine.runtime.console import EX_FAILURE, EX_SUCCESS
from ed_engine.runtime.settings import EditorSettings

from .controller import TextualEdAdapter, TextualUIHooks


def _render_buffer(view: BufferView) -> str:
    lines = view.text.split("\n")[: view.last_line]
    width = len(str(max(view.last_line, 1)))
    rendered = []
    for number, text in enumerate(lines, start=1):
        marker = ">" if number == view.current_line else " "
        rendered.append(f"{marker}{number:>{width}} {text}")
    return "\n".join(rendered)


class EdEngineApp(App[int]):
    """Buffer view on top, command output and input line below."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 2fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#output {
		height: 1fr;
		border: round $surface-lighten-1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        filename: Optional[str] = None,
        settings: Optional[EditorSettings] = None,
    ) -> None:
        super().__init__()
        self._filename = filename
        self._settings = settings
        self.adapter: TextualEdAdapter | None = None
        self._buffer_widget: Static | None = None
        self._output_widget: RichLog | None = None
        self._status_widget: Static | None = None
        self.failure: str | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._output_widget = RichLog(id="output", markup=False, wrap=True)
        yield self._output_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Input(placeholder="command", id="command-line")
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=lambda view: self._from_worker(self._update_buffer, view),
            append_output=lambda text: self._from_worker(self._append_output, text),
            update_status=lambda text: self._from_worker(self._update_status, text),
            handle_event=self._handle_event,
        )
        self.adapter = TextualEdAdapter(
            hooks, settings=self._settings, filename=self._filename
        )
        self.run_worker(self._run_session, thread=True, exclusive=True)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close_input()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.adapter:
            self.adapter.submit_line(event.value)
        event.input.value = ""

    def _run_session(self) -> None:
        assert self.adapter is not None
        code = self.adapter.run()
        self._from_worker(self.exit, code)

    def _from_worker(self, callback: Callable[..., object], *args: object) -> None:
        # The session may still be draining input after the app has shut down.
        if self.is_running:
            self.call_from_thread(callback, *args)

    def _handle_event(self, name: str, payload: object | None) -> None:
        if name == "session.failed" and isinstance(payload, str):
            self.failure = payload
        if name == "command.submit" and isinstance(payload, str):
            self._from_worker(self._append_output, f": {payload}")

    def _update_buffer(self, view: BufferView) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(_render_buffer(view))

    def _append_output(self, text: str) -> None:
        if self._output_widget:
            self._output_widget.write(text)

    def _update_status(self, text: str) -> None:
        if self._status_widget:
            self._status_widget.update(text)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the ed engine Textual UI.")
    parser.add_argument("file", nargs="?", default=None, help="File to edit")
    parser.add_argument(
        "-v",
        "--verbose-errors",
        dest="show_errors",
        action="store_true",
        default=None,
        help="Print error messages after '?'",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    settings = EditorSettings.from_env().override(show_errors=args.show_errors)
    app = EdEngineApp(filename=args.file, settings=settings)
    code = app.run() or EX_SUCCESS
    if app.failure:
        print(app.failure, file=sys.stderr)
        return EX_FAILURE
    return code


if __name__ == "__main__":  # pragma: no cover - manual run
    raise SystemExit(main())
