from __future__ import annotations

from pathlib import Path
from typing import List

from ed_engine.adapters.textual import QueueLineSource, TextualEdAdapter, TextualUIHooks
from ed_engine.buffer import BufferView


def make_adapter(
    *,
    views: List[BufferView] | None = None,
    outputs: List[str] | None = None,
    statuses: List[str] | None = None,
    events: List[tuple[str, object | None]] | None = None,
    logs: List[str] | None = None,
    filename: str | None = None,
) -> TextualEdAdapter:
    hooks = TextualUIHooks(
        update_buffer=lambda view: views.append(view) if views is not None else None,
        append_output=lambda text: outputs.append(text) if outputs is not None else None,
        update_status=lambda text: statuses.append(text) if statuses is not None else None,
        handle_event=lambda name, payload: (
            events.append((name, payload)) if events is not None else None
        ),
        log=lambda line: logs.append(line) if logs is not None else None,
    )
    return TextualEdAdapter(hooks, filename=filename)


def test_adapter_runs_queued_commands() -> None:
    views: List[BufferView] = []
    outputs: List[str] = []
    statuses: List[str] = []
    adapter = make_adapter(views=views, outputs=outputs, statuses=statuses)

    for line in ("a", "hello", "world", ".", "1p", "q", "q"):
        adapter.submit_line(line)
    code = adapter.run()

    assert code == 0
    assert outputs == ["hello", "?"]
    assert views[-1].text == "hello\nworld\n"
    assert statuses[0] == "[no file]  line 0/0"
    assert "[no file] [+]  line 1/2" in statuses


def test_adapter_relays_session_events() -> None:
    events: List[tuple[str, object | None]] = []
    adapter = make_adapter(events=events)

    adapter.submit_line("zz")
    adapter.close_input()
    adapter.run()

    names = [name for name, _ in events]
    assert ("command.submit", "zz") in events
    assert ("command.error", "unknown command") in events
    assert names[-1] == "buffer.changed"
    assert "session.quit" in names


def test_adapter_error_updates_status() -> None:
    statuses: List[str] = []
    adapter = make_adapter(statuses=statuses)

    adapter.submit_line("5p")
    adapter.close_input()
    adapter.run()

    assert "? invalid address" in statuses


def test_adapter_opens_file_on_run(tmp_path: Path) -> None:
    path = tmp_path / "doc.txt"
    path.write_text("first\nsecond\n")
    outputs: List[str] = []
    statuses: List[str] = []
    adapter = make_adapter(outputs=outputs, statuses=statuses, filename=str(path))

    adapter.close_input()
    adapter.run()

    assert outputs[0] == "13"
    assert statuses[0] == f"{path}  line 2/2"


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    adapter = make_adapter(logs=logs)

    adapter.submit_line("p")

    assert logs == ["input -> current_line=0 last_line=0 modified=False text='p'"]


def test_queue_source_stays_closed() -> None:
    source = QueueLineSource()
    source.push("x")
    source.close()

    assert source() == "x"
    assert source() is None
    assert source() is None


def test_adapter_unreadable_file_fails_run(tmp_path: Path) -> None:
    outputs: List[str] = []
    events: List[tuple[str, object | None]] = []
    adapter = make_adapter(outputs=outputs, events=events, filename=str(tmp_path))

    code = adapter.run()

    assert code == 1
    assert outputs[-1].endswith("couldn't read it")
    assert events[-1][0] == "session.failed"


def test_adapter_edit_of_unreadable_file_fails_run(tmp_path: Path) -> None:
    events: List[tuple[str, object | None]] = []
    adapter = make_adapter(events=events)

    adapter.submit_line(f"e {tmp_path}")
    code = adapter.run()

    assert code == 1
    name, reason = events[-1]
    assert name == "session.failed"
    assert reason == f"{tmp_path}: error: file may exist but couldn't read it"
