from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from ed_engine.buffer import Buffer
from ed_engine.runtime import console
from ed_engine.runtime.settings import EditorSettings
from ed_engine.session import EditorSession


def feed_input(monkeypatch: pytest.MonkeyPatch, lines: List[str]) -> List[str]:
    prompts: List[str] = []
    pending = list(lines)

    def fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        if not pending:
            raise EOFError
        return pending.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


def test_read_eval_loop_runs_until_quit() -> None:
    pending = ["1p", "$d", "q", "q", "never"]
    output: List[str] = []
    session = EditorSession(
        buffer=Buffer.from_text("a\nb\n"),
        read_line=lambda prompt="": pending.pop(0) if pending else None,
        write=output.append,
    )

    code = console.read_eval_loop(session)

    assert code == console.EX_SUCCESS
    assert output == ["a", "?"]
    assert pending == ["never"]


def test_end_of_input_acts_like_quit() -> None:
    session = EditorSession(buffer=Buffer.from_text("a\n"), write=lambda _text: None)

    assert console.read_eval_loop(session) == console.EX_SUCCESS
    assert session.quit_requested


def test_main_edits_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "doc.txt"
    path.write_text("one\ntwo\n")
    prompts = feed_input(monkeypatch, ["1d", "w", ",p", "q"])

    code = console.main(["-p", "*", str(path)])

    assert code == console.EX_SUCCESS
    assert capsys.readouterr().out == "8\n4\ntwo\n"
    assert path.read_text() == "two\n"
    assert set(prompts) == {"*"}


def test_main_quiet_and_verbose_flags(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "doc.txt"
    path.write_text("one\n")
    feed_input(monkeypatch, ["9p", "q"])

    code = console.main(["-s", "-v", str(path)])

    assert code == console.EX_SUCCESS
    assert capsys.readouterr().out == "?\ninvalid address\n"


def test_main_reports_unreadable_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed_input(monkeypatch, [])

    code = console.main([str(tmp_path)])

    assert code == console.EX_FAILURE
    assert "couldn't read it" in capsys.readouterr().err


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ED_ENGINE_PROMPT", "> ")
    monkeypatch.setenv("ED_ENGINE_QUIET", "yes")

    settings = EditorSettings.from_env().override(quiet=None, show_errors=True)

    assert settings.prompt == "> "
    assert settings.quiet
    assert settings.show_errors
