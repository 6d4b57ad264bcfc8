"""Tests for cli.menu choice parsing and cli.render.ConsoleReporter."""

import io
from pathlib import Path

import pytest
from rich.console import Console

from bitbridge.bridge.actions import Action
from bitbridge.bridge.processor import Outcome
from bitbridge.cli import menu
from bitbridge.cli.menu import prompt_select, resolve_choice
from bitbridge.cli.render import ConsoleReporter
from bitbridge.protocol.models import OperationKind
from bitbridge.utils.exceptions import FilesystemError, RemoteError

OPTIONS = Action.labels()


# --- resolve_choice ---


def test_resolve_choice_by_number() -> None:
    assert resolve_choice("1", OPTIONS) == Action.PUSH_ALL_FILES.value
    assert resolve_choice(" 4 ", OPTIONS) == Action.QUIT.value
    assert resolve_choice("0", OPTIONS) is None
    assert resolve_choice("5", OPTIONS) is None


def test_resolve_choice_by_label_and_prefix() -> None:
    assert resolve_choice("quit", OPTIONS) == Action.QUIT.value
    assert resolve_choice("Push", OPTIONS) == Action.PUSH_ALL_FILES.value
    assert resolve_choice("get", OPTIONS) is None  # ambiguous
    assert resolve_choice("get all", OPTIONS) == Action.GET_ALL_FILE_NAMES.value
    assert resolve_choice("", OPTIONS) is None


class _FakePromptSession:
    def __init__(self, answer: str):
        self.answer = answer

    def prompt(self, *_args, **_kwargs) -> str:
        return self.answer


def test_prompt_select_returns_label(monkeypatch) -> None:
    monkeypatch.setattr(menu, "_init_prompt_session", lambda: _FakePromptSession("2"))
    monkeypatch.setattr(menu, "console", Console(file=io.StringIO()))
    assert prompt_select(OPTIONS) == Action.GET_DEFINITIONS.value


def test_prompt_select_rejects_unrecognised_answer(monkeypatch) -> None:
    monkeypatch.setattr(menu, "_init_prompt_session", lambda: _FakePromptSession("dance"))
    monkeypatch.setattr(menu, "console", Console(file=io.StringIO()))
    with pytest.raises(RuntimeError):
        prompt_select(OPTIONS)


# --- ConsoleReporter ---


def _reporter(definitions_file: Path | None = None):
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, color_system=None)
    return ConsoleReporter(console, definitions_file), buffer


def test_reports_push_confirmation() -> None:
    reporter, buffer = _reporter()
    reporter(Outcome(1, OperationKind.PUSH_FILE, True, "a.js: OK", filename="a.js", result="OK"))
    assert "a.js: OK" in buffer.getvalue()


def test_reports_file_list() -> None:
    reporter, buffer = _reporter()
    reporter(Outcome(2, OperationKind.GET_FILE_NAMES, True, "a.js\nb.js", result=["a.js", "b.js"]))
    output = buffer.getvalue()
    assert "2 file(s)" in output
    assert "a.js" in output and "b.js" in output


def test_reports_failure() -> None:
    reporter, buffer = _reporter()
    error = RemoteError("pushFile", "Invalid file", filename="[x].js")
    reporter(Outcome(3, OperationKind.PUSH_FILE, False, error.message, filename="[x].js", error=error))
    assert "pushFile [x].js failed: Invalid file" in buffer.getvalue()


def test_saves_definition_file(tmp_path: Path) -> None:
    target = tmp_path / "external" / "NetscriptDefinitions.d.ts"
    reporter, buffer = _reporter(target)
    reporter(Outcome(4, OperationKind.GET_DEFINITION_FILE, True, "interface NS {}", result="interface NS {}"))
    assert target.read_text() == "interface NS {}"
    assert "Definitions saved" in buffer.getvalue()


def test_prints_definitions_when_saving_disabled() -> None:
    reporter, buffer = _reporter(None)
    reporter(Outcome(5, OperationKind.GET_DEFINITION_FILE, True, "interface NS {}", result="interface NS {}"))
    assert "interface NS {}" in buffer.getvalue()


def test_report_error() -> None:
    reporter, buffer = _reporter()
    reporter.report_error(FilesystemError("sub/b.js", "Permission denied"))
    output = buffer.getvalue()
    assert "FILESYSTEM_ERROR" in output
    assert "sub/b.js" in output
