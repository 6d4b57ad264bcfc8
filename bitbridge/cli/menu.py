"""Blocking action menu: rich for display, prompt_toolkit for input."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.validation import Validator
from rich.console import Console

console = Console()

_PROMPT_SESSION: PromptSession | None = None


def _init_prompt_session() -> PromptSession:
    """Create the prompt_toolkit session with persistent file history."""
    global _PROMPT_SESSION
    if _PROMPT_SESSION is None:
        history_file = Path.home() / ".bitbridge" / "history" / "menu_history"
        history_file.parent.mkdir(parents=True, exist_ok=True)
        _PROMPT_SESSION = PromptSession(history=FileHistory(str(history_file)), multiline=False)
    return _PROMPT_SESSION


def resolve_choice(answer: str, options: Sequence[str]) -> str | None:
    """Map a typed answer (1-based number, label, or unique label prefix) to an option."""
    text = answer.strip()
    if not text:
        return None
    if text.isdigit():
        index = int(text) - 1
        return options[index] if 0 <= index < len(options) else None
    lowered = text.lower()
    for option in options:
        if option.lower() == lowered:
            return option
    matches = [option for option in options if option.lower().startswith(lowered)]
    return matches[0] if len(matches) == 1 else None


def prompt_select(options: Sequence[str]) -> str:
    """Show the numbered options and block until one is chosen.

    Ctrl-C and Ctrl-D propagate as KeyboardInterrupt / EOFError.
    """
    session = _init_prompt_session()
    console.print()
    for number, label in enumerate(options, start=1):
        console.print(f"  [cyan]{number}[/cyan]) {label}")
    validator = Validator.from_callable(
        lambda text: resolve_choice(text, options) is not None,
        error_message=f"Enter 1-{len(options)} or an action name",
        move_cursor_to_end=True,
    )
    answer = session.prompt(
        HTML("<b>Select an action</b> › "),
        completer=WordCompleter(list(options), ignore_case=True, sentence=True),
        validator=validator,
    )
    choice = resolve_choice(answer, options)
    if choice is None:
        raise RuntimeError(f"Unrecognised menu answer: {answer!r}")
    return choice
