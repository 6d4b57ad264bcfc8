"""Terminal rendering of request outcomes."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.markup import escape

from bitbridge.bridge.processor import Outcome
from bitbridge.protocol.models import OperationKind
from bitbridge.utils.exceptions import BridgeError


class ConsoleReporter:
    """Prints outcomes; saves the definition file when a path is configured."""

    def __init__(self, console: Console, definitions_file: Path | None = None):
        self.console = console
        self.definitions_file = definitions_file

    def __call__(self, outcome: Outcome) -> None:
        if not outcome.ok:
            self.console.print(f"[red]✗[/red] {escape(outcome.text)}")
            return

        if isinstance(outcome.result, list):
            self.console.print(f"[green]✓[/green] {len(outcome.result)} file(s):")
            for name in outcome.result:
                self.console.print(f"  {escape(name)}")
            return

        if outcome.operation is OperationKind.GET_DEFINITION_FILE and self.definitions_file is not None:
            self._save_definitions(self.definitions_file, outcome.text)
            return

        self.console.print(f"[green]✓[/green] {escape(outcome.text)}")

    def _save_definitions(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot write definitions to {path}: {e}")
            self.console.print(f"[red]✗[/red] Cannot write {escape(str(path))}: {escape(str(e))}")
            return
        self.console.print(f"[green]✓[/green] Definitions saved to {escape(str(path))} ({len(content)} chars)")

    def report_error(self, error: BridgeError) -> None:
        self.console.print(f"[red]{error.code}[/red] {escape(error.message)}")
