"""
CLI Output Utilities

Presenters that show a command's message, adapting to machine mode.
"""

from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from typeshape.cli.config import CLIConfig


class ConsolePresenter:
    """
    Shows messages on the terminal.

    Human mode draws a rich panel (the dialog of an editor integration);
    machine mode prints the message as-is.
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console

    @property
    def console(self) -> Console:
        # Created lazily so CliRunner's patched stdout is picked up
        if self._console is None:
            self._console = Console()
        return self._console

    def show(self, message: str, title: str = CLIConfig.PANEL_TITLE) -> None:
        if CLIConfig.is_machine_mode():
            typer.echo(message)
        else:
            self.console.print(Panel(escape(message), title=title, expand=False))


class RecordingPresenter:
    """Keeps shown messages in memory instead of printing them."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def show(self, message: str, title: str = CLIConfig.PANEL_TITLE) -> None:
        self.messages.append((title, message))
