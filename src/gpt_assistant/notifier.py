"""Console notifications using rich + typer."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.text import Text


class ConsoleNotifier:
    """Shows messages on a rich console. Model output is never parsed as markup."""

    def __init__(self, console: Console | None = None, title: str = "GPT Assistant"):
        self.console = console or Console()
        self.title = title
        self.status: Status | None = None  # spinner paused while prompting

    def info(self, message: str) -> None:
        self.console.print(Panel(Text(message), title=self.title, border_style="cyan"))

    def warning(self, message: str) -> None:
        self.console.print(Text(message, style="yellow"))

    def error(self, message: str) -> None:
        self.console.print(Text(message, style="red"))

    def prompt(self, message: str, value: str = "") -> str | None:
        if self.status is not None:
            self.status.stop()
        try:
            return typer.prompt(message, default=value or None)
        except typer.Abort:
            return None
        finally:
            if self.status is not None:
                self.status.start()
