"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gpt_assistant.clients.completion_client import CompletionClient
from gpt_assistant.config import AppConfig, load_config
from gpt_assistant.editor import FileEditor
from gpt_assistant.models.command import Action
from gpt_assistant.notifier import ConsoleNotifier
from gpt_assistant.pipeline.dispatcher import is_edit_action, list_actions
from gpt_assistant.pipeline.executor import CommandExecutor
from gpt_assistant.usage import calculate_cost

app = typer.Typer(
    name="gpt-assistant",
    help="Optimize, document, analyze or question selected code with a GPT model",
    no_args_is_help=True,
)
console = Console()

FileArg = typer.Argument(help="Source file treated as the active editor")
LinesOpt = typer.Option(
    None, "--lines", "-l", help="Selected lines, 1-based and inclusive: START[:END] (default: whole file)"
)
LanguageOpt = typer.Option(
    None, "--language", help="Language identifier (default: inferred from the file extension)"
)
ConfigOpt = typer.Option(None, "--config", "-c", help="Path to config.yaml")
VerboseOpt = typer.Option(False, "--verbose", "-v", help="Log prompts, responses and token usage")


def parse_lines(value: str) -> tuple[int, int | None]:
    """Parse ``START``, ``START:END`` or ``START:`` into 1-based line numbers."""
    start_raw, sep, end_raw = value.partition(":")
    try:
        start = int(start_raw)
        if not sep:
            return start, start
        return start, int(end_raw) if end_raw.strip() else None
    except ValueError:
        raise typer.BadParameter(f"Expected START[:END], got {value!r}", param_hint="--lines")


def _open_editor(file: Path, lines: str | None, language: str | None) -> FileEditor:
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    try:
        editor = FileEditor(file, language_id=language)
    except UnicodeDecodeError:
        console.print(f"[red]Not a UTF-8 text file: {file}[/red]")
        raise typer.Exit(1)

    if lines:
        first, last = parse_lines(lines)
        if last is None:
            last = editor.line_count()
        try:
            editor.select(editor.lines_range(first, last))
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--lines")
    return editor


def _load(config_path: Path | None) -> AppConfig:
    try:
        return load_config(config_path)
    except (TypeError, ValueError) as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)


async def _execute(
    config: AppConfig,
    editor: FileEditor,
    notifier: ConsoleNotifier,
    action: Action,
    question: str | None = None,
) -> tuple[bool, dict]:
    async with CompletionClient(config.api) as client:
        executor = CommandExecutor(
            client,
            notifier,
            editor=editor,
            prompt_overrides=config.prompts.as_overrides(),
        )
        if action is Action.INQUIRE:
            ok = await executor.inquire(question)
        else:
            ok = await executor.run_action(action)
        return ok, client.get_token_summary()


def _run(
    action: Action,
    file: Path,
    lines: str | None,
    language: str | None,
    config_path: Path | None,
    verbose: bool,
    question: str | None = None,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = _load(config_path)
    editor = _open_editor(file, lines, language)
    notifier = ConsoleNotifier(console)

    if verbose:
        console.print(f"[dim]File: {file} ({editor.language_id})[/dim]")
        console.print(f"[dim]Selection: {editor.selection.start} -> {editor.selection.end}[/dim]")

    with console.status("Loading...") as status:
        notifier.status = status
        ok, summary = asyncio.run(_execute(config, editor, notifier, action, question))
    notifier.status = None

    if verbose and summary["calls"]:
        cost = calculate_cost(summary["calls"])
        console.print(
            f"[dim]Tokens: {summary['input']} in / {summary['output']} out (~${cost:.4f})[/dim]"
        )

    if not ok:
        raise typer.Exit(1)
    if is_edit_action(action):
        console.print(f"[green]Updated {file}[/green]")


@app.command()
def optimize(
    file: Path = FileArg,
    lines: str = LinesOpt,
    language: str = LanguageOpt,
    config: Path = ConfigOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Replace the selection with an optimized version."""
    _run(Action.OPTIMIZE, file, lines, language, config, verbose)


@app.command()
def document(
    file: Path = FileArg,
    lines: str = LinesOpt,
    language: str = LanguageOpt,
    config: Path = ConfigOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Replace the selection with a line-by-line commented version."""
    _run(Action.DOCUMENT, file, lines, language, config, verbose)


@app.command()
def analyze(
    file: Path = FileArg,
    lines: str = LinesOpt,
    language: str = LanguageOpt,
    config: Path = ConfigOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Explain what the selected code does, without changing the file."""
    _run(Action.ANALYZE, file, lines, language, config, verbose)


@app.command()
def dry(
    file: Path = FileArg,
    lines: str = LinesOpt,
    language: str = LanguageOpt,
    config: Path = ConfigOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Replace the selection with refactored, concise, DRY code."""
    _run(Action.DRY, file, lines, language, config, verbose)


@app.command()
def inquire(
    file: Path = FileArg,
    question: str = typer.Option(
        None, "--question", "-q", help="Question to ask (default: prompt, pre-filled with the selection)"
    ),
    lines: str = LinesOpt,
    language: str = LanguageOpt,
    config: Path = ConfigOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Ask a question about the selected code and show the answer."""
    _run(Action.INQUIRE, file, lines, language, config, verbose, question=question)


@app.command()
def actions() -> None:
    """List the available actions."""
    table = Table(title="GPT Assistant")
    table.add_column("Action", style="bold")
    table.add_column("Mode")
    table.add_column("Description")
    for info in list_actions():
        mode = "[magenta]edit[/magenta]" if info.edit else "[cyan]inquiry[/cyan]"
        table.add_row(info.action.value, mode, info.description)
    console.print(table)


if __name__ == "__main__":
    app()
