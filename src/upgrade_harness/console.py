"""Shared Rich console for upgrade-harness CLI output."""

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def error(message: str, console: Console = err_console) -> None:
    """Print an error message in red."""
    console.print(f"[red bold]{escape(message)}[/red bold]", highlight=False, soft_wrap=True)


def success(message: str, console: Console = console) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(message)}[/green]", highlight=False, soft_wrap=True)


def step_failed(step: str, detail: str, console: Console = err_console) -> None:
    """Print a failed validation step and the captured diagnostics below it."""
    console.print(f"[red bold]{escape(step)} failed[/red bold]")
    if detail:
        console.print(detail, markup=False, highlight=False, soft_wrap=True)
