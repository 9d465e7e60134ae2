"""Rich console output utilities for the CodeInspector CLI."""

from typing import Any, NoReturn, Optional, Sequence

import click
import typer
from rich.console import Console
from rich.markup import escape
from rich.status import Status
from rich.table import Table

from extensions.interaction import Validator
from extensions.loader import LoadedExtension
from extensions.manifest import ValidationResult
from tools.git_manager import GitStatus
from updates.models import UpdateRecord


console = Console()
error_console = Console(stderr=True)

UPDATE_COMMAND = "npm install -g @codeinspector/cli"


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]→[/blue] {message}")


def print_key_value(key: str, value: Any, key_style: str = "bold") -> None:
    """Print a key-value pair."""
    console.print(f"[{key_style}]{key}:[/{key_style}] {escape(str(value))}")


def exit_with_error(message: str) -> NoReturn:
    """Print `Error: <message>` to stderr and exit with status 1."""
    error_console.print(f"[red]Error:[/red] {escape(str(message))}")
    raise typer.Exit(1)


# =============================================================================
# Interaction
# =============================================================================


class SpinnerReporter:
    """Progress reporter backed by a rich status spinner.

    `phase` starts (or relabels) the spinner; the terminal states stop it
    and print a line.
    """

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console
        self._status: Optional[Status] = None

    def phase(self, message: str) -> None:
        if self._status is None:
            self._status = self.console.status(escape(message))
            self._status.start()
        else:
            self._status.update(escape(message))

    def pause(self) -> None:
        """Stop the spinner so a prompt can take the terminal."""
        if self._status is not None:
            self._status.stop()
            self._status = None

    def succeed(self, message: str) -> None:
        self.pause()
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warn(self, message: str) -> None:
        self.pause()
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def fail(self, message: str) -> None:
        self.pause()
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def info(self, message: str) -> None:
        self.pause()
        self.console.print(escape(message))

    def __enter__(self) -> "SpinnerReporter":
        return self

    def __exit__(self, *args) -> None:
        self.pause()


class ConsolePrompter:
    """Prompter reading answers from the terminal."""

    def __init__(self, reporter: SpinnerReporter | None = None) -> None:
        self.reporter = reporter

    def _pause(self) -> None:
        if self.reporter is not None:
            self.reporter.pause()

    def _ask_until_valid(self, message: str, validate: Validator | None, **kwargs: Any) -> str:
        while True:
            answer = str(typer.prompt(message, **kwargs))
            problem = validate(answer) if validate else None
            if problem is None:
                return answer
            print_error(problem)

    def ask(
        self,
        message: str,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str:
        self._pause()
        return self._ask_until_valid(message, validate, default=default)

    def confirm(self, message: str, default: bool = False) -> bool:
        self._pause()
        return typer.confirm(message, default=default)

    def choose(self, message: str, choices: Sequence[str], default: str | None = None) -> str:
        self._pause()
        return typer.prompt(
            message,
            default=default,
            type=click.Choice(list(choices), case_sensitive=False),
        )

    def secret(self, message: str, validate: Validator | None = None) -> str:
        self._pause()
        return self._ask_until_valid(message, validate, hide_input=True)


# =============================================================================
# Views
# =============================================================================


def print_update_notification(record: UpdateRecord | None, output: Console | None = None) -> None:
    """Print the new-version banner; silent unless the record is outdated."""
    if record is None or not record.is_outdated:
        return

    target = output or console
    target.print(
        f"\n[yellow]⚠[/yellow]  [bold]New version available![/bold] "
        f"[dim]{escape(str(record.current))}[/dim] → [green]{escape(str(record.latest))}[/green]"
    )
    target.print(f"[dim]   Run[/dim] [cyan]{UPDATE_COMMAND}[/cyan] [dim]to update[/dim]\n")


def print_update_report(record: UpdateRecord | None) -> None:
    """Print the full result of an explicit update check."""
    if record is None:
        print_warning("Could not check for updates")
        return

    if record.error:
        console.print("[red]✗ Error checking updates[/red]\n")
        console.print(f"  Status: [yellow]{record.status}[/yellow] {escape(record.status_text)}")
        console.print(f"  Message: {escape(record.error)}\n")
        return

    if not record.current or not record.latest:
        print_warning("Could not check for updates (no internet connection)")
        return

    console.print("\n[bold]Version Information:[/bold]\n")
    console.print(f"  Current: [cyan]{escape(record.current)}[/cyan]")
    console.print(f"  Latest:  [cyan]{escape(record.latest)}[/cyan]")
    console.print(f"  Status:  [green]{record.status}[/green] {escape(record.status_text)}")

    if record.is_outdated:
        console.print("\n[yellow]⚠[/yellow]  [bold]Update available![/bold]\n")
        console.print(f"  [dim]Run:[/dim] [cyan]{UPDATE_COMMAND}[/cyan]\n")
    else:
        console.print("\n[green]✓[/green]  [bold]Already on the latest version![/bold]\n")


def print_validation(result: ValidationResult) -> None:
    """Print validation errors, warnings and the manifest summary."""
    if result.errors:
        error_console.print("\n[bold red]Errors:[/bold red]")
        for message in result.errors:
            error_console.print(f"  [red]✗[/red] {escape(message)}")
        return

    print_success("Manifest is valid")

    if result.warnings:
        console.print("\n[bold yellow]Warnings:[/bold yellow]")
        for message in result.warnings:
            console.print(f"  [yellow]⚠[/yellow] {escape(message)}")

    console.print("\n[bold]Extension Details:[/bold]")
    for label, key in (("ID", "id"), ("Name", "name"), ("Version", "version"), ("Main", "main")):
        console.print(f"  {label}: {escape(str(result.manifest.get(key, '')))}")


def print_extensions(extensions: list[LoadedExtension], title: str = "Extensions") -> None:
    """Print discovered extensions as a table."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("Version")
    table.add_column("Author")
    table.add_column("Description")
    table.add_column("Path", style="dim")

    for ext in extensions:
        manifest = ext.manifest
        table.add_row(
            escape(manifest.name),
            escape(manifest.id),
            escape(manifest.version),
            escape(manifest.author or "Unknown"),
            escape(manifest.description or "No description"),
            escape(str(ext.path)),
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(extensions)} extensions[/dim]")


def print_git_status(status: GitStatus) -> None:
    """Print a working tree summary."""
    console.print("\n[bold]Git Status:[/bold]\n")
    print_key_value("Branch", status.branch or "unknown")
    print_key_value("Tracking", status.tracking or "not set")
    console.print()

    if status.files:
        console.print("Modified files:")
        for entry in status.files:
            if entry.is_untracked:
                icon = "[dim]?[/dim]"
            elif entry.index == "M":
                icon = "[yellow]◆[/yellow]"
            else:
                icon = "[green]■[/green]"
            console.print(f"  {icon} {escape(entry.path)}")
    else:
        console.print("No changes")

    console.print(f"\nAhead: {status.ahead}, Behind: {status.behind}")
