"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich library for progress bars, colored output, and the run summary.
Supports verbosity levels and --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from src.migration.models import MigrationReport, PageStatus


class OutputHandler:
    """Handles all terminal output using Rich library.

    Provides methods for displaying messages, progress bars and summaries
    with color coding and verbosity level control.

    Attributes:
        verbosity: Logging verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.warning("Page 'Home' written with warnings")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    @contextmanager
    def progress_bar(self, total: int, description: str = "Processing") -> Iterator[Progress]:
        """Display progress bar for multi-item operations.

        Args:
            total: Total number of items to process
            description: Description text for progress bar

        Yields:
            Progress instance for updating progress

        Example:
            >>> with handler.progress_bar(10, "Migrating pages") as progress:
            ...     task = progress.add_task("Migrating pages", total=10)
            ...     for i in range(10):
            ...         progress.update(task, advance=1)
        """
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
            disable=self.verbosity >= 2,
        )
        with progress:
            yield progress

    def print_summary(self, report: MigrationReport) -> None:
        """Display migration summary with color coding.

        Args:
            report: Report of the finished run
        """
        self.console.print("\n[bold]Migration Summary:[/bold]")

        clean_count = report.written_count - report.degraded_count
        if clean_count > 0:
            self.console.print(f"  [green]✓[/green] Written: {clean_count} page(s)")

        if report.degraded_count > 0:
            self.console.print(f"  [yellow]⚠[/yellow] Degraded: {report.degraded_count} page(s)")

        if report.failed_count > 0:
            self.console.print(f"  [red]✗[/red] Failed: {report.failed_count} page(s)")

        if report.attachments_copied > 0:
            self.console.print(f"  [blue]↓[/blue] Attachments: {report.attachments_copied} file(s)")

        if self.verbosity >= 1:
            self._print_problem_pages(report)

        if not report.pages:
            self.console.print("\n[yellow]No pages found in export[/yellow]")
        elif report.failed_count > 0:
            self.console.print("\n[red]Migration completed with failures[/red]")
        elif report.degraded_count > 0:
            self.console.print("\n[yellow]Migration completed with warnings[/yellow]")
        else:
            self.console.print("\n[green]Migration completed successfully[/green]")

    def _print_problem_pages(self, report: MigrationReport) -> None:
        """Display a table of degraded and failed pages."""
        problems = [p for p in report.pages if p.status != PageStatus.WRITTEN]
        if not problems:
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Page")
        table.add_column("Status")
        table.add_column("Details")
        for page in problems:
            details = page.error if page.error else "; ".join(page.warnings)
            table.add_row(page.title, page.status.value, details)
        self.console.print(table)
