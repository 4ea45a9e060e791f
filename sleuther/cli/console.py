"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output.
All CLI output should go through this module.
"""

from typing import Any

from rich.console import Console as RichConsole
from rich.table import Table

from sleuther.domain.linkcheck.model.value import LinkStatus
from sleuther.domain.rating.model.value import MAX_STARS
from sleuther.domain.sleuth.model.value import SleuthOutcome, SleuthReport

STATUS_STYLES = {
    LinkStatus.SUCCESS: "green",
    LinkStatus.NOTFOUND: "red",
    LinkStatus.ERROR: "red",
    LinkStatus.DEFERRED: "yellow",
}


def stars_label(stars: int | None) -> str:
    if stars is None:
        return "-"
    return "★" * stars + "☆" * (MAX_STARS - stars)


class Console:
    """CLI output manager wrapping rich."""

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._console.print(f"[dim]{message}[/dim]")

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def link_statuses(self, rows: list[tuple[str, LinkStatus, int, int | None]]) -> None:
        """Print (url, status, attempts, http status) rows."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("URL", overflow="fold")
        table.add_column("Status")
        table.add_column("Attempts", justify="right")
        table.add_column("HTTP", justify="right")
        for url, status, attempts, code in rows:
            style = STATUS_STYLES.get(status, "")
            table.add_row(url, f"[{style}]{status}[/{style}]", str(attempts), str(code or ""))
        self._console.print(table)

    def outcomes(self, outcomes: list[SleuthOutcome]) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Record")
        table.add_column("Stars")
        table.add_column("Links")
        table.add_column("Result")
        for outcome in outcomes:
            links = ""
            if outcome.link_status is not None:
                statuses = [entry.status for entry in outcome.link_status.urls.values()]
                ok = sum(1 for s in statuses if s is LinkStatus.SUCCESS)
                links = f"{ok}/{len(statuses)} ok"
            stars = outcome.rating.stars if outcome.rating else None
            table.add_row(outcome.record_id, stars_label(stars), links, str(outcome.status))
        self._console.print(table)
        for outcome in outcomes:
            for error in outcome.errors:
                self.warning(f"{outcome.record_id}: {error}")

    def report(self, report: SleuthReport) -> None:
        message = (
            f"Sleuthed {report.total} record{'s' if report.total != 1 else ''}: "
            f"{report.written} written, {report.skipped} skipped, {report.failed} failed"
        )
        if report.failed:
            self.warning(message)
        else:
            self.success(message)


_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
