"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from soundcloud_sync.models.config import SyncConfig
from soundcloud_sync.models.descriptor import SyncAction, SyncOutcome
from soundcloud_sync.models.stats import SyncStats

console = Console()


def format_error_with_suggestions(error: Exception) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Run `soundcloud-sync init <TOKEN> --directory <DIR>` to create a config.",
            "• Run `soundcloud-sync validate` to check the current one.",
        ],
        "TransportError": [
            "• A network connection issue occurred.",
            "• Your token may have expired. Run `soundcloud-sync init` again.",
            "• The SoundCloud API might be temporarily unavailable.",
        ],
        "IntegrityError": [
            "• The server closed the stream early. Run the sync again.",
        ],
        "ResolutionError": [
            "• The streams endpoint answered with an unexpected payload.",
            "• Check `api_base` in your config.",
        ],
        "FilesystemError": [
            "• Check that the target directory is writable and has free space.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    kind = getattr(error, "kind", None)
    if kind is not None:
        content.add_row()
        content.add_row(Text(f"Failure kind: {kind.value}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        box=box.ROUNDED,
    )


_ACTION_STYLES = {
    SyncAction.STREAMED: "green",
    SyncAction.SKIPPED: "yellow",
    SyncAction.UNSUPPORTED: "magenta",
    SyncAction.ERROR: "red",
}


def print_summary_panel(stats: SyncStats, outcomes: list[SyncOutcome]) -> None:
    """Prints the session totals and any tracks that did not sync."""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column(justify="right")
    grid.add_row("Processed", str(stats.processed))
    grid.add_row(Text("Streamed", style="green"), str(stats.streamed))
    grid.add_row(Text("Skipped", style="yellow"), str(stats.skipped))
    grid.add_row(Text("Unsupported", style="magenta"), str(stats.unsupported))
    grid.add_row(Text("Errors", style="red"), str(stats.errors))

    console.print(
        Panel(grid, title="[bold cyan]Sync Summary[/bold cyan]", box=box.ROUNDED)
    )

    problems = [o for o in outcomes if o.action in (SyncAction.ERROR, SyncAction.UNSUPPORTED)]
    if not problems:
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Action")
    table.add_column("Path", overflow="fold")
    table.add_column("Reason", overflow="fold")
    for o in problems:
        style = _ACTION_STYLES[o.action]
        table.add_row(Text(o.action.value, style=style), o.path, o.reason or "")
    console.print(table)


def print_config(config_file: Path, config_data: dict[str, Any]) -> None:
    """Displays the current configuration, masking the token."""
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in sorted(config_data.items()):
        if key == "token" and value:
            value = f"{str(value)[:10]}…"
        table.add_row(key, str(value))
    console.print(
        Panel(table, title=f"[bold]Configuration[/bold] [dim]{config_file}[/dim]")
    )


def print_validation_table(config: SyncConfig) -> None:
    """Prints a pass/fail table for the settings a sync needs."""
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Check")
    table.add_column("Status")

    def row(label: str, ok: bool, detail: str = "") -> None:
        status = "[green]✓[/green]" if ok else "[red]✗[/red]"
        table.add_row(label, f"{status} {detail}".rstrip())

    row("Token", bool(config.token))
    row("Directory", bool(config.directory), config.directory)
    row("API base", True, config.api_base)
    row("Workers", True, str(config.max_workers))
    row("Single flight", True, "on" if config.single_flight else "off")
    row("Artwork", True, f"{config.artwork_size}px @ q{config.artwork_quality}")
    console.print(table)
