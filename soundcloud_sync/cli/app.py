"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import json
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from soundcloud_sync import __version__
from soundcloud_sync.core.sync_manager import SyncManager, requests_from_playlist
from soundcloud_sync.exceptions import SoundCloudSyncError
from soundcloud_sync.media.downloader import close_connection_pool, get_connection_pool
from soundcloud_sync.storage.config_manager import ConfigManager

from .formatters import print_config, print_summary_panel, print_validation_table

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("soundcloud_sync")

app = typer.Typer(
    name="soundcloud-sync",
    help="Sync SoundCloud playlists to tagged MP3 files on disk.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "soundcloud-sync"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """SoundCloud Sync CLI"""
    if version:
        console.print(f"[bold]soundcloud-sync[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("soundcloud_sync").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]soundcloud-sync init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        try:
            config = ConfigManager(CONFIG_FILE).load_config()
        except SoundCloudSyncError as e:
            console.print(f"[red]✗ {e}[/red]")
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config.model_dump(exclude={"config_path"}))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    token: str = typer.Argument(
        ...,
        help="Authorization header value, sent verbatim (e.g. 'OAuth 2-123...').",
    ),
    directory: Path = typer.Option(
        ..., "--directory", "-d", help="Base directory for synced playlists."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing configuration without asking."
    ),
):
    """Initialize configuration with a SoundCloud token and a target directory."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    ConfigManager(CONFIG_FILE).save_new_config(
        {"token": token, "directory": str(directory.expanduser())}
    )
    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Ready to sync! Try: [cyan]soundcloud-sync sync playlist.json[/cyan]")


@app.command(name="sync")
def sync_command(
    playlist_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON playlist (with 'title' and 'tracks') or a list of tracks.",
    ),
    collection: str | None = typer.Option(
        None, "--collection", "-c", help="Folder name; defaults to the playlist title."
    ),
    directory: Path | None = typer.Option(
        None, "--directory", "-d", help="Override the configured base directory."
    ),
    workers: int | None = typer.Option(
        None, "--workers", "-w", help="Number of simultaneous syncs."
    ),
    single_flight: bool | None = typer.Option(
        None,
        "--single-flight/--no-single-flight",
        help="Serialize syncs that target the same file.",
    ),
):
    """Sync every track of a playlist file to disk."""
    cli_options = {
        key: value
        for key, value in {
            "directory": str(directory) if directory else None,
            "max_workers": workers,
            "single_flight": single_flight,
        }.items()
        if value is not None
    }

    try:
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        if not config.directory:
            raise SoundCloudSyncError("No target directory configured.")
        payload = json.loads(playlist_file.read_text(encoding="utf-8"))
        requests = requests_from_playlist(
            payload, config.directory, config.token, collection, config.api_base
        )
    except (SoundCloudSyncError, ValueError) as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    async def _sync_async():
        try:
            session = await get_connection_pool(config.max_workers)
            manager = SyncManager(config, session)
            console.print("[bold cyan]🎵 Starting sync session...[/bold cyan]")
            outcomes = await manager.sync_all(requests)
            return manager.stats, outcomes
        finally:
            await close_connection_pool()

    stats, outcomes = asyncio.run(_sync_async())
    print_summary_panel(stats, outcomes)
    if stats.errors:
        raise typer.Exit(code=1)


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        print_validation_table(config)
    except SoundCloudSyncError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e
