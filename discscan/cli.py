"""
discscan CLI - identify disc images by system and serial.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .common.exceptions import DiscScanError, format_exception_chain
from .common.streams import open_stream
from .config import SYSTEM_DISPLAY_NAMES
from .core.config_manager import ConfigManager
from .cue.locator import find_first_data_track
from .detection.signatures import detect_system
from .logging_cfg import configure_logging
from .manager import get_registry, identify_many

app = typer.Typer(
    help="💿 discscan: identify disc images (system and game serial).",
    rich_markup_mode="rich",
    add_completion=False,
)
console = Console()

_state: dict = {"settings": None}


def _settings() -> ConfigManager:
    if _state["settings"] is None:
        _state["settings"] = ConfigManager()
    return _state["settings"]


@app.callback()
def global_options(
    config_file: Optional[Path] = typer.Option(None, "--config", help="JSON settings file."),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="auto | json | human"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
):
    try:
        settings = ConfigManager(config_file)
    except DiscScanError as e:
        console.print(f"[bold red]✘[/bold red] {e}")
        raise typer.Exit(2)
    _state["settings"] = settings
    configure_logging(
        log_format or settings.get("log_format"),
        logging.DEBUG if verbose else logging.WARNING,
    )


@app.command("identify")
def cmd_identify(
    paths: List[Path] = typer.Argument(..., help="Disc images or .cue sheets."),
):
    """
    [bold green]🔍 Identificar[/bold green]

    Detects the system of each image and extracts its game serial. Images
    that cannot be identified are reported and skipped.
    """
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("File")
    table.add_column("System")
    table.add_column("Serial", no_wrap=True, min_width=10)
    table.add_column("Track", justify="right", style="dim")
    table.add_column("Status", no_wrap=True)

    io_failures = 0
    failures = []
    for result in identify_many(paths, _settings()):
        track = f"{result.track.path.name}@{result.track.offset}" if result.track else ""
        kind = result.details.get("kind")
        if result.identified:
            status = "[green]✔[/green]"
        elif kind == "io":
            io_failures += 1
            status = "[red]✘ io[/red]"
        else:
            status = f"[yellow]? {kind}[/yellow]"
        if result.error:
            failures.append(result)
        table.add_row(
            result.path.name,
            result.system or "-",
            result.serial or "-",
            track,
            status,
        )

    console.print(table)
    for result in failures:
        console.print(f"[dim]{result.path.name}: {result.error}[/dim]", highlight=False)
    if io_failures:
        sys.exit(1)


@app.command("system")
def cmd_system(path: Path = typer.Argument(..., help="Disc image.")):
    """Print the system literal matched by the magic number table."""
    try:
        with open_stream(path) as stream:
            system = detect_system(stream)
    except DiscScanError as e:
        console.print(f"[bold red]✘[/bold red] {escape(format_exception_chain(e))}")
        raise typer.Exit(1)
    provider = get_registry(_settings()).get_provider(system)
    name = provider.display_name if provider else SYSTEM_DISPLAY_NAMES.get(system, system)
    console.print(f"[bold]{system}[/bold] [dim]({name})[/dim]")


@app.command("track")
def cmd_track(cue: Path = typer.Argument(..., help="Cue sheet.")):
    """Print the first data track of a cue sheet and its byte offset."""
    try:
        track = find_first_data_track(cue, _settings().get("standard_msf"))
    except DiscScanError as e:
        console.print(f"[bold red]✘[/bold red] {escape(format_exception_chain(e))}")
        raise typer.Exit(1)
    typer.echo(f"{track.path}\t{track.offset}")


def main():
    app()


if __name__ == "__main__":
    main()
