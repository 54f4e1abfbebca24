"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from gmplayer import __version__
from gmplayer.api.client import CatalogAPIClient
from gmplayer.core.session import PlayerSession
from gmplayer.exceptions import GmplayerError
from gmplayer.media.downloader import Downloader, close_connection_pool
from gmplayer.media.player import Player
from gmplayer.models.config import Settings
from gmplayer.storage.config_manager import ConfigManager

from .formatters import format_error_with_suggestions

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
log = logging.getLogger("gmplayer")

app = typer.Typer(
    name="gmplayer",
    help="Search the music catalog, download songs and albums, and play them.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


async def _run_session(
    settings: Settings,
    query: str,
    song: bool,
    album: bool,
    album_shuffle: bool,
    download_only: bool,
) -> None:
    api_client = CatalogAPIClient(settings)
    downloader = Downloader(settings, api_client)
    player = Player(settings.player, console=console)
    session = PlayerSession(
        api_client, downloader, player, console, download_only=download_only
    )

    try:
        if song:
            await session.play_song(query)
        elif album:
            await session.play_album(query)
        elif album_shuffle:
            await session.shuffle_albums()
    finally:
        await close_connection_pool()
        await api_client.close()


@app.command()
def main(
    ctx: typer.Context,
    query: list[str] | None = typer.Argument(  # noqa: B008
        None, help="Words to search the catalog for."
    ),
    song: bool = typer.Option(
        False, "--song", "-s", help="The song you want to download/play."
    ),
    album: bool = typer.Option(
        False, "--album", "-a", help="The album you want to download/play."
    ),
    album_shuffle: bool = typer.Option(
        False, "--album-shuffle", "-A", help="Shuffle through albums in your library."
    ),
    downloadonly: bool = typer.Option(
        False,
        "--downloadonly",
        "-d",
        help="Only download the song or album instead of playing it.",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None, "--config", help="Settings file to use (default ~/.gmplayerrc)."
    ),
    music_dir: Path | None = typer.Option(  # noqa: B008
        None, "--music-dir", help="Where downloads are stored (overrides settings)."
    ),
    workers: int | None = typer.Option(
        None, "-w", "--workers", help="Number of simultaneous track downloads (1-8)."
    ),
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
):
    """Search, download and play music from the catalog."""
    if version:
        console.print(f"[bold]gmplayer[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("gmplayer").setLevel(log_level)

    cli_options = {
        key: value
        for key, value in {"music_dir": music_dir, "max_workers": workers}.items()
        if value is not None
    }

    config_manager = ConfigManager(config)
    try:
        settings = config_manager.load_settings(cli_options)
    except GmplayerError as e:
        console.print(
            format_error_with_suggestions(
                e, config_path=config_manager.config_file_path
            )
        )
        raise typer.Exit(code=1) from e

    if not (song or album or album_shuffle):
        console.print(ctx.get_help())
        raise typer.Exit()

    query_text = " ".join(query or []).strip()
    if (song or album) and not query_text:
        console.print("[red]✗ Please provide something to search for.[/red]")
        raise typer.Exit(code=2)

    try:
        asyncio.run(
            _run_session(
                settings, query_text, song, album, album_shuffle, downloadonly
            )
        )
    except GmplayerError as e:
        console.print(
            format_error_with_suggestions(
                e, config_path=config_manager.config_file_path
            )
        )
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e
