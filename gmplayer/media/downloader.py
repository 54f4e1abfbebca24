"""
Handles downloading tracks and whole albums over HTTP into the local music
directory.
"""

import asyncio
import logging
import os
from pathlib import Path

import aiofiles
import aiohttp
from pydantic import ValidationError
from rich.markup import escape

from gmplayer.api.client import CatalogAPIClient
from gmplayer.exceptions import DownloadError
from gmplayer.models.catalog import Track
from gmplayer.models.config import Settings
from gmplayer.utils.formatting import format_size
from gmplayer.utils.path import create_dir, get_playlist_path, get_track_path
from gmplayer.utils.playlist import write_m3u

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(max_workers: int = 4) -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for stream downloads.

    Args:
        max_workers: Maximum concurrent connections (should match settings.max_workers).
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=max_workers * 2,
            limit_per_host=max_workers,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        _connection_pool = aiohttp.ClientSession(connector=connector, timeout=timeout)
        log.debug(f"Created download pool with limit_per_host={max_workers}")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


class Downloader:
    """Downloads tracks to `<music_dir>/<artist>/<album>/<title>.mp3`."""

    CHUNK_SIZE = 131072  # 128 KB
    PARTIAL_SUFFIX = ".part"

    def __init__(self, settings: Settings, api_client: CatalogAPIClient):
        self.settings = settings
        self.api_client = api_client

    @property
    def music_dir(self) -> Path:
        return self.settings.music_dir

    async def _stream_to_file(self, url: str, destination_path: Path) -> int:
        """Streams the response body to disk chunk by chunk. Returns bytes written."""
        session = await get_connection_pool(self.settings.max_workers)
        bytes_downloaded = 0
        async with session.get(url, allow_redirects=True) as response:
            response.raise_for_status()
            async with aiofiles.open(destination_path, "wb") as f:
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    await f.write(chunk)
                    bytes_downloaded += len(chunk)
        return bytes_downloaded

    async def download(self, track: Track) -> Path:
        """
        Downloads a single track unless it is already in offline storage.

        With `atomic_writes` the body goes to a `.part` file that is renamed
        only once complete, so an aborted download is never mistaken for a
        finished one.

        Returns:
            The local path of the track.

        Raises:
            DownloadError: On network or filesystem failure.
        """
        song_path = get_track_path(self.music_dir, track)

        if self.settings.reuse_existing and await asyncio.to_thread(
            song_path.is_file
        ):
            log.info(
                f"[dim]'{escape(track.title)}' already found in offline storage, "
                "using that instead.[/dim]"
            )
            return song_path

        if self.settings.atomic_writes:
            target_path = song_path.with_name(song_path.name + self.PARTIAL_SUFFIX)
        else:
            target_path = song_path

        try:
            url = await self.api_client.get_stream_url(track.id)
            await asyncio.to_thread(create_dir, song_path.parent)
            size = await self._stream_to_file(url, target_path)
            if target_path != song_path:
                await asyncio.to_thread(os.replace, target_path, song_path)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadError(f"Failed to download '{track.title}': {e}") from e
        except OSError as e:
            raise DownloadError(f"Could not write '{song_path}': {e}") from e

        log.debug(f"Downloaded '{song_path.name}' ({format_size(size)})")
        return song_path

    async def download_album(self, album_id: str) -> Path:
        """
        Downloads every track of an album and writes its playlist.

        Tracks are fetched concurrently, at most `max_workers` at a time; the
        playlist keeps the album's track order whatever order they finish in.

        Returns:
            The path of the written `.m3u` playlist.
        """
        try:
            album = await self.api_client.get_album_details(album_id)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValidationError) as e:
            raise DownloadError(f"Could not fetch album {album_id}: {e}") from e

        if not album.tracks:
            raise DownloadError(f"Album '{album.artist} - {album.name}' has no tracks.")

        log.info(
            f"Downloading [bold]{escape(album.artist)} - {escape(album.name)}[/bold]"
        )
        semaphore = asyncio.Semaphore(self.settings.max_workers)

        async def _bounded_download(track: Track) -> Path:
            async with semaphore:
                return await self.download(track)

        tasks = [asyncio.ensure_future(_bounded_download(t)) for t in album.tracks]
        try:
            paths = await asyncio.gather(*tasks)
        except BaseException:
            # one failed track aborts the album, so stop the rest
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        playlist_path = get_playlist_path(self.music_dir, album)
        return await asyncio.to_thread(
            write_m3u, playlist_path, list(zip(album.tracks, paths))
        )
