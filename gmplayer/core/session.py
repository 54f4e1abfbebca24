"""
Sequential search, download and playback flows.
"""

import asyncio
import logging
import random
from pathlib import Path
from typing import List, Optional

import aiohttp
from rich.console import Console

from gmplayer.api.client import CatalogAPIClient
from gmplayer.cli.selection import prompt_for_entry
from gmplayer.exceptions import SearchError
from gmplayer.media.downloader import Downloader
from gmplayer.media.player import Player

log = logging.getLogger(__name__)


class PlayerSession:
    """Runs one operator request from lookup to the end of playback."""

    def __init__(
        self,
        api_client: CatalogAPIClient,
        downloader: Downloader,
        player: Player,
        console: Console,
        download_only: bool = False,
        rng: Optional[random.Random] = None,
    ):
        self.api_client = api_client
        self.downloader = downloader
        self.player = player
        self.console = console
        self.download_only = download_only
        self.rng = rng or random.Random()

    async def play_song(self, query: str) -> Path:
        """Looks up a song, lets the operator pick one, downloads and plays it."""
        with self.console.status("Looking up requested song"):
            entries = await self.api_client.search(query, "track")

        entry = await prompt_for_entry(
            self.console, entries, "What song do you want to play? #"
        )
        song_path = await self.downloader.download(entry.track)

        if not self.download_only:
            await self.player.play(song_path)
        return song_path

    async def play_album(self, query: str) -> Path:
        """Looks up an album, lets the operator pick one, downloads and plays it."""
        with self.console.status("Looking up requested album"):
            entries = await self.api_client.search(query, "album")

        entry = await prompt_for_entry(
            self.console, entries, "What album do you want to play? #"
        )
        return await self._download_and_play_album(entry.album.id)

    async def fetch_album_ids(self) -> List[str]:
        """Album ids found in the library, deduplicated in first-seen order."""
        try:
            tracks = await self.api_client.get_library()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SearchError(f"Could not fetch your library: {e}") from e
        album_ids = dict.fromkeys(t.album_id for t in tracks if t.album_id)
        return list(album_ids)

    async def shuffle_albums(self) -> List[str]:
        """
        Plays every album in the library in random order, one after another.

        Returns:
            The album ids in the order they were played.
        """
        with self.console.status("Fetching your library"):
            album_ids = await self.fetch_album_ids()

        self.rng.shuffle(album_ids)
        log.info(f"Shuffling through {len(album_ids)} albums")

        for album_id in album_ids:
            await self._download_and_play_album(album_id)
        return album_ids

    async def _download_and_play_album(self, album_id: str) -> Path:
        with self.console.status("Downloading album"):
            playlist_path = await self.downloader.download_album(album_id)

        if not self.download_only:
            await self.player.play(playlist_path, is_playlist=True)
        return playlist_path
