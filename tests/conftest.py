"""Shared fixtures and fakes for the test suite"""

import asyncio
import io
from pathlib import Path

import pytest
from rich.console import Console

from gmplayer.models.catalog import Album, Track
from gmplayer.models.config import Settings


def make_track(index: int, artist: str = "Test Artist", album: str = "Test Album"):
    return Track(
        id=f"T{index}",
        title=f"Song {index}",
        artist=artist,
        album=album,
        album_id=f"A-{album}",
        track_number=index,
        duration_ms=180000 + index * 1000,
    )


class FakeCatalogClient:
    """Stands in for CatalogAPIClient without touching the network."""

    def __init__(self, albums=None, library=None, search_results=None):
        self.albums = {album.id: album for album in (albums or [])}
        self.library = library or []
        self.search_results = search_results or {}
        self.stream_url_requests = []
        self.searches = []

    async def search(self, query, kind, limit=20):
        self.searches.append((query, kind))
        return self.search_results[kind]

    async def get_album_details(self, album_id):
        return self.albums[album_id]

    async def get_stream_url(self, track_id):
        self.stream_url_requests.append(track_id)
        await asyncio.sleep(0)
        return f"https://stream.example.com/{track_id}.mp3"

    async def get_library(self):
        return list(self.library)

    async def close(self):
        pass


@pytest.fixture
def settings(tmp_path):
    return Settings(
        email="listener@example.com",
        password="hunter2",
        music_dir=tmp_path / "Music" / "gmplayer",
    )


@pytest.fixture
def quiet_console():
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def sample_album():
    tracks = [make_track(i) for i in range(1, 6)]
    return Album(id="A-Test Album", artist="Test Artist", name="Test Album", tracks=tracks)


@pytest.fixture
def catalog(sample_album):
    return FakeCatalogClient(albums=[sample_album])


def read_playlist_entries(playlist_path: Path) -> list[str]:
    lines = playlist_path.read_text(encoding="utf-8").splitlines()
    return [line for line in lines if line and not line.startswith("#")]
