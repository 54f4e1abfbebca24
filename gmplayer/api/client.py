"""
Async client for the music catalog's JSON API.
"""

import asyncio
import logging
import time
from typing import Any, AsyncGenerator, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from gmplayer.exceptions import DownloadError, SearchError
from gmplayer.models.catalog import RESULT_TYPES, Album, SearchEntry, Track
from gmplayer.models.config import Settings

from .auth import CatalogAuthenticator

log = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No songs/albums were found with your query, please try again!"


class CatalogAPIClient:
    """
    Async client for search, library listing, album detail and stream URLs.

    Every call authenticates lazily with the credentials from the Settings it
    was built with.
    """

    def __init__(self, settings: Settings):
        """
        Initializes the API client.

        Args:
            settings: Validated settings carrying the credentials and API URL.
        """
        self.settings = settings
        self.base_url: str = settings.api_url

        # State set by the authenticator
        self.auth_token: Optional[str] = None

        self._session: Optional[aiohttp.ClientSession] = None
        self._authenticator = CatalogAuthenticator(self)

    @property
    def authenticator(self) -> CatalogAuthenticator:
        """Provides access to the authentication helper."""
        return self._authenticator

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "User-Agent": "gmplayer",
                    "Accept": "application/json",
                },
                timeout=aiohttp.ClientTimeout(
                    total=self.settings.request_timeout, connect=15
                ),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def api_call(
        self,
        endpoint: str,
        method: str = "GET",
        payload: Optional[Dict[str, Any]] = None,
        **params: Any,
    ) -> Dict[str, Any]:
        """
        Makes an API call, logging in first when no token is held yet.
        """
        if endpoint != "auth/login":
            await self._authenticator.ensure_authenticated()

        await self._initialize_session()

        headers = {}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"

        start_time = time.monotonic()
        try:
            async with self._session.request(
                method,
                self.base_url + endpoint,
                params=params or None,
                json=payload,
                headers=headers,
            ) as r:
                duration_ms = (time.monotonic() - start_time) * 1000
                log.debug(f"{method} {endpoint} -> {r.status} ({duration_ms:.0f} ms)")
                r.raise_for_status()
                return await r.json()
        except Exception as e:
            log.debug(f"API call to {endpoint} failed: {e}")
            raise

    async def _yield_pages(
        self, endpoint: str, **kwargs: Any
    ) -> AsyncGenerator[Dict[str, Any], None]:
        """
        Generator for endpoints that continue with a `nextPageToken`.
        """
        token = None
        while True:
            params = dict(kwargs)
            if token:
                params["start-token"] = token
            response = await self.api_call(endpoint, **params)
            yield response

            token = response.get("nextPageToken")
            if not token:
                break

    # Public API Methods
    async def search(
        self, query: str, kind: str, limit: int = 20
    ) -> List[SearchEntry]:
        """
        Searches the catalog and keeps only entries of the requested kind.

        Args:
            query: Free text query.
            kind: Either "track" or "album".
            limit: Maximum number of raw results requested.

        Raises:
            SearchError: On transport failure or when nothing matches.
        """
        if kind not in RESULT_TYPES:
            raise ValueError(f"Unknown search kind: {kind!r}")

        try:
            response = await self.api_call("query", q=query, **{"max-results": limit})
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SearchError(f"Search for '{query}' failed: {e}") from e

        raw_entries = response.get("entries") or []
        if not raw_entries:
            raise SearchError(NO_RESULTS_MESSAGE)

        entries = []
        for raw in raw_entries:
            if str(raw.get("type")) != RESULT_TYPES[kind]:
                continue
            try:
                entry = SearchEntry.model_validate(raw)
            except ValidationError as e:
                log.debug(f"Skipping malformed search entry: {e}")
                continue
            if getattr(entry, kind) is not None:
                entries.append(entry)

        if not entries:
            raise SearchError(NO_RESULTS_MESSAGE)
        return entries

    async def get_album_details(self, album_id: str) -> Album:
        response = await self.api_call(
            "fetchalbum", nid=album_id, **{"include-tracks": "true"}
        )
        return Album.model_validate(response)

    async def get_stream_url(self, track_id: str) -> str:
        response = await self.api_call("mplay", songid=track_id)
        if not (url := response.get("url")):
            raise DownloadError(f"No stream URL was issued for track {track_id}.")
        return url

    async def get_library(self) -> List[Track]:
        """Returns every track in the user's library, across all pages."""
        tracks: List[Track] = []
        async for page in self._yield_pages("trackfeed"):
            for item in page.get("data", {}).get("items", []):
                try:
                    tracks.append(Track.model_validate(item))
                except ValidationError as e:
                    log.debug(f"Skipping malformed library item: {e}")
        log.debug(f"Fetched {len(tracks)} library tracks")
        return tracks
