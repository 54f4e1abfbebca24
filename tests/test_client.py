import asyncio
from unittest.mock import Mock

import aiohttp
import pytest

from gmplayer.api.client import NO_RESULTS_MESSAGE, CatalogAPIClient
from gmplayer.exceptions import AuthenticationError, DownloadError, SearchError

SEARCH_RESPONSE = {
    "entries": [
        {
            "type": "1",
            "track": {
                "nid": "Tabc",
                "title": "Paranoid Android",
                "artist": "Radiohead",
                "album": "OK Computer",
                "albumId": "Bok",
                "trackNumber": 2,
                "durationMillis": 387000,
            },
        },
        {
            "type": "3",
            "album": {"albumId": "Bok", "artist": "Radiohead", "name": "OK Computer"},
        },
        {"type": "2", "artist": {"name": "Radiohead"}},
        {
            "type": "1",
            "track": {"storeId": 42, "title": "Karma Police", "artist": "Radiohead"},
        },
    ]
}

ALBUM_RESPONSE = {
    "albumId": "Bok",
    "artist": "Radiohead",
    "name": "OK Computer",
    "tracks": [
        {"nid": "T1", "title": "Airbag", "artist": "Radiohead", "album": "OK Computer"},
        {"nid": "T2", "title": "Paranoid Android", "artist": "Radiohead"},
    ],
}


def make_client(settings, responses, calls=None):
    """A client whose transport returns canned responses per endpoint."""
    client = CatalogAPIClient(settings)
    client.auth_token = "token"

    async def fake_api_call(endpoint, method="GET", payload=None, **params):
        if calls is not None:
            calls.append((endpoint, params))
        response = responses[endpoint]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, list):
            return response.pop(0)
        return response

    client.api_call = fake_api_call
    return client


def test_search_keeps_only_tracks(settings):
    calls = []
    client = make_client(settings, {"query": SEARCH_RESPONSE}, calls)

    entries = asyncio.run(client.search("radiohead", "track"))

    assert [e.title for e in entries] == ["Paranoid Android", "Karma Police"]
    assert entries[0].track.id == "Tabc"
    assert entries[0].track.duration_ms == 387000
    assert entries[1].track.id == "42"
    assert calls == [("query", {"q": "radiohead", "max-results": 20})]


def test_search_keeps_only_albums(settings):
    client = make_client(settings, {"query": SEARCH_RESPONSE})

    entries = asyncio.run(client.search("radiohead", "album"))

    assert len(entries) == 1
    assert entries[0].album.id == "Bok"
    assert entries[0].artist == "Radiohead"


@pytest.mark.parametrize("response", [{}, {"entries": []}])
def test_empty_search_is_a_failure(settings, response):
    client = make_client(settings, {"query": response})

    with pytest.raises(SearchError, match=NO_RESULTS_MESSAGE):
        asyncio.run(client.search("zzzz", "track"))


def test_search_without_matching_kind_is_a_failure(settings):
    response = {"entries": [SEARCH_RESPONSE["entries"][1]]}
    client = make_client(settings, {"query": response})

    with pytest.raises(SearchError):
        asyncio.run(client.search("ok computer", "track"))


def test_search_transport_error_is_a_search_error(settings):
    client = make_client(settings, {"query": aiohttp.ClientConnectionError("down")})

    with pytest.raises(SearchError, match="failed"):
        asyncio.run(client.search("anything", "album"))


def test_unknown_search_kind(settings):
    client = make_client(settings, {})

    with pytest.raises(ValueError):
        asyncio.run(client.search("anything", "artist"))


def test_album_details(settings):
    calls = []
    client = make_client(settings, {"fetchalbum": ALBUM_RESPONSE}, calls)

    album = asyncio.run(client.get_album_details("Bok"))

    assert album.id == "Bok"
    assert [t.title for t in album.tracks] == ["Airbag", "Paranoid Android"]
    assert album.tracks[1].album == "Unknown Album"
    assert calls == [("fetchalbum", {"nid": "Bok", "include-tracks": "true"})]


def test_stream_url(settings):
    client = make_client(settings, {"mplay": {"url": "https://cdn.example.com/x"}})

    assert asyncio.run(client.get_stream_url("T1")) == "https://cdn.example.com/x"


def test_missing_stream_url(settings):
    client = make_client(settings, {"mplay": {}})

    with pytest.raises(DownloadError):
        asyncio.run(client.get_stream_url("T1"))


def test_library_follows_page_tokens(settings):
    pages = [
        {
            "data": {"items": [{"id": "L1", "title": "One", "albumId": "A1"}]},
            "nextPageToken": "p2",
        },
        {"data": {"items": [{"id": "L2", "title": "Two", "albumId": "A2"}]}},
    ]
    calls = []
    client = make_client(settings, {"trackfeed": pages}, calls)

    tracks = asyncio.run(client.get_library())

    assert [t.album_id for t in tracks] == ["A1", "A2"]
    assert calls == [("trackfeed", {}), ("trackfeed", {"start-token": "p2"})]


def _response_error(status):
    return aiohttp.ClientResponseError(
        request_info=Mock(), history=(), status=status, message="nope"
    )


def test_login_stores_token(settings):
    calls = []
    client = make_client(settings, {"auth/login": {"token": "abc"}}, calls)
    client.auth_token = None

    asyncio.run(client.authenticator.ensure_authenticated())

    assert client.auth_token == "abc"
    assert calls == [("auth/login", {})]


def test_rejected_login_is_an_authentication_error(settings):
    client = make_client(settings, {"auth/login": _response_error(401)})
    client.auth_token = None

    with pytest.raises(AuthenticationError, match="invalid email or password"):
        asyncio.run(client.authenticator.ensure_authenticated())


def test_login_without_token_is_an_authentication_error(settings):
    client = make_client(settings, {"auth/login": {}})
    client.auth_token = None

    with pytest.raises(AuthenticationError):
        asyncio.run(client.authenticator.ensure_authenticated())


def test_authentication_is_skipped_once_logged_in(settings):
    calls = []
    client = make_client(settings, {}, calls)

    asyncio.run(client.authenticator.ensure_authenticated())

    assert calls == []
