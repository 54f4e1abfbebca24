import pytest

from gmplayer.models.catalog import Album, Track
from gmplayer.utils.path import (
    get_playlist_path,
    get_track_path,
    sanitize_filename,
)

NAMES = [
    "AC/DC",
    "Back In Black",
    "a/b/c/d",
    "//leading and trailing//",
    "Windows\\Style",
    "Already|Piped",
    "Mixed /\\ separators",
]


def test_sanitize_replaces_separators_with_pipe():
    assert sanitize_filename("AC/DC") == "AC|DC"
    assert sanitize_filename("a/b/c") == "a|b|c"
    assert sanitize_filename("Back\\Slash") == "Back|Slash"


def test_sanitize_leaves_plain_names_alone():
    assert sanitize_filename("Highway to Hell.mp3") == "Highway to Hell.mp3"


@pytest.mark.parametrize("name", NAMES)
def test_sanitize_output_has_no_separators(name):
    assert "/" not in sanitize_filename(name)
    assert "\\" not in sanitize_filename(name)


@pytest.mark.parametrize("name", NAMES)
def test_sanitize_is_idempotent(name):
    once = sanitize_filename(name)
    assert sanitize_filename(once) == once


def test_track_path_layout(tmp_path):
    track = Track(id="T1", title="Shot/Down", artist="AC/DC", album="Back In Black")

    path = get_track_path(tmp_path, track)

    assert path == tmp_path / "AC|DC" / "Back In Black" / "Shot|Down.mp3"


def test_playlist_path_layout(tmp_path):
    album = Album(id="A1", artist="AC/DC", name="Back In Black")

    path = get_playlist_path(tmp_path, album)

    assert path == tmp_path / "AC|DC" / "Back In Black" / "AC|DC - Back In Black.m3u"


@pytest.mark.parametrize("name", [".", "..", ""])
def test_sanitize_never_returns_a_relative_directory_name(name):
    sanitized = sanitize_filename(name)

    assert sanitized not in (".", "..", "")
    assert sanitize_filename(sanitized) == sanitized


def test_dot_names_stay_inside_music_dir(tmp_path):
    track = Track(id="T1", title="..", artist="..", album=".")

    path = get_track_path(tmp_path, track)

    assert path.resolve().is_relative_to(tmp_path.resolve())
    assert path.parent.parent.parent == tmp_path


def test_long_title_keeps_extension_within_name_limit(tmp_path):
    track = Track(id="T1", title="x" * 300, artist="A", album="B")

    name = get_track_path(tmp_path, track).name

    assert name.endswith(".mp3")
    assert len(name.encode("utf-8")) <= 255


def test_long_titles_sharing_a_prefix_get_distinct_paths(tmp_path):
    prefix = "y" * 260
    first = Track(id="T1", title=prefix + " part one", artist="A", album="B")
    second = Track(id="T2", title=prefix + " part two", artist="A", album="B")

    assert get_track_path(tmp_path, first) != get_track_path(tmp_path, second)


def test_long_multibyte_title_fits_byte_limit(tmp_path):
    track = Track(id="T9", title="é" * 200, artist="A", album="B")

    name = get_track_path(tmp_path, track).name

    assert name.endswith(" [T9].mp3")
    assert len(name.encode("utf-8")) <= 255
