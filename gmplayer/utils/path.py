"""
Utilities for deriving local storage paths from catalog metadata.
"""

from pathlib import Path

from pathvalidate import sanitize_filename as _sanitize

from gmplayer.models.catalog import Album, Track

SAFE_SEPARATOR = "|"
MAX_NAME_BYTES = 255
RESERVED_NAMES = ("", ".", "..")


def sanitize_filename(filename: str) -> str:
    """
    Replaces every path separator with a literal pipe so the name stays a
    single path component. Applying it twice changes nothing.
    """
    filename = filename.replace("\\", SAFE_SEPARATOR)
    sanitized = _sanitize(filename, replacement_text=SAFE_SEPARATOR, platform="linux")
    if sanitized in RESERVED_NAMES:
        # "." and ".." would point at the parent directories
        return sanitized.replace(".", "_") or "_"
    return sanitized


def _truncate_bytes(name: str, limit: int) -> str:
    return name.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


def build_filename(stem: str, extension: str, unique_tag: str) -> str:
    """
    Joins a sanitized stem and extension within the filesystem's name limit.

    A stem too long to fit is cut and tagged with `unique_tag`, so two long
    names sharing a prefix never end up on the same path.
    """
    stem = sanitize_filename(stem)
    if len(f"{stem}{extension}".encode("utf-8")) > MAX_NAME_BYTES:
        tag = sanitize_filename(f" [{unique_tag}]")
        budget = MAX_NAME_BYTES - len(f"{tag}{extension}".encode("utf-8"))
        stem = _truncate_bytes(stem, budget) + tag
    return f"{stem}{extension}"


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def get_track_filename(track: Track) -> str:
    return build_filename(track.title, ".mp3", track.id)


def get_track_directory(music_dir: Path, track: Track) -> Path:
    return music_dir / sanitize_filename(track.artist) / sanitize_filename(track.album)


def get_track_path(music_dir: Path, track: Track) -> Path:
    """Returns `<music_dir>/<artist>/<album>/<title>.mp3` for a track."""
    return get_track_directory(music_dir, track) / get_track_filename(track)


def get_album_directory(music_dir: Path, album: Album) -> Path:
    return music_dir / sanitize_filename(album.artist) / sanitize_filename(album.name)


def get_playlist_path(music_dir: Path, album: Album) -> Path:
    """Returns `<album dir>/<artist> - <album>.m3u`."""
    return get_album_directory(music_dir, album) / build_filename(
        f"{album.artist} - {album.name}", ".m3u", album.id
    )
