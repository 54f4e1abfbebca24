"""
Utility for generating extended M3U playlist files.
"""

import logging
import os
from pathlib import Path
from typing import Sequence, Tuple

from mutagen import File as MutagenFile
from mutagen import MutagenError

from gmplayer.exceptions import DownloadError
from gmplayer.models.catalog import Track

log = logging.getLogger(__name__)


def _track_length(track: Track, audio_path: Path) -> int:
    """Length in whole seconds, from metadata or the file itself; -1 if unknown."""
    if track.duration_ms:
        return track.duration_ms // 1000
    try:
        audio = MutagenFile(audio_path)
        if audio and audio.info:
            return int(audio.info.length)
    except (MutagenError, OSError):
        log.debug(f"Could not read length of '{audio_path}'")
    return -1


def write_m3u(playlist_path: Path, entries: Sequence[Tuple[Track, Path]]) -> Path:
    """
    Writes an extended M3U file listing the given tracks in order.

    Paths are stored relative to the playlist's directory.

    Args:
        playlist_path: Where to write the playlist.
        entries: (track, local file path) pairs in playback order.

    Returns:
        The playlist path.
    """
    playlist_dir = playlist_path.parent

    content = ["#EXTM3U"]
    for track, audio_path in entries:
        length = _track_length(track, audio_path)
        content.append(f"#EXTINF:{length},{track.artist} - {track.title}")
        content.append(Path(os.path.relpath(audio_path, playlist_dir)).as_posix())

    try:
        playlist_dir.mkdir(parents=True, exist_ok=True)
        with open(playlist_path, "w", encoding="utf-8") as f:
            f.write("\n".join(content) + "\n")
    except OSError as e:
        raise DownloadError(f"Failed to write playlist file: {e}") from e

    log.debug(f"Generated playlist: '{playlist_path}'")
    return playlist_path
