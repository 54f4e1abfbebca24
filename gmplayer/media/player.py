"""
Launches the external audio player and relays its playback progress.
"""

import asyncio
import logging
import re
import sys
import time
from pathlib import Path
from typing import BinaryIO, List, Optional

from rich.console import Console
from rich.markup import escape

from gmplayer.exceptions import PlayerSpawnError
from gmplayer.utils.formatting import format_duration

log = logging.getLogger(__name__)

AUDIO_ENGINES = {
    "linux": "alsa",
    "darwin": "coreaudio",
}


def get_audio_engine(platform: Optional[str] = None) -> Optional[str]:
    """Returns the `-ao` driver for a platform, or None when it has no mapping."""
    platform = platform or sys.platform
    if platform.startswith("linux"):
        platform = "linux"
    return AUDIO_ENGINES.get(platform)


def build_player_args(
    path: Path, is_playlist: bool = False, platform: Optional[str] = None
) -> List[str]:
    """Builds `-ao <engine> [-playlist] <path>`."""
    args = []
    if engine := get_audio_engine(platform):
        args += ["-ao", engine]
    if is_playlist:
        args.append("-playlist")
    args.append(str(path))
    return args


class ProgressFilter:
    """Swallows the player's startup banner until its first progress line."""

    PROGRESS_MARKER = re.compile(rb"(?:^|[\r\n])(A:)")

    def __init__(self) -> None:
        self.started = False

    def feed(self, chunk: bytes) -> bytes:
        """Returns the part of `chunk` that should reach the terminal."""
        if self.started:
            return chunk
        match = self.PROGRESS_MARKER.search(chunk)
        if not match:
            return b""
        self.started = True
        return chunk[match.start(1):]


class Player:
    """
    Runs the external player on a file or playlist.

    The child inherits our stdin, so the operator's key presses (seek, pause,
    quit) go straight to it. Its stdout is relayed once playback starts.
    """

    READ_SIZE = 4096

    def __init__(
        self,
        binary: str = "mplayer",
        console: Optional[Console] = None,
        output: Optional[BinaryIO] = None,
        platform: Optional[str] = None,
    ):
        self.binary = binary
        self.console = console or Console()
        self.output = output or sys.stdout.buffer
        self.platform = platform

    async def play(self, path: Path, is_playlist: bool = False) -> int:
        """
        Plays `path` and waits for the player to exit.

        Returns:
            The player's exit code.

        Raises:
            PlayerSpawnError: If the player binary cannot be started.
        """
        args = build_player_args(path, is_playlist, self.platform)
        self.console.print(f"Playing [bold]{escape(Path(path).name)}[/bold]\n")
        log.debug(f"Spawning {self.binary} {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise PlayerSpawnError(
                "There was an error playing your song, "
                f"maybe you need to install {self.binary}?"
            ) from e

        start_time = time.monotonic()
        progress_filter = ProgressFilter()
        while chunk := await process.stdout.read(self.READ_SIZE):
            if relayed := progress_filter.feed(chunk):
                self.output.write(relayed)
                self.output.flush()

        return_code = await process.wait()
        log.debug(
            f"{self.binary} exited with {return_code} after "
            f"{format_duration(time.monotonic() - start_time)}"
        )
        return return_code
