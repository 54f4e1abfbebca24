"""
Core application flows.

`PlayerSession` wires the catalog client, downloader and player together
for the three things the tool does: play a song, play an album, and shuffle
through the albums in the user's library.
"""

from .session import PlayerSession

__all__ = ["PlayerSession"]
