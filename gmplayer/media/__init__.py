"""
Media Layer.

This package is responsible for downloading audio files and handing them to
the external player.
"""

from .downloader import Downloader
from .player import Player

__all__ = ["Downloader", "Player"]
