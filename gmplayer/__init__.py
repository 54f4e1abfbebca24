"""
gmplayer: search a music catalog, download tracks and albums, and play them
through mplayer.
"""

__version__ = "1.0.0"
