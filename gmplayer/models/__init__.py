"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as settings and catalog entities.
"""

from .catalog import Album, SearchEntry, Track
from .config import Settings

__all__ = ["Album", "SearchEntry", "Settings", "Track"]
