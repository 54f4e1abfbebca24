"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class GmplayerError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(GmplayerError):
    """Raised when the settings file is missing, unedited or invalid."""


class AuthenticationError(GmplayerError):
    """Raised when the catalog rejects the stored credentials."""


class SearchError(GmplayerError):
    """Raised when a search fails or returns no usable results."""


class SelectionError(GmplayerError):
    """Raised when the operator picks an index outside the listed results."""


class DownloadError(GmplayerError):
    """Raised when a track or playlist could not be written to local storage."""


class PlayerSpawnError(GmplayerError):
    """Raised when the external audio player cannot be started."""
