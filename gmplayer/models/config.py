"""
Pydantic model for application settings.
Provides validation for the credentials file and its optional tuning keys.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

PLACEHOLDER_EMAIL = "add_your_email_here"
PLACEHOLDER_PASSWORD = "add_your_password_here"

DEFAULT_API_URL = "http://localhost:8080/sj/v2.5/"
DEFAULT_PLAYER = "mplayer"


def default_music_dir() -> Path:
    """Root directory for downloaded music."""
    return Path.home() / "Music" / "gmplayer"


class Settings(BaseModel):
    """A validated settings model, built once and handed to each collaborator."""

    # Credentials
    email: str = ""
    password: str = ""

    # Remote catalog
    api_url: str = DEFAULT_API_URL
    request_timeout: float = 30.0

    # Storage
    music_dir: Path = Field(default_factory=default_music_dir)
    max_workers: int = 4
    reuse_existing: bool = True
    atomic_writes: bool = True

    # Playback
    player: str = DEFAULT_PLAYER

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @property
    def is_placeholder(self) -> bool:
        """True while the credentials have not been edited by the user."""
        return (
            not self.email
            or not self.password
            or self.email == PLACEHOLDER_EMAIL
            or self.password == PLACEHOLDER_PASSWORD
        )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Ensures the catalog URL is absolute and ends with a slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must start with http:// or https://")
        return v if v.endswith("/") else v + "/"

    @field_validator("music_dir")
    @classmethod
    def expand_music_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Keeps concurrent downloads within what the catalog tolerates."""
        if v < 1 or v > 8:
            raise ValueError("Max workers must be between 1 and 8.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be positive.")
        return v
