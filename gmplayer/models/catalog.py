"""
Pydantic models for the entities returned by the music catalog.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

# Entry type codes used by the catalog's search endpoint
RESULT_TYPES = {
    "track": "1",
    "album": "3",
}


class Track(BaseModel):
    """A single playable item."""

    id: str = Field(validation_alias=AliasChoices("nid", "storeId", "id"))
    title: str = "Unknown Title"
    artist: str = "Unknown Artist"
    album: str = "Unknown Album"
    album_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("albumId", "album_id")
    )
    track_number: int = Field(
        default=0, validation_alias=AliasChoices("trackNumber", "track_number")
    )
    duration_ms: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("durationMillis", "duration_ms")
    )

    class Config:
        coerce_numbers_to_str = True


class Album(BaseModel):
    """A named, ordered collection of tracks by one artist."""

    id: str = Field(validation_alias=AliasChoices("albumId", "id"))
    artist: str = "Unknown Artist"
    name: str = "Unknown Album"
    tracks: list[Track] = Field(default_factory=list)

    class Config:
        coerce_numbers_to_str = True


class SearchEntry(BaseModel):
    """One row of a search response; carries either a track or an album."""

    type: str
    track: Optional[Track] = None
    album: Optional[Album] = None

    class Config:
        coerce_numbers_to_str = True

    @property
    def title(self) -> str:
        if self.track:
            return self.track.title
        if self.album:
            return self.album.name
        return ""

    @property
    def artist(self) -> str:
        if self.track:
            return self.track.artist
        if self.album:
            return self.album.artist
        return ""
