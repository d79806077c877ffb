"""Typed views of Spotify Web API payloads.

Raw JSON is decoded into these models once, inside the provider client, so the
formatter never touches untyped dictionaries. Every field Spotify may omit or
send as ``null`` is optional here.
"""
from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, field_validator

T = TypeVar('T')


def none_as_empty(v: Any) -> Any:
    """Spotify sends ``null`` for some list fields (images on new playlists)."""
    return [] if v is None else v


class SpotifyModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SpotifyImage(SpotifyModel):
    url: str
    height: Optional[int] = None
    width: Optional[int] = None


class SpotifyArtist(SpotifyModel):
    id: Optional[str] = None
    name: str = ""


class SpotifyOwner(SpotifyModel):
    id: Optional[str] = None
    display_name: Optional[str] = None


class SpotifyAlbumRef(SpotifyModel):
    """Album as embedded in a track object."""
    id: Optional[str] = None
    name: str = ""
    images: List[SpotifyImage] = []
    artists: List[SpotifyArtist] = []

    _lists = field_validator('images', 'artists', mode='before')(none_as_empty)


class SpotifyTrack(SpotifyModel):
    id: Optional[str] = None
    name: str = ""
    type: str = "track"
    uri: Optional[str] = None
    duration_ms: int = 0
    preview_url: Optional[str] = None
    artists: List[SpotifyArtist] = []
    album: Optional[SpotifyAlbumRef] = None

    _lists = field_validator('artists', mode='before')(none_as_empty)

    @property
    def is_playable_track(self) -> bool:
        """Local files have no id and podcast episodes are not tracks."""
        return bool(self.id) and self.type == "track"


class SpotifyPage(SpotifyModel, Generic[T]):
    """Spotify paging object; ``next`` is the cursor to the following page."""
    items: List[Optional[T]] = []
    next: Optional[str] = None
    total: int = 0
    limit: Optional[int] = None
    offset: Optional[int] = None

    _lists = field_validator('items', mode='before')(none_as_empty)

    def present_items(self) -> List[T]:
        return [item for item in self.items if item is not None]


class SpotifyPlaylistTrackItem(SpotifyModel):
    track: Optional[SpotifyTrack] = None
    added_at: Optional[str] = None


class SpotifyPlaylist(SpotifyModel):
    id: str
    name: str = ""
    description: Optional[str] = None
    uri: Optional[str] = None
    images: List[SpotifyImage] = []
    owner: Optional[SpotifyOwner] = None
    # Search results carry only {href, total}; full playlists carry the first page
    tracks: Optional[SpotifyPage[SpotifyPlaylistTrackItem]] = None

    _lists = field_validator('images', mode='before')(none_as_empty)


class SpotifyAlbum(SpotifyModel):
    id: str
    name: str = ""
    uri: Optional[str] = None
    images: List[SpotifyImage] = []
    artists: List[SpotifyArtist] = []
    tracks: Optional[SpotifyPage[SpotifyTrack]] = None

    _lists = field_validator('images', 'artists', mode='before')(none_as_empty)


class SpotifySavedAlbum(SpotifyModel):
    added_at: Optional[str] = None
    album: SpotifyAlbum


class SpotifyPlayHistory(SpotifyModel):
    played_at: Optional[str] = None
    track: Optional[SpotifyTrack] = None


class SpotifyRecommendations(SpotifyModel):
    tracks: List[Optional[SpotifyTrack]] = []

    _lists = field_validator('tracks', mode='before')(none_as_empty)


class SpotifyUser(SpotifyModel):
    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None


class SpotifyTokenInfo(SpotifyModel):
    access_token: str
    token_type: str = "Bearer"
    scope: Optional[str] = None
    expires_in: int = 3600
    refresh_token: Optional[str] = None
