"""Normalized playlist/track shapes returned to the frontend."""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Track(CamelModel):
    id: Optional[str] = None
    title: str
    artist: str
    image: Optional[str] = None
    duration_ms: int = 0
    preview_url: Optional[str] = None
    uri: Optional[str] = None


class Playlist(CamelModel):
    id: str
    title: str
    artist: str
    image: Optional[str] = None
    description: str = ""
    tracks: List[Track] = []
    source: str = "playlist"


class PlaylistTracksPage(CamelModel):
    tracks: List[Track] = []
    total: int = 0
    limit: int
    offset: int


class MoodRequest(CamelModel):
    mood: str
    limit: Optional[int] = Field(default=None, ge=1, le=20)


class WorkloadRequest(CamelModel):
    workload: str
    limit: Optional[int] = Field(default=None, ge=1, le=20)


class FocusRequest(CamelModel):
    focus_level: str
    study_hours: float = Field(default=1, gt=0, le=24)
    limit: Optional[int] = Field(default=None, ge=1, le=20)
