from typing import Optional
from pydantic import Field

from studybeats.schemas.playlist import CamelModel


class FeedbackCreate(CamelModel):
    playlist_id: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    context: Optional[str] = Field(default=None, max_length=2000)
