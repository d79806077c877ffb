from datetime import datetime
from typing import Optional
from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studybeats.db.session import Base


class User(Base):
    """Account record; also the credential store for the linked Spotify tokens."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Spotify linkage
    spotify_id: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    access_token: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    refresh_token: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    has_spotify: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    feedback = relationship("Feedback", back_populates="user")

    def link_spotify(self, spotify_id: str, access_token: str, refresh_token: Optional[str]) -> None:
        """Attach Spotify credentials, keeping a previous refresh token if none was issued."""
        self.spotify_id = spotify_id
        self.access_token = access_token
        if refresh_token:
            self.refresh_token = refresh_token
        self.has_spotify = True

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'username': self.username,
            'hasSpotify': self.has_spotify,
            'spotifyId': self.spotify_id,
        }
