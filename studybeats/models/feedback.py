"""Feedback model for storing user ratings of recommended playlists."""
from datetime import datetime
from typing import Optional
from sqlalchemy import Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studybeats.db.session import Base


class Feedback(Base):
    """Append-only rating of a playlist by a user."""
    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    playlist_id: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="feedback")

    def to_dict(self) -> dict:
        """Convert feedback to dictionary."""
        return {
            'id': self.id,
            'userId': self.user_id,
            'playlistId': self.playlist_id,
            'rating': self.rating,
            'context': self.context,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
