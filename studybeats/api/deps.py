"""Shared route dependencies."""
from fastapi import Depends
from sqlalchemy.orm import Session

from studybeats.auth import get_current_user
from studybeats.core.errors import SpotifyNotConnected
from studybeats.db.session import get_db
from studybeats.models.user import User
from studybeats.services.spotify_client import SpotifyAuthClient, SpotifyClient
from studybeats.services.token_manager import TokenManager


async def get_spotify_client(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> SpotifyClient:
    """A Spotify client for the current user, holding a token Spotify accepts."""
    if not user.has_spotify or not user.access_token:
        raise SpotifyNotConnected()

    manager = TokenManager(db, auth_client=SpotifyAuthClient(), client_factory=SpotifyClient)
    access_token = await manager.get_valid_token(user)
    return SpotifyClient(access_token)
