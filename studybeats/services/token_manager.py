"""Spotify access-token lifecycle: validate, refresh on 401, persist."""
from typing import Callable, Optional

from sqlalchemy.orm import Session

from studybeats.core.errors import (
    ProviderAuthError,
    ReauthRequired,
    SpotifyNotConnected,
    TokenRejected,
)
from studybeats.models.user import User
from studybeats.services.spotify_client import SpotifyAuthClient, SpotifyClient
from studybeats.utils.logging import setup_logger, mask_token

logger = setup_logger(__name__)


class TokenManager:
    """
    Guarantees that provider calls use a currently valid access token.

    Validity is checked reactively with one probe of the identity endpoint;
    nothing about expiry is stored. A 401 triggers a single refresh, and the
    refreshed credentials are committed before the token is handed back.

    Concurrent refreshes for the same user are not serialized. Spotify
    tolerates redundant refreshes and the last commit wins.
    """

    def __init__(
        self,
        db: Session,
        auth_client: Optional[SpotifyAuthClient] = None,
        client_factory: Callable[[str], SpotifyClient] = SpotifyClient
    ):
        self.db = db
        self.auth_client = auth_client or SpotifyAuthClient()
        self.client_factory = client_factory

    async def get_valid_token(self, user: User) -> str:
        """
        Return an access token Spotify currently accepts for ``user``.

        Raises:
            SpotifyNotConnected: the user never linked Spotify
            ReauthRequired: the token expired and could not be refreshed
            ProviderUnavailable: Spotify could not be asked (no refresh attempted)
        """
        if not user.has_spotify or not user.access_token:
            raise SpotifyNotConnected()

        client = self.client_factory(user.access_token)
        try:
            await client.get_current_user()
            return user.access_token
        except ProviderAuthError:
            logger.info(f"Access token for user {user.id} was rejected, refreshing")
            return await self.refresh_token(user)

    async def refresh_token(self, user: User) -> str:
        """
        Refresh and persist the user's access token.

        A refused refresh token is cleared so later calls fail fast with
        ReauthRequired instead of asking Spotify again.
        """
        if not user.refresh_token:
            logger.warning(f"User {user.id} has no refresh token, reauthorization required")
            raise ReauthRequired()

        try:
            token_info = await self.auth_client.refresh_access_token(user.refresh_token)
        except TokenRejected as e:
            logger.warning(
                f"Refresh token {mask_token(user.refresh_token)} for user {user.id} "
                f"was rejected: {e.error_code or str(e)}"
            )
            user.refresh_token = None
            self.db.commit()
            raise ReauthRequired(original_error=e) from e

        user.access_token = token_info.access_token
        if token_info.refresh_token:
            logger.info(f"Spotify rotated the refresh token for user {user.id}")
            user.refresh_token = token_info.refresh_token
        self.db.commit()

        logger.info(f"Refreshed Spotify token for user {user.id}: {mask_token(user.access_token)}")
        return user.access_token
