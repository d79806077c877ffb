"""Clients for the Spotify accounts service and the Spotify Web API."""
import asyncio
from base64 import b64encode
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, TypeVar
from urllib.parse import urlencode

import aiohttp
import requests
import spotipy
from pydantic import BaseModel, ValidationError as SchemaError
from spotipy.exceptions import SpotifyException

from studybeats.core.config import Settings, get_settings
from studybeats.core.errors import ProviderAuthError, ProviderUnavailable, TokenRejected
from studybeats.schemas.spotify import (
    SpotifyAlbum,
    SpotifyPage,
    SpotifyPlayHistory,
    SpotifyPlaylist,
    SpotifyPlaylistTrackItem,
    SpotifyRecommendations,
    SpotifySavedAlbum,
    SpotifyTokenInfo,
    SpotifyTrack,
    SpotifyUser,
)
from studybeats.utils.logging import setup_logger

logger = setup_logger(__name__)

M = TypeVar('M', bound=BaseModel)

SPOTIFY_ACCOUNTS_URL = "https://accounts.spotify.com"
SPOTIFY_SCOPES = [
    'user-read-private',
    'user-read-email',
    'user-read-recently-played',
    'user-library-read',
    'user-top-read',
    'playlist-read-private'
]

# Spotify API limits
MAX_SEARCH_LIMIT = 50
MAX_RECOMMENDATION_LIMIT = 100
MAX_PLAYLIST_PAGE = 100


def raise_for_token_error(status: int, payload: Any) -> None:
    """
    Translate a token endpoint response status into our error taxonomy.

    A 400 means the grant itself (code or refresh token) was refused. Anything
    else that is not a 200 is treated as the accounts service being unusable,
    which includes a 401 for bad client credentials.
    """
    if status == 200:
        return

    error_code = payload.get('error') if isinstance(payload, dict) else None
    description = payload.get('error_description') if isinstance(payload, dict) else None
    message = description or error_code or f"HTTP {status}"

    if status == 400:
        raise TokenRejected(f"Spotify rejected the grant: {message}", error_code=error_code)
    raise ProviderUnavailable(f"Spotify token endpoint failed: {message}")


class SpotifyAuthClient:
    """OAuth authorization-code flow against accounts.spotify.com."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.client_id = settings.SPOTIFY_CLIENT_ID
        self.client_secret = settings.SPOTIFY_CLIENT_SECRET
        self.redirect_uri = settings.SPOTIFY_REDIRECT_URI
        self.timeout = settings.SPOTIFY_REQUEST_TIMEOUT

    def _require_credentials(self) -> None:
        if not self.client_id or not self.client_secret:
            raise ProviderUnavailable("Spotify client credentials are not configured")

    @property
    def auth_header(self) -> str:
        credentials = f"{self.client_id}:{self.client_secret}"
        return b64encode(credentials.encode()).decode()

    def get_authorize_url(self, state: Optional[str] = None) -> str:
        """Build the Spotify authorize URL for the fixed scope set."""
        if not self.client_id:
            raise ProviderUnavailable("Spotify client ID not configured")

        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(SPOTIFY_SCOPES),
            "show_dialog": "true"
        }
        if state:
            params["state"] = state
        return f"{SPOTIFY_ACCOUNTS_URL}/authorize?{urlencode(params)}"

    async def exchange_code(self, code: str) -> SpotifyTokenInfo:
        """Exchange authorization code for access and refresh tokens."""
        return await self._request_token({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri
        })

    async def refresh_access_token(self, refresh_token: str) -> SpotifyTokenInfo:
        """Trade a refresh token for a new access token."""
        return await self._request_token({
            "grant_type": "refresh_token",
            "refresh_token": refresh_token
        })

    async def _request_token(self, data: Dict[str, str]) -> SpotifyTokenInfo:
        self._require_credentials()
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.post(
                    f"{SPOTIFY_ACCOUNTS_URL}/api/token",
                    headers={
                        "Authorization": f"Basic {self.auth_header}",
                        "Content-Type": "application/x-www-form-urlencoded"
                    },
                    data=data
                ) as response:
                    try:
                        payload = await response.json(content_type=None)
                    except ValueError:
                        payload = {}
                    if response.status != 200:
                        logger.error(f"Spotify {data['grant_type']} request failed: {response.status} {payload}")
                    raise_for_token_error(response.status, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error reaching Spotify token endpoint: {str(e)}")
            raise ProviderUnavailable("Could not reach Spotify accounts service", original_error=e) from e

        try:
            return SpotifyTokenInfo.model_validate(payload)
        except SchemaError as e:
            raise ProviderUnavailable("Malformed token response from Spotify", original_error=e) from e


class SpotifyClient:
    """
    Spotify Web API client bound to a single access token.

    Built per request so that no token is shared between users. Spotipy is
    blocking, so every call runs in the default executor with the configured
    request timeout.
    """

    def __init__(
        self,
        access_token: str,
        settings: Optional[Settings] = None,
        sp: Optional[spotipy.Spotify] = None
    ):
        settings = settings or get_settings()
        self.track_page_cap = settings.SPOTIFY_TRACK_PAGE_CAP
        self.sp = sp or spotipy.Spotify(
            auth=access_token,
            requests_timeout=settings.SPOTIFY_REQUEST_TIMEOUT,
            retries=settings.SPOTIFY_MAX_RETRIES,
            status_retries=settings.SPOTIFY_MAX_RETRIES
        )

    async def _run_sync(self, func, *args, **kwargs):
        """Run a synchronous function in an async context."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def _call(self, operation: str, func: Callable, *args, **kwargs) -> Any:
        try:
            return await self._run_sync(func, *args, **kwargs)
        except SpotifyException as e:
            if e.http_status == 401:
                raise ProviderAuthError(f"Spotify rejected the access token during {operation}") from e
            logger.warning(f"Spotify {operation} failed: {e.http_status} {e.msg}")
            raise ProviderUnavailable(
                f"Spotify {operation} failed with status {e.http_status}",
                original_error=e
            ) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Spotify {operation} request error: {str(e)}")
            raise ProviderUnavailable(f"Spotify {operation} request failed", original_error=e) from e

    @staticmethod
    def _decode(model: Type[M], payload: Any, operation: str) -> M:
        try:
            return model.model_validate(payload if payload is not None else {})
        except SchemaError as e:
            logger.warning(f"Malformed Spotify {operation} payload: {e.error_count()} errors")
            raise ProviderUnavailable(f"Malformed Spotify {operation} response", original_error=e) from e

    async def _paginate(
        self,
        operation: str,
        page_model: Type[SpotifyPage],
        payload: Optional[dict],
        extract: Callable[[Any], Optional[SpotifyTrack]],
        cap: int
    ) -> List[SpotifyTrack]:
        """Follow ``next`` cursors, collecting playable tracks until ``cap``."""
        tracks: List[SpotifyTrack] = []
        while payload is not None:
            page = self._decode(page_model, payload, operation)
            for item in page.present_items():
                track = extract(item)
                if track is not None and track.is_playable_track:
                    tracks.append(track)
                    if len(tracks) >= cap:
                        return tracks
            if not page.next:
                break
            payload = await self._call(operation, self.sp.next, payload)
        return tracks

    # =========================================================================
    # PROFILE AND LIBRARY
    # =========================================================================

    async def get_current_user(self) -> SpotifyUser:
        payload = await self._call("profile lookup", self.sp.current_user)
        return self._decode(SpotifyUser, payload, "profile lookup")

    async def get_top_tracks(self, limit: int = 5, time_range: str = "medium_term") -> List[SpotifyTrack]:
        payload = await self._call(
            "top tracks", self.sp.current_user_top_tracks, limit=limit, time_range=time_range
        )
        page = self._decode(SpotifyPage[SpotifyTrack], payload, "top tracks")
        return [t for t in page.present_items() if t.is_playable_track]

    async def get_recently_played(self, limit: int = 4) -> List[SpotifyTrack]:
        payload = await self._call("recently played", self.sp.current_user_recently_played, limit=limit)
        page = self._decode(SpotifyPage[SpotifyPlayHistory], payload, "recently played")
        return [
            item.track for item in page.present_items()
            if item.track is not None and item.track.is_playable_track
        ]

    async def get_saved_albums(self, limit: int = 4) -> List[SpotifyAlbum]:
        payload = await self._call("saved albums", self.sp.current_user_saved_albums, limit=limit)
        page = self._decode(SpotifyPage[SpotifySavedAlbum], payload, "saved albums")
        return [item.album for item in page.present_items()]

    # =========================================================================
    # DISCOVERY
    # =========================================================================

    async def get_recommendations(
        self,
        seed_genres: Optional[Sequence[str]] = None,
        seed_tracks: Optional[Sequence[str]] = None,
        limit: int = 20,
        target_energy: Optional[float] = None,
        target_valence: Optional[float] = None
    ) -> List[SpotifyTrack]:
        """Seeded recommendations; Spotify allows at most five seeds in total."""
        tunables = {}
        if target_energy is not None:
            tunables['target_energy'] = target_energy
        if target_valence is not None:
            tunables['target_valence'] = target_valence

        payload = await self._call(
            "recommendations",
            self.sp.recommendations,
            seed_genres=list(seed_genres) if seed_genres else None,
            seed_tracks=list(seed_tracks) if seed_tracks else None,
            limit=min(limit, MAX_RECOMMENDATION_LIMIT),
            **tunables
        )
        result = self._decode(SpotifyRecommendations, payload, "recommendations")
        return [t for t in result.tracks if t is not None and t.is_playable_track]

    async def search_playlists(self, query: str, limit: int = 4) -> List[SpotifyPlaylist]:
        payload = await self._call(
            "playlist search", self.sp.search, q=query, type="playlist", limit=min(limit, MAX_SEARCH_LIMIT)
        )
        page = self._decode(SpotifyPage[SpotifyPlaylist], (payload or {}).get('playlists'), "playlist search")
        return page.present_items()

    async def search_tracks(self, query: str, limit: int = 24) -> List[SpotifyTrack]:
        payload = await self._call(
            "track search", self.sp.search, q=query, type="track", limit=min(limit, MAX_SEARCH_LIMIT)
        )
        page = self._decode(SpotifyPage[SpotifyTrack], (payload or {}).get('tracks'), "track search")
        return [t for t in page.present_items() if t.is_playable_track]

    # =========================================================================
    # PLAYLIST AND ALBUM TRACKS
    # =========================================================================

    async def get_playlist(self, playlist_id: str) -> SpotifyPlaylist:
        """Playlist metadata without its track listing."""
        payload = await self._call(
            "playlist lookup",
            self.sp.playlist,
            playlist_id,
            fields="id,name,description,uri,images,owner(id,display_name)"
        )
        return self._decode(SpotifyPlaylist, payload, "playlist lookup")

    async def get_playlist_tracks_page(
        self,
        playlist_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> SpotifyPage[SpotifyPlaylistTrackItem]:
        payload = await self._call(
            "playlist tracks",
            self.sp.playlist_items,
            playlist_id,
            limit=min(limit, MAX_PLAYLIST_PAGE),
            offset=offset,
            additional_types=("track",)
        )
        return self._decode(SpotifyPage[SpotifyPlaylistTrackItem], payload, "playlist tracks")

    async def get_all_playlist_tracks(self, playlist_id: str, cap: Optional[int] = None) -> List[SpotifyTrack]:
        """All playable tracks of a playlist, following pagination up to ``cap``."""
        cap = cap or self.track_page_cap
        first = await self._call(
            "playlist tracks",
            self.sp.playlist_items,
            playlist_id,
            limit=min(cap, MAX_PLAYLIST_PAGE),
            offset=0,
            additional_types=("track",)
        )
        return await self._paginate(
            "playlist tracks", SpotifyPage[SpotifyPlaylistTrackItem], first, lambda item: item.track, cap
        )

    async def get_album(self, album_id: str, cap: Optional[int] = None) -> SpotifyAlbum:
        """Album with its full track listing, following pagination up to ``cap``."""
        cap = cap or self.track_page_cap
        payload = await self._call("album lookup", self.sp.album, album_id)
        album = self._decode(SpotifyAlbum, payload, "album lookup")
        tracks = await self._paginate(
            "album tracks", SpotifyPage[SpotifyTrack], payload.get('tracks'), lambda item: item, cap
        )
        total = album.tracks.total if album.tracks else len(tracks)
        return album.model_copy(update={'tracks': SpotifyPage[SpotifyTrack](items=tracks, total=total)})
