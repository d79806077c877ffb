from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studybeats.api.deps import get_spotify_client
from studybeats.auth import get_current_user
from studybeats.core.config import get_settings
from studybeats.db.session import get_db
from studybeats.models.user import User
from studybeats.schemas.auth import AuthUrlResponse, SpotifyCallbackResponse, SpotifyCodeRequest
from studybeats.schemas.playlist import (
    FocusRequest,
    MoodRequest,
    Playlist,
    PlaylistTracksPage,
    WorkloadRequest,
)
from studybeats.services import auth_service
from studybeats.services.formatter import format_album, format_playlist, format_tracks, playlist_from_track
from studybeats.services.recommendation_resolver import RecommendationResolver
from studybeats.services.selectors import (
    PERSONALIZED_PROFILE,
    SelectorKind,
    focus_profile,
    resolve_profile,
)
from studybeats.services.spotify_client import SpotifyAuthClient, SpotifyClient
from studybeats.utils.logging import setup_logger

logger = setup_logger(__name__)

router = APIRouter()


def _limit(limit: Optional[int]) -> int:
    return limit or get_settings().DEFAULT_RESULT_LIMIT


@router.get("/auth-url", response_model=AuthUrlResponse)
async def auth_url_handler():
    """Spotify authorize URL for the frontend to redirect to."""
    return AuthUrlResponse(authUrl=SpotifyAuthClient().get_authorize_url())


@router.post("/callback", response_model=SpotifyCallbackResponse)
async def callback_handler(body: SpotifyCodeRequest, db: Session = Depends(get_db)):
    """Sign in with Spotify using the authorization code from the redirect."""
    result = await auth_service.process_spotify_callback(db, body.code)
    return SpotifyCallbackResponse(**result)


@router.post("/connect")
async def connect_handler(
    body: SpotifyCodeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Link a Spotify account to the logged-in user."""
    profile = await auth_service.connect_spotify(db, user, body.code)
    return {
        "message": "Spotify connected successfully",
        "spotifyUser": {
            "id": profile.id,
            "displayName": profile.display_name
        }
    }


@router.get("/recently-played", response_model=List[Playlist])
async def recently_played_handler(
    limit: Optional[int] = Query(None, ge=1, le=50),
    client: SpotifyClient = Depends(get_spotify_client)
):
    tracks = await client.get_recently_played(limit=_limit(limit))
    return [playlist_from_track(track) for track in tracks]


@router.get("/liked-albums", response_model=List[Playlist])
async def liked_albums_handler(
    limit: Optional[int] = Query(None, ge=1, le=50),
    client: SpotifyClient = Depends(get_spotify_client)
):
    albums = await client.get_saved_albums(limit=_limit(limit))
    return [format_album(album) for album in albums]


@router.get("/recommendations", response_model=List[Playlist])
async def recommendations_handler(
    limit: Optional[int] = Query(None, ge=1, le=20),
    client: SpotifyClient = Depends(get_spotify_client)
):
    """Personalized picks seeded from the user's top tracks."""
    return await RecommendationResolver(client).resolve(PERSONALIZED_PROFILE, _limit(limit))


@router.post("/mood-playlists", response_model=List[Playlist])
async def mood_playlists_handler(
    body: MoodRequest,
    client: SpotifyClient = Depends(get_spotify_client)
):
    profile = resolve_profile(SelectorKind.MOOD, body.mood)
    return await RecommendationResolver(client).resolve(profile, _limit(body.limit))


@router.post("/workload-playlists", response_model=List[Playlist])
async def workload_playlists_handler(
    body: WorkloadRequest,
    client: SpotifyClient = Depends(get_spotify_client)
):
    profile = resolve_profile(SelectorKind.WORKLOAD, body.workload)
    return await RecommendationResolver(client).resolve(profile, _limit(body.limit))


@router.post("/focus-playlists", response_model=List[Playlist])
async def focus_playlists_handler(
    body: FocusRequest,
    client: SpotifyClient = Depends(get_spotify_client)
):
    profile = focus_profile(body.focus_level, body.study_hours)
    return await RecommendationResolver(client).resolve(profile, _limit(body.limit))


@router.get("/playlist/{playlist_id}/tracks", response_model=PlaylistTracksPage)
async def playlist_tracks_handler(
    playlist_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    client: SpotifyClient = Depends(get_spotify_client)
):
    """One page of a playlist's tracks."""
    page = await client.get_playlist_tracks_page(playlist_id, limit=limit, offset=offset)
    tracks = [
        item.track for item in page.present_items()
        if item.track is not None and item.track.is_playable_track
    ]
    return PlaylistTracksPage(tracks=format_tracks(tracks), total=page.total, limit=limit, offset=offset)


@router.get("/playlist/{playlist_id}", response_model=Playlist)
async def playlist_handler(
    playlist_id: str,
    client: SpotifyClient = Depends(get_spotify_client)
):
    """A playlist with all of its tracks, up to the pagination cap."""
    playlist = await client.get_playlist(playlist_id)
    tracks = await client.get_all_playlist_tracks(playlist_id)
    return format_playlist(playlist, tracks=tracks)


@router.get("/album/{album_id}", response_model=Playlist)
async def album_handler(
    album_id: str,
    client: SpotifyClient = Depends(get_spotify_client)
):
    """An album with all of its tracks, up to the pagination cap."""
    return format_album(await client.get_album(album_id))
