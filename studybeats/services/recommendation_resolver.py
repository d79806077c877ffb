"""
Recommendation resolution chain.

Strategies run in a fixed order against a per-request SpotifyClient:

1. seed recommendations (genres, or the user's top tracks when personalized)
2. playlist search with preview hydration
3. track search partitioned into virtual playlists
4. the static catalog

Each attempt produces a StrategyResult. The first attempt that succeeds with a
non-empty list wins. Provider failures never escape the resolver.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from studybeats.core.config import get_settings
from studybeats.schemas.playlist import Playlist
from studybeats.schemas.spotify import SpotifyPlaylist, SpotifyTrack
from studybeats.services.fallback_catalog import get_fallback_playlists
from studybeats.services.formatter import build_virtual_playlists, format_playlist
from studybeats.services.selectors import StudyProfile
from studybeats.services.spotify_client import SpotifyClient
from studybeats.utils.logging import setup_logger

logger = setup_logger(__name__)

# Spotify accepts at most five seeds; the personalized chain uses two
PERSONALIZED_SEED_TRACKS = 2
MAX_SEARCH_TRACKS = 50


@dataclass
class ResolveRequest:
    profile: StudyProfile
    limit: int
    tracks_per_playlist: int


@dataclass
class StrategyResult:
    """Outcome of one strategy: either playlists or the error that stopped it."""
    strategy: str
    playlists: List[Playlist] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and bool(self.playlists)


Strategy = Callable[[SpotifyClient, ResolveRequest], Awaitable[List[Playlist]]]


async def seed_recommendations(client: SpotifyClient, request: ResolveRequest) -> List[Playlist]:
    profile = request.profile
    seed_genres: Sequence[str] = profile.seed_genres
    seed_tracks: Sequence[str] = profile.seed_tracks

    if profile.is_personalized and not seed_tracks:
        top_tracks = await client.get_top_tracks(limit=5)
        seed_tracks = [t.id for t in top_tracks[:PERSONALIZED_SEED_TRACKS]]
        seed_genres = ()
        if not seed_tracks:
            logger.info("No listening history to seed personalized recommendations")
            return []

    tracks = await client.get_recommendations(
        seed_genres=seed_genres,
        seed_tracks=seed_tracks,
        limit=request.limit * request.tracks_per_playlist,
        target_energy=profile.target_energy,
        target_valence=profile.target_valence
    )
    return build_virtual_playlists(
        tracks,
        request.limit,
        title=profile.label,
        description=profile.description,
        source="recommendation",
        id_prefix="recommended"
    )


async def _hydrate(client: SpotifyClient, playlist: SpotifyPlaylist, count: int) -> Playlist:
    try:
        page = await client.get_playlist_tracks_page(playlist.id, limit=count)
    except Exception as e:
        logger.warning(f"Could not load preview tracks for playlist {playlist.id}: {str(e)}")
        return format_playlist(playlist, tracks=[])

    tracks: List[SpotifyTrack] = [
        item.track for item in page.present_items()
        if item.track is not None and item.track.is_playable_track
    ]
    return format_playlist(playlist, tracks=tracks[:count])


async def playlist_search(client: SpotifyClient, request: ResolveRequest) -> List[Playlist]:
    playlists = await client.search_playlists(request.profile.search_query, limit=request.limit)
    playlists = playlists[:request.limit]
    if not playlists:
        return []

    # Hydrations are independent; gather keeps input order
    return list(await asyncio.gather(*(
        _hydrate(client, playlist, request.tracks_per_playlist) for playlist in playlists
    )))


async def track_search(client: SpotifyClient, request: ResolveRequest) -> List[Playlist]:
    profile = request.profile
    tracks = await client.search_tracks(
        profile.search_query,
        limit=min(request.limit * request.tracks_per_playlist, MAX_SEARCH_TRACKS)
    )
    return build_virtual_playlists(
        tracks,
        request.limit,
        title=profile.label,
        description=profile.description,
        source="search",
        id_prefix="search"
    )


DEFAULT_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("seed_recommendations", seed_recommendations),
    ("playlist_search", playlist_search),
    ("track_search", track_search),
)


class RecommendationResolver:
    """Runs the fallback chain for one request."""

    def __init__(
        self,
        client: SpotifyClient,
        strategies: Sequence[Tuple[str, Strategy]] = DEFAULT_STRATEGIES,
        tracks_per_playlist: Optional[int] = None
    ):
        self.client = client
        self.strategies = strategies
        self.tracks_per_playlist = tracks_per_playlist or get_settings().PREVIEW_TRACKS_PER_PLAYLIST

    async def _attempt(self, name: str, strategy: Strategy, request: ResolveRequest) -> StrategyResult:
        try:
            playlists = await strategy(self.client, request)
        except Exception as e:
            logger.warning(f"Strategy {name} failed for {request.profile.label!r}: {type(e).__name__}: {str(e)}")
            return StrategyResult(strategy=name, error=e)
        return StrategyResult(strategy=name, playlists=playlists[:request.limit])

    async def resolve(self, profile: StudyProfile, limit: Optional[int] = None) -> List[Playlist]:
        """Return between 1 and ``limit`` playlists; never raises for provider trouble."""
        limit = max(limit or get_settings().DEFAULT_RESULT_LIMIT, 1)
        request = ResolveRequest(profile=profile, limit=limit, tracks_per_playlist=self.tracks_per_playlist)

        for name, strategy in self.strategies:
            result = await self._attempt(name, strategy, request)
            if result.succeeded:
                logger.info(f"Resolved {len(result.playlists)} playlists for {profile.label!r} via {name}")
                return result.playlists
            if result.error is None:
                logger.info(f"Strategy {name} returned nothing for {profile.label!r}")

        logger.warning(f"All Spotify strategies failed for {profile.label!r}, serving static catalog")
        return get_fallback_playlists(limit)
