import pytest
from unittest.mock import AsyncMock, MagicMock

from studybeats.core.errors import ProviderAuthError, ProviderUnavailable
from studybeats.schemas.spotify import SpotifyPage, SpotifyPlaylistTrackItem
from studybeats.services.fallback_catalog import FALLBACK_PLAYLISTS, get_fallback_playlists
from studybeats.services.recommendation_resolver import RecommendationResolver
from studybeats.services.selectors import PERSONALIZED_PROFILE, Mood, SelectorKind, resolve_profile
from tests.factories import make_playlist, make_tracks


def track_page(tracks):
    return SpotifyPage[SpotifyPlaylistTrackItem](
        items=[SpotifyPlaylistTrackItem(track=t) for t in tracks],
        total=len(tracks)
    )


@pytest.fixture
def rage():
    return resolve_profile(SelectorKind.MOOD, "rage")


@pytest.mark.asyncio
async def test_seed_recommendations_win(mock_spotify_client, rage):
    mock_spotify_client.get_recommendations.return_value = make_tracks(24)

    playlists = await RecommendationResolver(mock_spotify_client, tracks_per_playlist=6).resolve(rage, 4)

    assert len(playlists) == 4
    assert all(p.source == "recommendation" for p in playlists)
    assert [len(p.tracks) for p in playlists] == [6, 6, 6, 6]
    kwargs = mock_spotify_client.get_recommendations.call_args.kwargs
    assert kwargs["seed_genres"] == ("rock", "metal")
    assert kwargs["limit"] == 24
    assert kwargs["target_energy"] == 0.9
    mock_spotify_client.search_playlists.assert_not_called()
    mock_spotify_client.search_tracks.assert_not_called()


@pytest.mark.asyncio
async def test_falls_through_to_playlist_search(mock_spotify_client, rage):
    mock_spotify_client.get_recommendations.side_effect = ProviderUnavailable("404")
    mock_spotify_client.search_playlists.return_value = [make_playlist(f"p{i}") for i in range(1, 4)]
    mock_spotify_client.get_playlist_tracks_page.return_value = track_page(make_tracks(8))

    playlists = await RecommendationResolver(mock_spotify_client, tracks_per_playlist=6).resolve(rage, 4)

    assert [p.id for p in playlists] == ["p1", "p2", "p3"]
    assert all(len(p.tracks) == 6 for p in playlists)
    mock_spotify_client.search_playlists.assert_awaited_once_with("intense rock study", limit=4)
    mock_spotify_client.search_tracks.assert_not_called()


@pytest.mark.asyncio
async def test_hydration_failure_keeps_playlist_without_tracks(mock_spotify_client, rage):
    mock_spotify_client.get_recommendations.return_value = []
    mock_spotify_client.search_playlists.return_value = [make_playlist("p1"), make_playlist("p2")]

    async def page(playlist_id, limit):
        if playlist_id == "p1":
            raise ProviderUnavailable("timeout")
        return track_page(make_tracks(2))

    mock_spotify_client.get_playlist_tracks_page.side_effect = page

    playlists = await RecommendationResolver(mock_spotify_client).resolve(rage, 4)

    assert [p.id for p in playlists] == ["p1", "p2"]
    assert playlists[0].tracks == []
    assert len(playlists[1].tracks) == 2


@pytest.mark.asyncio
async def test_falls_through_to_track_search(mock_spotify_client, rage):
    mock_spotify_client.get_recommendations.side_effect = ProviderUnavailable()
    mock_spotify_client.search_playlists.return_value = []
    mock_spotify_client.search_tracks.return_value = make_tracks(12)

    playlists = await RecommendationResolver(mock_spotify_client, tracks_per_playlist=6).resolve(rage, 4)

    assert len(playlists) == 4
    assert all(p.source == "search" for p in playlists)
    mock_spotify_client.search_tracks.assert_awaited_once_with("intense rock study", limit=24)


@pytest.mark.asyncio
async def test_all_strategies_fail_serves_static_catalog(mock_spotify_client, rage):
    mock_spotify_client.get_recommendations.side_effect = ProviderUnavailable()
    mock_spotify_client.search_playlists.side_effect = ProviderUnavailable()
    mock_spotify_client.search_tracks.side_effect = ProviderAuthError()

    playlists = await RecommendationResolver(mock_spotify_client).resolve(rage, 4)

    assert playlists == get_fallback_playlists(4)
    assert [p.id for p in playlists] == [entry["id"] for entry in FALLBACK_PLAYLISTS]
    assert all(p.source == "fallback" for p in playlists)


@pytest.mark.asyncio
async def test_static_catalog_respects_limit(mock_spotify_client, rage):
    mock_spotify_client.get_recommendations.return_value = []
    mock_spotify_client.search_playlists.return_value = []
    mock_spotify_client.search_tracks.return_value = []

    playlists = await RecommendationResolver(mock_spotify_client).resolve(rage, 2)

    assert len(playlists) == 2


@pytest.mark.asyncio
async def test_unknown_mood_uses_default_profile(mock_spotify_client):
    mock_spotify_client.get_recommendations.return_value = make_tracks(4)
    profile = resolve_profile(SelectorKind.MOOD, "not-a-mood")

    playlists = await RecommendationResolver(mock_spotify_client).resolve(profile, 4)

    assert len(playlists) == 4
    assert mock_spotify_client.get_recommendations.call_args.kwargs["seed_genres"] == ("study",)


@pytest.mark.asyncio
async def test_personalized_seeds_from_top_tracks(mock_spotify_client):
    mock_spotify_client.get_top_tracks.return_value = make_tracks(5, prefix="top")
    mock_spotify_client.get_recommendations.return_value = make_tracks(8)

    playlists = await RecommendationResolver(mock_spotify_client, tracks_per_playlist=2).resolve(PERSONALIZED_PROFILE, 4)

    assert len(playlists) == 4
    kwargs = mock_spotify_client.get_recommendations.call_args.kwargs
    assert kwargs["seed_tracks"] == ["top1", "top2"]
    assert not kwargs["seed_genres"]


@pytest.mark.asyncio
async def test_personalized_without_history_searches(mock_spotify_client):
    mock_spotify_client.get_top_tracks.return_value = []
    mock_spotify_client.search_playlists.return_value = [make_playlist("p1")]
    mock_spotify_client.get_playlist_tracks_page.return_value = track_page(make_tracks(1))

    playlists = await RecommendationResolver(mock_spotify_client).resolve(PERSONALIZED_PROFILE, 4)

    assert [p.id for p in playlists] == ["p1"]
    mock_spotify_client.get_recommendations.assert_not_called()
    mock_spotify_client.search_playlists.assert_awaited_once_with("study focus", limit=4)


@pytest.mark.asyncio
async def test_custom_strategy_order(rage):
    first = AsyncMock(side_effect=ProviderUnavailable())
    second = AsyncMock(return_value=get_fallback_playlists(1))
    never = AsyncMock()
    resolver = RecommendationResolver(
        MagicMock(),
        strategies=(("first", first), ("second", second), ("never", never)),
        tracks_per_playlist=3
    )

    playlists = await resolver.resolve(rage, 3)

    assert [p.id for p in playlists] == ["fallback-deep-focus"]
    first.assert_awaited_once()
    second.assert_awaited_once()
    never.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("mood", [m.value for m in Mood] + ["unknown"])
@pytest.mark.parametrize("spotify_up", [True, False])
async def test_every_mood_resolves_to_bounded_non_empty_list(mock_spotify_client, mood, spotify_up):
    if spotify_up:
        mock_spotify_client.get_recommendations.return_value = make_tracks(30)
    else:
        mock_spotify_client.get_recommendations.side_effect = ProviderUnavailable()
        mock_spotify_client.search_playlists.side_effect = ProviderUnavailable()
        mock_spotify_client.search_tracks.side_effect = ProviderUnavailable()
    profile = resolve_profile(SelectorKind.MOOD, mood)

    playlists = await RecommendationResolver(mock_spotify_client).resolve(profile, 3)

    assert 0 < len(playlists) <= 3
