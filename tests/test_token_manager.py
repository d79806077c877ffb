import pytest
from unittest.mock import MagicMock

from studybeats.core.errors import (
    ProviderAuthError,
    ProviderUnavailable,
    ReauthRequired,
    SpotifyNotConnected,
    TokenRejected,
)
from studybeats.schemas.spotify import SpotifyTokenInfo, SpotifyUser
from studybeats.services.spotify_client import SpotifyClient
from studybeats.services.token_manager import TokenManager


@pytest.fixture
def probe():
    """Client returned by the factory for the /me probe."""
    client = MagicMock(spec=SpotifyClient)
    client.get_current_user.return_value = SpotifyUser(id="spotify-listener")
    return client


@pytest.fixture
def manager(db_session, mock_auth_client, probe):
    factory = MagicMock(return_value=probe)
    return TokenManager(db_session, auth_client=mock_auth_client, client_factory=factory)


@pytest.mark.asyncio
async def test_valid_token_is_returned_without_refresh(manager, spotify_user, mock_auth_client):
    token = await manager.get_valid_token(spotify_user)

    assert token == "access-token-1"
    manager.client_factory.assert_called_once_with("access-token-1")
    mock_auth_client.refresh_access_token.assert_not_called()


@pytest.mark.asyncio
async def test_unlinked_user_raises_not_connected(manager, test_user):
    with pytest.raises(SpotifyNotConnected):
        await manager.get_valid_token(test_user)
    manager.client_factory.assert_not_called()


@pytest.mark.asyncio
async def test_expired_token_is_refreshed_once(manager, spotify_user, probe, mock_auth_client, db_session):
    probe.get_current_user.side_effect = ProviderAuthError()
    mock_auth_client.refresh_access_token.return_value = SpotifyTokenInfo(access_token="access-token-2")

    token = await manager.get_valid_token(spotify_user)

    assert token == "access-token-2"
    mock_auth_client.refresh_access_token.assert_awaited_once_with("refresh-token-1")
    db_session.expire_all()
    assert spotify_user.access_token == "access-token-2"
    assert spotify_user.refresh_token == "refresh-token-1"


@pytest.mark.asyncio
async def test_rotated_refresh_token_is_persisted(manager, spotify_user, probe, mock_auth_client, db_session):
    probe.get_current_user.side_effect = ProviderAuthError()
    mock_auth_client.refresh_access_token.return_value = SpotifyTokenInfo(
        access_token="access-token-2",
        refresh_token="refresh-token-2"
    )

    await manager.get_valid_token(spotify_user)

    db_session.expire_all()
    assert spotify_user.refresh_token == "refresh-token-2"


@pytest.mark.asyncio
async def test_rejected_refresh_requires_reauth_and_fails_fast(manager, spotify_user, probe, mock_auth_client, db_session):
    probe.get_current_user.side_effect = ProviderAuthError()
    mock_auth_client.refresh_access_token.side_effect = TokenRejected("invalid_grant", error_code="invalid_grant")

    with pytest.raises(ReauthRequired):
        await manager.get_valid_token(spotify_user)

    db_session.expire_all()
    assert spotify_user.refresh_token is None
    assert spotify_user.access_token == "access-token-1"

    mock_auth_client.refresh_access_token.reset_mock()
    with pytest.raises(ReauthRequired):
        await manager.get_valid_token(spotify_user)
    mock_auth_client.refresh_access_token.assert_not_called()


@pytest.mark.asyncio
async def test_provider_outage_does_not_refresh(manager, spotify_user, probe, mock_auth_client):
    probe.get_current_user.side_effect = ProviderUnavailable("Spotify returned 503")

    with pytest.raises(ProviderUnavailable):
        await manager.get_valid_token(spotify_user)
    mock_auth_client.refresh_access_token.assert_not_called()


@pytest.mark.asyncio
async def test_token_endpoint_outage_keeps_credentials(manager, spotify_user, probe, mock_auth_client, db_session):
    probe.get_current_user.side_effect = ProviderAuthError()
    mock_auth_client.refresh_access_token.side_effect = ProviderUnavailable()

    with pytest.raises(ProviderUnavailable):
        await manager.get_valid_token(spotify_user)

    db_session.expire_all()
    assert spotify_user.refresh_token == "refresh-token-1"


@pytest.mark.asyncio
async def test_missing_refresh_token_requires_reauth(manager, spotify_user, mock_auth_client, db_session):
    spotify_user.refresh_token = None
    db_session.commit()

    with pytest.raises(ReauthRequired):
        await manager.refresh_token(spotify_user)
    mock_auth_client.refresh_access_token.assert_not_called()
