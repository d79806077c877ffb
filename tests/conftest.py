"""Test configuration and fixtures."""

import os

# Settings are cached on first use, so the environment is fixed before any import
os.environ["JWT_SECRET_KEY"] = "test_secret_key"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SPOTIFY_CLIENT_ID"] = "test_client_id"
os.environ["SPOTIFY_CLIENT_SECRET"] = "test_client_secret"
os.environ["SPOTIFY_REDIRECT_URI"] = "http://localhost:3000/callback"

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studybeats.api.deps import get_spotify_client
from studybeats.auth import create_access_token, hash_password
from studybeats.db.session import Base, get_db
from studybeats.main import app
from studybeats.models.user import User
from studybeats.services.spotify_client import SpotifyAuthClient, SpotifyClient

# In-memory database shared by every connection of a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client using the test database."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session):
    """Local account without a Spotify link."""
    user = User(username="student", password_hash=hash_password("secret123"))
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def spotify_user(db_session):
    """Account with linked Spotify credentials."""
    user = User(username="listener", password_hash=hash_password("secret123"))
    user.link_spotify("spotify-listener", "access-token-1", "refresh-token-1")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def auth_headers(test_user):
    """Get auth headers for the local user."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture
def spotify_auth_headers(spotify_user):
    """Get auth headers for the Spotify-linked user."""
    return {"Authorization": f"Bearer {create_access_token(spotify_user.id)}"}


@pytest.fixture
def mock_spotify_client():
    """SpotifyClient double; its async methods are AsyncMocks."""
    return MagicMock(spec=SpotifyClient)


@pytest.fixture
def mock_auth_client():
    """SpotifyAuthClient double for the token endpoint."""
    return MagicMock(spec=SpotifyAuthClient)


@pytest.fixture
def spotify_api(client, mock_spotify_client):
    """Route Spotify-backed endpoints to the mock client."""
    app.dependency_overrides[get_spotify_client] = lambda: mock_spotify_client
    return client
