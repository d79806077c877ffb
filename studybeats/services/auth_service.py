"""Account service: local signup/login and Spotify account linking."""
import secrets
from typing import Callable, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studybeats.auth import create_access_token, hash_password, verify_password
from studybeats.core.errors import ProviderAuthError, ProviderUnavailable, TokenRejected, ValidationError
from studybeats.models.user import User
from studybeats.schemas.spotify import SpotifyUser
from studybeats.services.spotify_client import SpotifyAuthClient, SpotifyClient
from studybeats.utils.logging import setup_logger

logger = setup_logger(__name__)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.execute(select(User).filter_by(username=username)).scalar_one_or_none()


def get_user_by_spotify_id(db: Session, spotify_id: str) -> Optional[User]:
    return db.execute(select(User).filter_by(spotify_id=spotify_id)).scalar_one_or_none()


def signup(db: Session, username: str, password: str) -> str:
    """
    Create a local account and return an app token.

    Raises:
        ValidationError: If the username is already taken
    """
    if get_user_by_username(db, username):
        raise ValidationError("Username already exists")

    user = User(username=username, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup
        db.rollback()
        raise ValidationError("Username already exists", original_error=e) from e

    logger.info(f"Created user {user.id} ({username})")
    return create_access_token(user.id)


def login(db: Session, username: str, password: str) -> str:
    """Check local credentials and return an app token."""
    user = get_user_by_username(db, username.strip())
    if not user or not verify_password(password, user.password_hash):
        raise ValidationError("Invalid credentials")
    return create_access_token(user.id)


def _unique_username(db: Session, profile: SpotifyUser) -> str:
    base = f"spotify_{profile.id}"
    candidate = base
    suffix = 1
    while get_user_by_username(db, candidate):
        suffix += 1
        candidate = f"{base}_{suffix}"
    return candidate


async def _authorize(
    code: str,
    auth_client: SpotifyAuthClient,
    client_factory: Callable[[str], SpotifyClient]
):
    """Exchange an authorization code and look up whose account it belongs to."""
    try:
        token_info = await auth_client.exchange_code(code)
    except TokenRejected as e:
        raise ValidationError("Invalid or expired authorization code", original_error=e) from e

    try:
        profile = await client_factory(token_info.access_token).get_current_user()
    except ProviderAuthError as e:
        raise ProviderUnavailable("Spotify rejected a freshly issued access token") from e
    return token_info, profile


async def process_spotify_callback(
    db: Session,
    code: str,
    auth_client: Optional[SpotifyAuthClient] = None,
    client_factory: Optional[Callable[[str], SpotifyClient]] = None
) -> Dict[str, Optional[str]]:
    """
    Sign in with Spotify: create or update the user owning the Spotify account.

    Returns:
        App token plus the Spotify tokens for the frontend
    """
    token_info, profile = await _authorize(code, auth_client or SpotifyAuthClient(), client_factory or SpotifyClient)

    user = get_user_by_spotify_id(db, profile.id)
    if user is None:
        user = User(
            username=_unique_username(db, profile),
            # Spotify-only accounts have no usable local password
            password_hash=hash_password(secrets.token_urlsafe(32))
        )
        db.add(user)
        logger.info(f"Creating user for Spotify account {profile.id}")

    user.link_spotify(profile.id, token_info.access_token, token_info.refresh_token)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent callback for the same account
        db.rollback()
        raise ValidationError("This Spotify account is already being linked", original_error=e) from e

    return {
        "token": create_access_token(user.id),
        "access_token": token_info.access_token,
        "refresh_token": user.refresh_token
    }


async def connect_spotify(
    db: Session,
    user: User,
    code: str,
    auth_client: Optional[SpotifyAuthClient] = None,
    client_factory: Optional[Callable[[str], SpotifyClient]] = None
) -> SpotifyUser:
    """Link a Spotify account to an existing local user."""
    token_info, profile = await _authorize(code, auth_client or SpotifyAuthClient(), client_factory or SpotifyClient)

    owner = get_user_by_spotify_id(db, profile.id)
    if owner is not None and owner.id != user.id:
        raise ValidationError("This Spotify account is already linked to another user")

    user.link_spotify(profile.id, token_info.access_token, token_info.refresh_token)
    db.commit()
    logger.info(f"Linked Spotify account {profile.id} to user {user.id}")
    return profile

