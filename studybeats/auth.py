from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from studybeats.core.config import get_settings
from studybeats.core.errors import AuthRequired
from studybeats.db.session import get_db
from studybeats.models.user import User
from studybeats.utils.logging import setup_logger

logger = setup_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    """
    Create a new JWT access token.

    Args:
        user_id: User ID to encode in token
        expires_minutes: Lifetime override, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        JWT access token
    """
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode = {
        "sub": str(user_id),
        "exp": expire
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Return the user id carried by a valid token, raising AuthRequired otherwise."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Token has expired")
        raise AuthRequired("Token has expired")
    except jwt.PyJWTError as e:
        logger.debug(f"JWT Error: {str(e)}")
        raise AuthRequired()

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.debug("No usable user id found in token payload")
        raise AuthRequired()


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Get the current authenticated user from the JWT token in the request.

    Raises:
        AuthRequired: If the header is missing, the token is invalid or expired,
            or the user no longer exists
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        logger.debug("No Bearer token found in Authorization header")
        raise AuthRequired()

    user_id = decode_access_token(auth_header.split(" ", 1)[1].strip())
    user = db.get(User, user_id)
    if user is None:
        logger.debug(f"Token refers to unknown user {user_id}")
        raise AuthRequired()
    return user
