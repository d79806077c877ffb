from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studybeats.auth import get_current_user
from studybeats.db.session import get_db
from studybeats.models.user import User
from studybeats.schemas.auth import Credentials, LoginRequest, TokenResponse
from studybeats.services import auth_service

router = APIRouter()


@router.post("/signup", response_model=TokenResponse)
async def signup_handler(body: Credentials, db: Session = Depends(get_db)):
    """Create a local account."""
    return TokenResponse(token=auth_service.signup(db, body.username, body.password))


@router.post("/login", response_model=TokenResponse)
async def login_handler(body: LoginRequest, db: Session = Depends(get_db)):
    """Log in with username and password."""
    return TokenResponse(token=auth_service.login(db, body.username, body.password))


@router.get("/me")
async def me_handler(user: User = Depends(get_current_user)):
    """Profile of the current user, including Spotify connection status."""
    return user.to_dict()
