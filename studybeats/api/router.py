"""API router."""
from fastapi import APIRouter

from studybeats.api import auth, feedback, spotify

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(spotify.router, prefix="/spotify", tags=["spotify"])
api_router.include_router(feedback.router, prefix="/feedback", tags=["feedback"])
