from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from studybeats.auth import get_current_user
from studybeats.db.session import get_db
from studybeats.models.feedback import Feedback
from studybeats.models.user import User
from studybeats.schemas.feedback import FeedbackCreate
from studybeats.utils.logging import setup_logger

logger = setup_logger(__name__)

router = APIRouter()

RECENT_FEEDBACK_LIMIT = 10


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_feedback_handler(
    body: FeedbackCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record a rating for a recommended playlist."""
    feedback = Feedback(
        user_id=user.id,
        playlist_id=body.playlist_id,
        rating=body.rating,
        context=body.context
    )
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    logger.info(f"User {user.id} rated playlist {body.playlist_id}: {body.rating}")
    return feedback.to_dict()


@router.get("/my-feedback")
async def my_feedback_handler(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The current user's most recent feedback, newest first."""
    rows = db.execute(
        select(Feedback)
        .where(Feedback.user_id == user.id)
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        .limit(RECENT_FEEDBACK_LIMIT)
    ).scalars().all()
    return [row.to_dict() for row in rows]
