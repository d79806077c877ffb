"""Database models."""
from studybeats.models.user import User
from studybeats.models.feedback import Feedback

__all__ = ['User', 'Feedback']
