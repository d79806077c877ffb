"""Database package initialization."""

from .session import Base, engine, SessionLocal, get_db

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'get_db'
]
