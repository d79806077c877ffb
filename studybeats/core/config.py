"""Application configuration."""
from functools import lru_cache
from typing import Any, List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def clean_int_value(v: Any) -> int:
    """Clean integer values from environment variables."""
    if isinstance(v, str):
        # Remove any comments and whitespace
        v = v.split('#')[0].strip()
    return int(v)


class Settings(BaseSettings):
    # Application settings
    PROJECT_NAME: str = "StudyBeats Backend"
    API_PREFIX: str = "/api"
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    APP_VERSION: str = "0.1.0"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    DEBUG: bool = False
    RELOAD: bool = False

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Security settings
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Database settings
    DATABASE_URL: str = "sqlite:///./studybeats.db"

    # Spotify OAuth settings
    SPOTIFY_CLIENT_ID: Optional[str] = None
    SPOTIFY_CLIENT_SECRET: Optional[str] = None
    SPOTIFY_REDIRECT_URI: str = "http://localhost:3000/callback"

    # Spotify Web API behaviour
    SPOTIFY_REQUEST_TIMEOUT: int = 10  # seconds, per provider call
    SPOTIFY_MAX_RETRIES: int = 0
    SPOTIFY_TRACK_PAGE_CAP: int = 200

    # Recommendation settings
    DEFAULT_RESULT_LIMIT: int = 4
    PREVIEW_TRACKS_PER_PLAYLIST: int = 6

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Validators for integer fields
    _clean_ints = field_validator(
        'PORT', 'ACCESS_TOKEN_EXPIRE_MINUTES', 'SPOTIFY_REQUEST_TIMEOUT',
        'SPOTIFY_MAX_RETRIES', 'SPOTIFY_TRACK_PAGE_CAP', 'DEFAULT_RESULT_LIMIT',
        'PREVIEW_TRACKS_PER_PLAYLIST', mode='before'
    )(clean_int_value)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
