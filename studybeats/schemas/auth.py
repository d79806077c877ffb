from typing import Optional
from pydantic import BaseModel, Field, field_validator


class Credentials(BaseModel):
    username: str = Field(min_length=3, max_length=255)
    # bcrypt only hashes the first 72 bytes
    password: str = Field(min_length=6, max_length=72)

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, v):
        # Usernames are trimmed before the length check
        return v.strip() if isinstance(v, str) else v

    @field_validator('password')
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode('utf-8')) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str


class SpotifyCodeRequest(BaseModel):
    code: str = Field(min_length=1)


class SpotifyCallbackResponse(BaseModel):
    token: str
    access_token: str
    refresh_token: Optional[str] = None


class AuthUrlResponse(BaseModel):
    authUrl: str
