"""Pydantic schemas for authentication endpoints.

Request fields are optional at the schema level; missing or blank values are
reported by the service as a single "Missing required fields" error.
"""

from pydantic import BaseModel

from app.schemas.common import CAMEL_CONFIG
from app.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    full_name: str | None = None
    email: str | None = None
    password: str | None = None

    model_config = CAMEL_CONFIG


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None

    model_config = CAMEL_CONFIG


class RefreshTokenRequest(BaseModel):
    refresh_token: str | None = None

    model_config = CAMEL_CONFIG


class ChangePasswordRequest(BaseModel):
    current_password: str | None = None
    new_password: str | None = None

    model_config = CAMEL_CONFIG


class TokenData(BaseModel):
    access_token: str
    refresh_token: str

    model_config = CAMEL_CONFIG


class AuthData(TokenData):
    user: UserResponse
