"""Pydantic schemas for user profile and admin endpoints."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.common import CAMEL_CONFIG


class UserResponse(BaseModel):
    """Sanitized user: no password hash, no refresh token."""

    id: int
    email: str
    full_name: str
    role: str
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {**CAMEL_CONFIG, "from_attributes": True}


class UpdateProfileRequest(BaseModel):
    full_name: str | None = None
    email: str | None = None

    model_config = CAMEL_CONFIG


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_users: int
    limit: int

    model_config = CAMEL_CONFIG


class UserListData(BaseModel):
    users: list[UserResponse]
    pagination: Pagination

    model_config = CAMEL_CONFIG
