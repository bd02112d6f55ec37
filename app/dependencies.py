"""Authentication dependencies and cookie helpers for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.errors import AuthenticationError, AuthorizationError
from app.models.user import ROLE_ADMIN
from app.services.jwt import TokenPair, get_jwt_service
from app.services.users import get_user_store

ACCESS_COOKIE_NAME = "accessToken"
REFRESH_COOKIE_NAME = "refreshToken"


@dataclass
class CurrentUser:
    """Authenticated user context."""

    user_id: int
    email: str
    full_name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_access_token(request: Request) -> str | None:
    """Bearer header first, then the access-token cookie."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return request.cookies.get(ACCESS_COOKIE_NAME)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Validate the access token and load its user. Raises 401 if invalid."""
    token = get_access_token(request)
    if not token:
        raise AuthenticationError("Unauthorized request")

    payload = get_jwt_service().verify_access(token)
    if not payload:
        raise AuthenticationError("Invalid or expired access token")

    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise AuthenticationError("Invalid access token") from None

    user = get_user_store().get_by_id(db, user_id)
    if not user:
        raise AuthenticationError("Invalid access token")

    return CurrentUser(user_id=user.id, email=user.email, full_name=user.full_name, role=user.role)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Allow only admins through. Raises 403 otherwise."""
    if not user.is_admin:
        raise AuthorizationError("Admin access required")
    return user


def _cookie_options() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "strict",
    }


def set_auth_cookies(response: Response, tokens: TokenPair) -> None:
    """Set both token cookies. Cookie lifetime is fixed and independent of token TTLs."""
    max_age = get_settings().COOKIE_MAX_AGE_DAYS * 24 * 60 * 60
    response.set_cookie(key=ACCESS_COOKIE_NAME, value=tokens.access_token, max_age=max_age, **_cookie_options())
    response.set_cookie(key=REFRESH_COOKIE_NAME, value=tokens.refresh_token, max_age=max_age, **_cookie_options())


def clear_auth_cookies(response: Response) -> None:
    """Clear both token cookies."""
    response.delete_cookie(key=ACCESS_COOKIE_NAME, **_cookie_options())
    response.delete_cookie(key=REFRESH_COOKIE_NAME, **_cookie_options())
