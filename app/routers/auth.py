"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import (
    REFRESH_COOKIE_NAME,
    CurrentUser,
    clear_auth_cookies,
    get_current_user,
    set_auth_cookies,
)
from app.rate_limit import limiter
from app.schemas.auth import AuthData, LoginRequest, RefreshTokenRequest, RegisterRequest, TokenData
from app.schemas.common import ApiResponse, api_response
from app.schemas.user import UserResponse
from app.services.auth import get_auth_service

router = APIRouter(prefix="/api/v1/users", tags=["Authentication"])


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
@limiter.limit("5/minute")
def register(
    request: Request, response: Response, body: RegisterRequest, db: Session = Depends(get_db)
) -> ApiResponse[AuthData]:
    """Register a new user account and open a session."""
    result = get_auth_service().register(db, body.full_name, body.email, body.password)
    set_auth_cookies(response, result.tokens)
    data = AuthData(
        user=UserResponse.model_validate(result.user),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )
    return api_response(data, "User registered successfully", status_code=201)


@router.post("/login", response_model=ApiResponse[AuthData])
@limiter.limit("10/minute")
def login(request: Request, response: Response, body: LoginRequest, db: Session = Depends(get_db)) -> ApiResponse[AuthData]:
    """Authenticate and receive a fresh token pair."""
    result = get_auth_service().login(db, body.email, body.password)
    set_auth_cookies(response, result.tokens)
    data = AuthData(
        user=UserResponse.model_validate(result.user),
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )
    return api_response(data, "User logged in successfully")


@router.post("/refresh-token", response_model=ApiResponse[TokenData])
@limiter.limit("30/minute")
def refresh_token(
    request: Request,
    response: Response,
    body: RefreshTokenRequest | None = None,
    db: Session = Depends(get_db),
) -> ApiResponse[TokenData]:
    """Rotate the token pair. The refresh token comes from the cookie, else the body."""
    incoming = request.cookies.get(REFRESH_COOKIE_NAME) or (body.refresh_token if body else None)
    tokens = get_auth_service().refresh(db, incoming)
    set_auth_cookies(response, tokens)
    data = TokenData(access_token=tokens.access_token, refresh_token=tokens.refresh_token)
    return api_response(data, "Access token refreshed")


@router.post("/logout", response_model=ApiResponse[dict])
def logout(
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[dict]:
    """Drop the stored refresh token and clear both cookies."""
    get_auth_service().logout(db, user.user_id)
    clear_auth_cookies(response)
    return api_response({}, "User logged out successfully")
