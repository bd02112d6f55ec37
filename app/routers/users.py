"""Profile endpoints for the signed-in user."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.schemas.auth import ChangePasswordRequest
from app.schemas.common import ApiResponse, api_response
from app.schemas.user import UpdateProfileRequest, UserResponse
from app.services.auth import get_auth_service

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/current-user", response_model=ApiResponse[UserResponse])
def current_user(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    record = get_auth_service().get_profile(db, user.user_id)
    return api_response(UserResponse.model_validate(record), "User fetched successfully")


@router.get("/profile", response_model=ApiResponse[UserResponse])
def get_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    record = get_auth_service().get_profile(db, user.user_id)
    return api_response(UserResponse.model_validate(record), "Profile fetched successfully")


@router.patch("/profile", response_model=ApiResponse[UserResponse])
def update_profile(
    body: UpdateProfileRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """Update full name and/or email."""
    record = get_auth_service().update_profile(db, user.user_id, body.full_name, body.email)
    return api_response(UserResponse.model_validate(record), "Profile updated successfully")


@router.post("/change-password", response_model=ApiResponse[dict])
def change_password(
    body: ChangePasswordRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[dict]:
    get_auth_service().change_password(db, user.user_id, body.current_password, body.new_password)
    return api_response({}, "Password changed successfully")
