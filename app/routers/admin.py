"""Admin endpoints for managing user accounts."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, require_admin
from app.schemas.common import ApiResponse, api_response
from app.schemas.user import Pagination, UserListData, UserResponse
from app.services.admin import get_admin_service

router = APIRouter(prefix="/api/v1/users/admin", tags=["Admin"])


@router.get("/users", response_model=ApiResponse[UserListData])
def list_users(
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    is_active: str | None = Query(None, alias="isActive"),
    role: str | None = None,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[UserListData]:
    """List users with search, filters and pagination."""
    result = get_admin_service().list_users(db, page=page, limit=limit, search=search, is_active=is_active, role=role)
    data = UserListData(
        users=[UserResponse.model_validate(u) for u in result.users],
        pagination=Pagination(
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_users=result.total_users,
            limit=result.limit,
        ),
    )
    return api_response(data, "Users fetched successfully")


@router.patch("/users/{user_id}/activate", response_model=ApiResponse[UserResponse])
def activate_user(
    user_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    user = get_admin_service().activate(db, user_id)
    return api_response(UserResponse.model_validate(user), "User activated successfully")


@router.patch("/users/{user_id}/deactivate", response_model=ApiResponse[UserResponse])
def deactivate_user(
    user_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """Deactivate an account and end its session."""
    user = get_admin_service().deactivate(db, admin.user_id, user_id)
    return api_response(UserResponse.model_validate(user), "User deactivated successfully")
