"""Admin service for listing and (de)activating user accounts."""

import logging
import math
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.errors import AuthorizationError, NotFoundError, ValidationError
from app.models.user import User
from app.services.users import UserStore, get_user_store

logger = logging.getLogger("account_hub")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_PAGE = 1_000_000


def parse_positive_int(value: str | None, default: int, maximum: int | None = None) -> int:
    """Parse a query value, falling back to ``default`` when missing, non-numeric or < 1.

    Values above ``maximum`` are clamped to it.
    """
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    if parsed < 1:
        return default
    if maximum is not None and parsed > maximum:
        return maximum
    return parsed


def parse_active_filter(value: str | None) -> bool | None:
    """``"true"`` selects active users, any other non-empty value inactive ones."""
    if not value:
        return None
    return value.strip().lower() == "true"


@dataclass
class UserPage:
    users: list[User]
    current_page: int
    total_pages: int
    total_users: int
    limit: int


class AdminService:
    """Account administration. Callers must already be authorized as admin."""

    def __init__(self, store: UserStore | None = None) -> None:
        self.store = store or get_user_store()

    def list_users(
        self,
        db: Session,
        page: str | None = None,
        limit: str | None = None,
        search: str | None = None,
        is_active: str | None = None,
        role: str | None = None,
    ) -> UserPage:
        """List users with filters and offset pagination."""
        page_number = parse_positive_int(page, DEFAULT_PAGE, MAX_PAGE)
        page_size = parse_positive_int(limit, DEFAULT_LIMIT, MAX_LIMIT)
        users, total = self.store.list_users(
            db,
            search=search.strip() if search else None,
            is_active=parse_active_filter(is_active),
            role=role,
            limit=page_size,
            offset=(page_number - 1) * page_size,
        )
        return UserPage(
            users=users,
            current_page=page_number,
            total_pages=math.ceil(total / page_size),
            total_users=total,
            limit=page_size,
        )

    def _get_user(self, db: Session, user_id: int) -> User:
        user = self.store.get_by_id(db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def activate(self, db: Session, user_id: int) -> User:
        user = self._get_user(db, user_id)
        if user.is_active:
            raise ValidationError("User is already active")

        user.is_active = True
        self.store.save(db, user)
        logger.info("Activated user %s", user.id)
        return user

    def deactivate(self, db: Session, admin_id: int, user_id: int) -> User:
        """Deactivate an account and end its session by dropping the refresh token."""
        user = self._get_user(db, user_id)
        if user.id == admin_id:
            raise AuthorizationError("You cannot deactivate your own account")
        if not user.is_active:
            raise ValidationError("User is already deactivated")

        user.is_active = False
        user.refresh_token = None
        self.store.save(db, user)
        logger.info("Deactivated user %s by admin %s", user.id, admin_id)
        return user


_admin_service: AdminService | None = None


def get_admin_service() -> AdminService:
    """Get singleton admin service instance."""
    global _admin_service
    if _admin_service is None:
        _admin_service = AdminService()
    return _admin_service
