"""User persistence: lookups, writes and the atomic refresh-token operations.

Nothing here hashes passwords; callers pass a ready ``password_hash``.
"""

from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import ROLE_USER, User


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UserStore:
    """Queries and updates over the user table."""

    def get_by_id(self, db: Session, user_id: int) -> User | None:
        return db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email).first()

    def email_taken(self, db: Session, email: str, exclude_user_id: int | None = None) -> bool:
        query = db.query(User.id).filter(User.email == email)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    def create(self, db: Session, email: str, full_name: str, password_hash: str, role: str = ROLE_USER) -> User:
        user = User(
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def save(self, db: Session, user: User) -> User:
        db.commit()
        db.refresh(user)
        return user

    def set_refresh_token(self, db: Session, user: User, token: str | None) -> None:
        """Unconditionally replace (or clear) the stored refresh token."""
        user.refresh_token = token
        db.commit()

    def rotate_refresh_token(self, db: Session, user_id: int, presented: str, new_token: str) -> bool:
        """Swap the stored refresh token only if it still equals ``presented``.

        Single UPDATE ... WHERE, so of two concurrent rotations with the same
        token exactly one sees a matched row. Inactive users never match.
        """
        updated = (
            db.query(User)
            .filter(User.id == user_id, User.refresh_token == presented, User.is_active.is_(True))
            .update(
                {User.refresh_token: new_token, User.updated_at: datetime.utcnow()},
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1

    def clear_refresh_token(self, db: Session, user_id: int) -> None:
        db.query(User).filter(User.id == user_id).update(
            {User.refresh_token: None, User.updated_at: datetime.utcnow()},
            synchronize_session=False,
        )
        db.commit()

    def list_users(
        self,
        db: Session,
        search: str | None = None,
        is_active: bool | None = None,
        role: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[User], int]:
        """List users newest first with optional filters. Returns (users, total_count)."""
        query = db.query(User)

        if is_active is not None:
            query = query.filter(User.is_active == is_active)
        if role:
            query = query.filter(User.role == role)
        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.filter(
                or_(User.full_name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\"))
            )

        total = query.count()
        users = query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit).all()
        return users, total


_user_store: UserStore | None = None


def get_user_store() -> UserStore:
    """Get singleton user store instance."""
    global _user_store
    if _user_store is None:
        _user_store = UserStore()
    return _user_store
