"""Authentication service: registration, login and the session lifecycle.

A session moves Anonymous -> Authenticated on register/login, stays
Authenticated across refreshes (each one rotates the stored refresh token)
and returns to Anonymous on logout. Deactivating an account clears its refresh
token, so the session ends at its next refresh attempt.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from app.models.user import User
from app.services.jwt import JWTService, TokenPair, get_jwt_service
from app.services.password import PasswordHasher, get_password_hasher
from app.services.users import UserStore, get_user_store
from app.services.validation import (
    ValidationResult,
    normalize_email,
    validate_email,
    validate_full_name,
    validate_password,
    validate_required_fields,
)

logger = logging.getLogger("account_hub")

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH_TOKEN = "Invalid refresh token"


@dataclass
class SessionResult:
    """User and freshly issued token pair from register/login."""

    user: User
    tokens: TokenPair


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.is_valid:
        raise ValidationError(result.message, errors=result.errors)


class AuthService:
    """Handles user registration, authentication and token rotation."""

    def __init__(
        self,
        jwt_service: JWTService | None = None,
        hasher: PasswordHasher | None = None,
        store: UserStore | None = None,
    ) -> None:
        self.jwt = jwt_service or get_jwt_service()
        self.hasher = hasher or get_password_hasher()
        self.store = store or get_user_store()

    def _issue_pair(self, db: Session, user: User) -> TokenPair:
        """Mint a new pair and store its refresh half on the user."""
        try:
            tokens = self.jwt.issue_pair(user)
        except Exception:
            logger.exception("Token generation failed for user %s", user.id)
            raise InternalError("Something went wrong while generating tokens") from None
        self.store.set_refresh_token(db, user, tokens.refresh_token)
        return tokens

    def _validated_email(self, email: str) -> str:
        email = normalize_email(email)
        if not validate_email(email):
            raise ValidationError("Invalid email format")
        return email

    def register(self, db: Session, full_name: str | None, email: str | None, password: str | None) -> SessionResult:
        """Create an account and open a session for it."""
        _raise_if_invalid(validate_required_fields({"fullName": full_name, "email": email, "password": password}))

        full_name = full_name.strip()
        email = self._validated_email(email)
        _raise_if_invalid(validate_password(password))
        _raise_if_invalid(validate_full_name(full_name))

        if self.store.email_taken(db, email):
            raise ConflictError("User with this email already exists")

        try:
            user = self.store.create(db, email=email, full_name=full_name, password_hash=self.hasher.hash(password))
        except IntegrityError:
            db.rollback()
            raise ConflictError("User with this email already exists") from None
        tokens = self._issue_pair(db, user)
        logger.info("Registered user %s", user.id)
        return SessionResult(user=user, tokens=tokens)

    def login(self, db: Session, email: str | None, password: str | None) -> SessionResult:
        """Authenticate by email and password and rotate the user's token pair."""
        _raise_if_invalid(validate_required_fields({"email": email, "password": password}))
        email = self._validated_email(email)

        user = self.store.get_by_email(db, email)
        # Unknown email and wrong password are indistinguishable to the caller.
        if not user or not self.hasher.verify(password, user.password_hash):
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not user.is_active:
            raise AuthorizationError("Your account has been deactivated. Please contact administrator.")

        user.last_login_at = datetime.utcnow()
        tokens = self._issue_pair(db, user)
        logger.info("User %s logged in", user.id)
        return SessionResult(user=user, tokens=tokens)

    def refresh(self, db: Session, refresh_token: str | None) -> TokenPair:
        """Exchange a live refresh token for a new pair. The presented token is spent."""
        if not refresh_token:
            raise AuthenticationError("Unauthorized request")

        try:
            payload = self.jwt.verify_refresh(refresh_token)
            if not payload:
                raise AuthenticationError(INVALID_REFRESH_TOKEN)

            user = self.store.get_by_id(db, int(payload["sub"]))
            if not user:
                raise AuthenticationError(INVALID_REFRESH_TOKEN)

            if not user.is_active:
                logger.warning("Rejected refresh for deactivated user %s", user.id)
                raise AuthenticationError(INVALID_REFRESH_TOKEN)

            if refresh_token != user.refresh_token:
                logger.warning("Rejected superseded refresh token for user %s", user.id)
                raise AuthenticationError("Refresh token is expired or used")

            tokens = self.jwt.issue_pair(user)
            if not self.store.rotate_refresh_token(db, user.id, refresh_token, tokens.refresh_token):
                logger.warning("Concurrent refresh lost the rotation race for user %s", user.id)
                raise AuthenticationError("Refresh token is expired or used")
        except AuthenticationError:
            raise
        except Exception:
            logger.exception("Unexpected error while refreshing tokens")
            raise AuthenticationError(INVALID_REFRESH_TOKEN) from None

        return tokens

    def logout(self, db: Session, user_id: int) -> None:
        """End the user's session. Safe to call repeatedly."""
        self.store.clear_refresh_token(db, user_id)
        logger.info("User %s logged out", user_id)

    def get_profile(self, db: Session, user_id: int) -> User:
        user = self.store.get_by_id(db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, db: Session, user_id: int, full_name: str | None, email: str | None) -> User:
        """Update full name and/or email. At least one must be given."""
        if not full_name and not email:
            raise ValidationError("At least one field (fullName or email) is required")

        user = self.get_profile(db, user_id)

        if full_name:
            full_name = full_name.strip()
            _raise_if_invalid(validate_full_name(full_name))
            user.full_name = full_name

        if email:
            email = self._validated_email(email)
            if self.store.email_taken(db, email, exclude_user_id=user.id):
                db.rollback()
                raise ConflictError("Email is already in use")
            user.email = email

        try:
            return self.store.save(db, user)
        except IntegrityError:
            db.rollback()
            raise ConflictError("Email is already in use") from None

    def change_password(
        self, db: Session, user_id: int, current_password: str | None, new_password: str | None
    ) -> None:
        """Replace the password. The current refresh token stays valid."""
        _raise_if_invalid(
            validate_required_fields({"currentPassword": current_password, "newPassword": new_password})
        )
        user = self.get_profile(db, user_id)

        if not self.hasher.verify(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        _raise_if_invalid(validate_password(new_password))

        if current_password == new_password:
            raise ValidationError("New password must be different from current password")

        user.password_hash = self.hasher.hash(new_password)
        self.store.save(db, user)
        logger.info("User %s changed password", user.id)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
