"""JWT Token Service."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import Settings, get_settings
from app.models.user import User

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenConfig:
    """Secrets and lifetimes for both token classes. Read-only after start-up."""

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=60)
    refresh_ttl: timedelta = timedelta(days=10)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        return cls(
            access_secret=settings.ACCESS_TOKEN_SECRET,
            refresh_secret=settings.REFRESH_TOKEN_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str


class JWTService:
    """Handles creation and validation of access and refresh tokens."""

    def __init__(self, config: TokenConfig) -> None:
        self.config = config

    def _encode(self, claims: dict[str, Any], secret: str, ttl: timedelta, token_type: str) -> str:
        now = datetime.utcnow()
        payload = {
            **claims,
            "type": token_type,
            # Unique per token so two pairs minted in the same second never collide.
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.config.algorithm)

    def _decode(self, token: str, secret: str, token_type: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.config.algorithm])
        except JWTError:
            return None
        if payload.get("type") != token_type or "sub" not in payload:
            return None
        return payload

    def issue_access(self, user_id: int, email: str, full_name: str, role: str) -> str:
        """Create a short-lived access token carrying the user's identity claims."""
        claims = {"sub": str(user_id), "email": email, "fullName": full_name, "role": role}
        return self._encode(claims, self.config.access_secret, self.config.access_ttl, ACCESS_TOKEN_TYPE)

    def issue_refresh(self, user_id: int) -> str:
        """Create a long-lived refresh token carrying only the user id."""
        return self._encode(
            {"sub": str(user_id)}, self.config.refresh_secret, self.config.refresh_ttl, REFRESH_TOKEN_TYPE
        )

    def issue_pair(self, user: User) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access(user.id, user.email, user.full_name, user.role),
            refresh_token=self.issue_refresh(user.id),
        )

    def verify_access(self, token: str) -> dict[str, Any] | None:
        """Decode and validate an access token. Returns None if invalid or expired."""
        return self._decode(token, self.config.access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a refresh token. Returns None if invalid or expired."""
        return self._decode(token, self.config.refresh_secret, REFRESH_TOKEN_TYPE)


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService(TokenConfig.from_settings(get_settings()))
    return _jwt_service
