"""Password hashing."""

import bcrypt

from app.config import get_settings

# bcrypt ignores everything past 72 bytes and newer releases refuse longer input.
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """One-way salted bcrypt hashing with a fixed cost factor."""

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds if rounds is not None else get_settings().BCRYPT_ROUNDS

    def hash(self, plain_password: str) -> str:
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Check a plain password against a stored hash. Never raises."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False


_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher instance."""
    global _hasher
    if _hasher is None:
        _hasher = PasswordHasher()
    return _hasher
