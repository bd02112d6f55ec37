"""Tests for password hashing, input validation, tokens and the admin script."""

from datetime import timedelta

import pytest

from app.services.jwt import JWTService, TokenConfig
from app.services.password import PasswordHasher
from app.services.validation import (
    normalize_email,
    validate_email,
    validate_full_name,
    validate_password,
    validate_required_fields,
)


@pytest.fixture(name="jwt_service")
def jwt_service_fixture() -> JWTService:
    return JWTService(TokenConfig(access_secret="access-secret", refresh_secret="refresh-secret"))


class TestPasswordHasher:
    """Tests for bcrypt hashing."""

    def test_hash_and_verify(self):
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("Abc123!@")
        assert hashed != "Abc123!@"
        assert hasher.verify("Abc123!@", hashed)
        assert not hasher.verify("Abc123!#", hashed)
        assert not hasher.verify("", hashed)

    def test_hashes_are_salted(self):
        hasher = PasswordHasher(rounds=4)
        assert hasher.hash("Abc123!@") != hasher.hash("Abc123!@")

    def test_verify_malformed_hash_returns_false(self):
        assert PasswordHasher(rounds=4).verify("Abc123!@", "not-a-bcrypt-hash") is False

    def test_long_password(self):
        hasher = PasswordHasher(rounds=4)
        long_password = "Aa1!" * 40
        assert hasher.verify(long_password, hasher.hash(long_password))


class TestValidation:
    """Tests for input validators."""

    def test_weak_password_rules_reported_together(self):
        result = validate_password("abc12345")
        assert not result.is_valid
        assert result.errors == [
            "Password must contain at least one uppercase letter",
            "Password must contain at least one special character",
        ]

    def test_strong_password(self):
        assert validate_password("Abc123!@").is_valid

    def test_every_rule_fails_on_empty(self):
        assert len(validate_password("").errors) == 5

    @pytest.mark.parametrize(
        "email",
        ["user@example.com", "first.last@sub.example.org", "a-b@example.co.uk", "user_1@mail.io"],
    )
    def test_valid_emails(self, email: str):
        assert validate_email(email)

    @pytest.mark.parametrize(
        "email",
        [
            "plainaddress",
            "@example.com",
            "user@",
            "user@example",
            "user@@example.com",
            "user@example.comxyz",
            "josé@exämple.com",
            "user@例え.jp",
        ],
    )
    def test_invalid_emails(self, email: str):
        assert not validate_email(email)

    def test_email_check_does_not_backtrack_forever(self):
        assert not validate_email("a" * 5000 + "!")

    def test_normalize_email(self):
        assert normalize_email("  MiXeD@Example.COM ") == "mixed@example.com"

    def test_full_name_bounds(self):
        assert not validate_full_name("A").is_valid
        assert validate_full_name("Al").is_valid
        assert not validate_full_name("x" * 101).is_valid

    def test_required_fields(self):
        result = validate_required_fields({"email": " ", "password": None, "fullName": "Ok"})
        assert result.message == "Missing required fields: email, password"
        assert validate_required_fields({"email": "a@b.co"}).is_valid


class TestTokens:
    """Tests for access/refresh token issue and verification."""

    def test_access_token_claims(self, jwt_service: JWTService):
        token = jwt_service.issue_access(7, "a@b.co", "Ann Bee", "admin")
        payload = jwt_service.verify_access(token)
        assert payload["sub"] == "7"
        assert payload["email"] == "a@b.co"
        assert payload["fullName"] == "Ann Bee"
        assert payload["role"] == "admin"

    def test_refresh_token_carries_only_id(self, jwt_service: JWTService):
        payload = jwt_service.verify_refresh(jwt_service.issue_refresh(7))
        assert payload["sub"] == "7"
        assert "email" not in payload
        assert "role" not in payload

    def test_token_classes_do_not_cross(self, jwt_service: JWTService):
        assert jwt_service.verify_refresh(jwt_service.issue_access(7, "a@b.co", "Ann Bee", "user")) is None
        assert jwt_service.verify_access(jwt_service.issue_refresh(7)) is None

    def test_type_claim_checked_even_with_shared_secret(self):
        service = JWTService(TokenConfig(access_secret="same", refresh_secret="same"))
        assert service.verify_access(service.issue_refresh(1)) is None

    def test_tokens_are_unique(self, jwt_service: JWTService):
        assert jwt_service.issue_refresh(7) != jwt_service.issue_refresh(7)

    def test_wrong_secret(self, jwt_service: JWTService):
        other = JWTService(TokenConfig(access_secret="other", refresh_secret="other-refresh"))
        assert other.verify_access(jwt_service.issue_access(7, "a@b.co", "Ann Bee", "user")) is None

    def test_expired_access_token(self):
        service = JWTService(
            TokenConfig(access_secret="a", refresh_secret="r", access_ttl=timedelta(seconds=-1))
        )
        assert service.verify_access(service.issue_access(7, "a@b.co", "Ann Bee", "user")) is None

    def test_malformed_token(self, jwt_service: JWTService):
        assert jwt_service.verify_access("garbage") is None
        assert jwt_service.verify_refresh("") is None


class TestCreateAdminScript:
    """Tests for the admin bootstrap script."""

    def test_rejects_weak_password(self, capsys):
        from app.scripts.create_admin import main

        assert main(["boss@example.com", "weak", "The Boss"]) == 1
        assert "Password must" in capsys.readouterr().err

    def test_creates_admin(self, capsys):
        from app.database import SessionLocal
        from app.models.user import ROLE_ADMIN, User
        from app.scripts.create_admin import main

        assert main(["Script.Admin@Example.com", "Abc123!@", "Script Admin"]) == 0
        db = SessionLocal()
        try:
            user = db.query(User).filter(User.email == "script.admin@example.com").first()
            assert user.role == ROLE_ADMIN
        finally:
            db.close()

        assert main(["script.admin@example.com", "Abc123!@", "Script Admin"]) == 1
