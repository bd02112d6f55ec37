"""Input validation helpers.

Validators return a ``ValidationResult`` instead of raising, so callers can
collect every violation and report them together.
"""

import re
from dataclasses import dataclass, field
from typing import Any

# Separators are mandatory inside the repeated groups; an optional one backtracks exponentially.
EMAIL_PATTERN = re.compile(r"^\w+([.-]\w+)*@\w+([.-]\w+)*(\.\w{2,3})+$", re.ASCII)
SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

PASSWORD_MIN_LENGTH = 8
FULL_NAME_MIN_LENGTH = 2
FULL_NAME_MAX_LENGTH = 100


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return ", ".join(self.errors)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_password(password: str) -> ValidationResult:
    """Check password strength. Every rule is checked so all violations are reported."""
    result = ValidationResult()
    if len(password) < PASSWORD_MIN_LENGTH:
        result.errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not re.search(r"[a-z]", password):
        result.errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", password):
        result.errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", password):
        result.errors.append("Password must contain at least one number")
    if not SPECIAL_CHARACTERS.search(password):
        result.errors.append("Password must contain at least one special character")
    return result


def validate_full_name(full_name: str) -> ValidationResult:
    result = ValidationResult()
    if len(full_name) < FULL_NAME_MIN_LENGTH:
        result.errors.append(f"Full name must be at least {FULL_NAME_MIN_LENGTH} characters")
    elif len(full_name) > FULL_NAME_MAX_LENGTH:
        result.errors.append(f"Full name cannot exceed {FULL_NAME_MAX_LENGTH} characters")
    return result


def validate_required_fields(data: dict[str, Any]) -> ValidationResult:
    """Report fields that are missing or blank, by their API name."""
    missing = [name for name, value in data.items() if value is None or (isinstance(value, str) and not value.strip())]
    result = ValidationResult()
    if missing:
        result.errors.append(f"Missing required fields: {', '.join(missing)}")
    return result
