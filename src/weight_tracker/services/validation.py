"""Input validation for weights, profile fields and credentials."""

import math
import re

from weight_tracker.domain.validation import ValidationResult

MAX_WEIGHT_KG = 500
MAX_HEIGHT_CM = 300
MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 3
MIN_NAME_LENGTH = 2

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")

_OK = ValidationResult(valid=True)


class InvalidInputError(ValueError):
    """Raised when a service receives input that fails validation."""


def require_valid(result: ValidationResult) -> None:
    """Raise ``InvalidInputError`` for a failed validation result."""
    if not result.valid:
        raise InvalidInputError(result.message or "Invalid input")


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def validate_weight(value: object) -> ValidationResult:
    """Validate a weight in kilograms."""
    if not _is_number(value):
        return ValidationResult(valid=False, message="Please enter a valid number")
    if value <= 0:
        return ValidationResult(valid=False, message="Weight must be greater than 0")
    if value > MAX_WEIGHT_KG:
        return ValidationResult(
            valid=False, message=f"Weight must be less than {MAX_WEIGHT_KG} kg"
        )
    return _OK


def validate_goal_weight(value: object) -> ValidationResult:
    """Validate a goal weight in kilograms."""
    if not _is_number(value) or value <= 0 or value > MAX_WEIGHT_KG:
        return ValidationResult(
            valid=False,
            message=f"Please enter a valid goal weight (1-{MAX_WEIGHT_KG} kg)",
        )
    return _OK


def validate_height(value: object) -> ValidationResult:
    """Validate a height in centimeters."""
    if not _is_number(value) or value <= 0 or value > MAX_HEIGHT_CM:
        return ValidationResult(
            valid=False,
            message=f"Please enter a valid height (1-{MAX_HEIGHT_CM} cm)",
        )
    return _OK


def validate_email(email: str | None) -> ValidationResult:
    if not email:
        return ValidationResult(valid=False, message="Email is required")
    if not _EMAIL_RE.match(email):
        return ValidationResult(valid=False, message="Invalid email format")
    return _OK


def validate_password(password: str | None) -> ValidationResult:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return ValidationResult(
            valid=False,
            message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )
    return _OK


def validate_username(username: str | None) -> ValidationResult:
    """Validate a username: letters, digits, underscores and hyphens."""
    cleaned = (username or "").strip()
    if len(cleaned) < MIN_USERNAME_LENGTH:
        return ValidationResult(
            valid=False,
            message=f"Username must be at least {MIN_USERNAME_LENGTH} characters",
        )
    if not _USERNAME_RE.match(cleaned):
        return ValidationResult(
            valid=False,
            message=(
                "Username can only contain letters, numbers, "
                "underscores, and hyphens"
            ),
        )
    return _OK


def validate_name(label: str, value: str | None) -> ValidationResult:
    """Validate an optional first or last name."""
    if not value:
        return _OK
    cleaned = value.strip()
    if len(cleaned) < MIN_NAME_LENGTH:
        return ValidationResult(
            valid=False,
            message=f"{label} must be at least {MIN_NAME_LENGTH} characters",
        )
    if not _NAME_RE.match(cleaned):
        return ValidationResult(
            valid=False,
            message=(
                f"{label} can only contain letters, spaces, hyphens, "
                "and apostrophes"
            ),
        )
    return _OK
