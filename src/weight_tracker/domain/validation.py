"""Domain models for input validation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a single user input."""

    valid: bool
    message: str | None = None
