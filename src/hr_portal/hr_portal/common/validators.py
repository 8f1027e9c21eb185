from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    """Syntax check only (no DNS lookup); returns the lower-cased address."""
    value = require_non_empty(value, field_name)
    try:
        checked = validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"{field_name} is not a valid address: {e}") from e
    return checked.normalized.lower()
