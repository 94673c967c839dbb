"""Field-level validation for incoming User data.

``validate_user`` checks every rule and returns all violations in field
order, so a client sees each problem with its payload in one response.
Nothing here touches storage.
"""
from __future__ import annotations

import re

from email_validator import EmailNotValidError, validate_email

from .domain.user import User
from .errors import FieldViolation, ValidationFailedError

PHONE_PATTERN = re.compile(r"\+?[0-9. ()-]{7,25}")
NAME_MIN, NAME_MAX = 2, 100


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_user(user: User) -> list[FieldViolation]:
    violations: list[FieldViolation] = []

    if _blank(user.name):
        violations.append(FieldViolation("name", "Name is required"))
    elif not NAME_MIN <= len(user.name.strip()) <= NAME_MAX:
        violations.append(FieldViolation("name", f"Name must be between {NAME_MIN} and {NAME_MAX} characters"))

    if _blank(user.email):
        violations.append(FieldViolation("email", "Email is required"))
    elif not is_valid_email(user.email):
        violations.append(FieldViolation("email", "Email must be valid"))

    if user.phone is not None and not PHONE_PATTERN.fullmatch(user.phone):
        violations.append(FieldViolation("phone", "Phone number is invalid"))

    if _blank(user.role):
        violations.append(FieldViolation("role", "Role is required"))

    return violations


def ensure_valid(user: User) -> None:
    """Raise ``ValidationFailedError`` carrying every violation found."""
    violations = validate_user(user)
    if violations:
        raise ValidationFailedError(violations)
