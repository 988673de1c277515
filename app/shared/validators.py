"""Shared validation utilities"""

import re
from typing import Optional

from .errors import ValidationError


def parse_int_id(value: str, label: str = "booking") -> int:
    """
    Parse a numeric path identifier.

    Args:
        value: Raw path segment
        label: Resource name used in the error message

    Returns:
        The identifier as an int

    Raises:
        ValidationError: If the value is not a positive integer
    """
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} ID") from None
    if parsed <= 0:
        raise ValidationError(f"Invalid {label} ID")
    return parsed


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number.

    Keeps a leading "+" and digits only; accepts 7 to 15 digits (E.164 range).

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    has_plus = phone.strip().startswith("+")
    digits = re.sub(r"\D", "", phone)

    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must contain between 7 and 15 digits")

    return f"+{digits}" if has_plus else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def slugify(value: str) -> str:
    """Lowercase a name and collapse runs of non-alphanumerics into single dashes."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower())
    return slug.strip("-")


def display_name_from_email(email: Optional[str]) -> str:
    """Local part of an email address, used as a placeholder display name."""
    if not email:
        return "Client"
    return email.split("@", 1)[0] or "Client"
