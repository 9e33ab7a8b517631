"""Shared validation utilities"""

import re
from typing import Optional
from urllib.parse import urlparse

# French phone numbers: 0X XX XX XX XX, +33 X XX XX XX XX or 0033..., separators allowed
FR_PHONE_PATTERN = re.compile(r"^(?:(?:\+|00)33|0)\s*[1-9](?:[\s.-]*\d{2}){4}$")
POSTAL_CODE_PATTERN = re.compile(r"^\d{5}$")
SIRET_PATTERN = re.compile(r"^\d{14}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

PASSWORD_SPECIAL_CHARACTERS = "@$!%*#?&+"
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*#?&+])[A-Za-z\d@$!%*#?&+]{8,}$")


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

    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email


def validate_password(password: str) -> str:
    """
    Enforce the account password policy.

    At least 8 characters drawn from letters, digits and @$!%*#?&+, with at
    least one letter, one digit and one special character.
    """
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")

    if not PASSWORD_PATTERN.match(password):
        raise ValueError(
            "Password must contain at least one letter, one digit and one special "
            f"character ({PASSWORD_SPECIAL_CHARACTERS})"
        )

    return password


def validate_fr_phone(phone: Optional[str]) -> Optional[str]:
    """Validate a French phone number, returned stripped but otherwise as typed"""
    if phone is None:
        return phone

    phone = phone.strip()
    if not FR_PHONE_PATTERN.match(phone):
        raise ValueError("Invalid phone number")

    return phone


def validate_postal_code(postal_code: Optional[str]) -> Optional[str]:
    if postal_code is None:
        return postal_code

    postal_code = postal_code.strip()
    if not POSTAL_CODE_PATTERN.match(postal_code):
        raise ValueError("Postal code must contain 5 digits")

    return postal_code


def validate_siret(siret: Optional[str]) -> Optional[str]:
    """SIRET is optional; an empty string clears it"""
    if not siret:
        return siret

    siret = siret.strip()
    if not SIRET_PATTERN.match(siret):
        raise ValueError("Invalid SIRET number")

    return siret


def validate_website(website: Optional[str]) -> Optional[str]:
    """Website is optional; an empty string clears it"""
    if not website:
        return website

    website = website.strip()
    parsed = urlparse(website)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid website URL")

    return website


def validate_time(value: str) -> str:
    """Validate a 24h HH:MM time of day"""
    if not TIME_PATTERN.match(value or ""):
        raise ValueError("Invalid time format (HH:MM)")
    return value


def time_to_minutes(value: str) -> int:
    """Convert an HH:MM string to minutes since midnight"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)
